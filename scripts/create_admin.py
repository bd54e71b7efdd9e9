"""
Create the bootstrap admin account.

Credentials come from ADMIN_NAME / ADMIN_EMAIL / ADMIN_PASSWORD, with
development defaults. Running it again leaves an existing account alone.
"""
import os
import sys

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Setup Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

import django
django.setup()

from apps.accounts.models import User
from apps.accounts.services import create_admin
from apps.accounts.validators import normalize_email, password_policy_errors


def main():
    name = os.getenv('ADMIN_NAME', 'Admin GreenZest')
    email = normalize_email(os.getenv('ADMIN_EMAIL', 'admin@greenzest.com'))
    password = os.getenv('ADMIN_PASSWORD', 'Admin123!')

    existing = User.objects.filter(email__iexact=email).first()
    if existing:
        print("Admin user already exists!")
        print(f"  Email: {existing.email}")
        print(f"  Role:  {existing.role}")
        return 0

    errors = password_policy_errors(password)
    if errors:
        print("ADMIN_PASSWORD does not satisfy the password policy:")
        for error in errors:
            print(f"  - {error}")
        return 1

    admin = create_admin(name, email, password)
    print("Admin user created successfully!")
    print(f"  Email: {admin.email}")
    print(f"  Role:  {admin.role}")
    print("\nYou can now log in with these credentials to access the admin dashboard.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
