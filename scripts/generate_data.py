"""
Demo Data Generator for the GreenZest storefront

Seeds catalog products, customers with reviews and comments, and orders
spread over the last few months. Orders go through the same services as
the API, so stock, loyalty points and notifications stay consistent.
"""
import os
import sys
import random
from datetime import timedelta
from decimal import Decimal

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Setup Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

import django
django.setup()

from django.utils import timezone
from faker import Faker

from apps.accounts.models import User
from apps.accounts.services import create_admin, record_impact, register_user
from apps.catalog.models import Product
from apps.catalog.services import add_review, create_product
from apps.comments.models import Comment
from apps.comments.services import create_comment
from apps.notifications.models import Notification
from apps.orders.models import Order
from apps.orders.services import change_status, place_order

fake = Faker()

DEMO_PASSWORD = 'Citrus2024'

# (name, category, subcategory, price range, co2 saved per unit)
PRODUCT_TEMPLATES = [
    ('Orange Peel Face Scrub', 'cosmetics', 'skincare', (45, 120), 0.4),
    ('Citrus Lip Balm', 'cosmetics', 'skincare', (25, 60), 0.1),
    ('Neroli Body Lotion', 'cosmetics', 'body care', (80, 180), 0.5),
    ('Zest Multi-Surface Cleaner', 'cleaning', 'household', (35, 90), 0.8),
    ('Orange Oil Dish Soap', 'cleaning', 'dishes', (30, 70), 0.6),
    ('Citrus Laundry Pods', 'cleaning', 'laundry', (60, 140), 1.2),
    ('Bamboo Peel Brush', 'kitchen', 'utensils', (40, 95), 0.3),
    ('Beeswax Food Wraps', 'kitchen', 'storage', (55, 130), 0.9),
    ('Compost Caddy', 'kitchen', 'waste', (150, 320), 2.5),
    ('Orange Blossom Shampoo Bar', 'bathroom', 'hair care', (45, 110), 0.7),
    ('Loofah Sponge Set', 'bathroom', 'accessories', (30, 75), 0.4),
    ('Recycled Cotton Tote', 'accessories', 'bags', (50, 120), 1.0),
    ('Peel Leather Wallet', 'accessories', 'leather goods', (180, 420), 1.5),
    ('Citrus Discovery Box', 'gifts', 'boxes', (200, 450), 2.0),
    ('Zero Waste Starter Kit', 'gifts', 'kits', (250, 500), 3.0),
]

CERTIFICATIONS = ['Ecocert', 'Cosmebio', 'Vegan Society', 'Cruelty Free', 'FSC']


def generate_products(count=40):
    """Generate catalog products."""
    print(f"Generating {count} products...")
    products = []

    for i in range(count):
        name, category, subcategory, (low, high), co2 = PRODUCT_TEMPLATES[i % len(PRODUCT_TEMPLATES)]
        if i >= len(PRODUCT_TEMPLATES):
            name = f"{name} {fake.word().capitalize()}"
        price = Decimal(str(round(random.uniform(low, high), 2)))
        on_sale = random.random() < 0.2

        product = create_product({
            'name': name,
            'description': fake.paragraph(nb_sentences=3),
            'price': price,
            'original_price': price if on_sale else None,
            'category': category,
            'subcategory': subcategory,
            'image': f"/images/products/{category}-{i + 1}.jpg",
            'stock': random.randint(0, 300),
            'weight': round(random.uniform(0.05, 2.0), 2),
            'is_featured': random.random() < 0.25,
            'is_on_sale': on_sale,
            'sale_percentage': random.choice([10, 15, 20, 30]) if on_sale else None,
            'tags': fake.words(nb=3),
            'co2_saved': co2,
            'water_saved': round(co2 * random.uniform(50, 150), 1),
            'plastic_saved': round(random.uniform(0, 0.2), 3),
            'certifications': random.sample(CERTIFICATIONS, k=random.randint(0, 2)),
        })
        products.append(product)

    print(f"Created {len(products)} products")
    return products


def generate_users(count=30):
    """Generate customer accounts with some recorded impact."""
    print(f"Generating {count} users...")
    users = []

    for _ in range(count):
        user = register_user(fake.name()[:50], fake.unique.email(), DEMO_PASSWORD)
        user.phone = fake.numerify('+212 6## ### ###')
        user.address = {
            'street': fake.street_address(),
            'city': fake.city(),
            'postal_code': fake.postcode(),
            'country': 'Morocco',
        }
        user.save(update_fields=['phone', 'address', 'updated_at'])
        if random.random() < 0.5:
            user = record_impact(
                user,
                round(random.uniform(0, 25), 2),
                round(random.uniform(0, 80000), 1),
                random.randint(0, 150),
            )
        users.append(user)

    print(f"Created {len(users)} users")
    return users


def generate_orders(users, products, admin, count=120):
    """Place orders and move them along the status flow."""
    print(f"Generating {count} orders...")
    orders = []

    outcomes = ['pending', 'processing', 'shipped', 'delivered', 'cancelled']
    weights = [10, 15, 20, 45, 10]
    now = timezone.now()

    for _ in range(count):
        in_stock = [p for p in Product.objects.filter(is_active=True, stock__gte=3)]
        if not in_stock:
            break
        user = random.choice(users)
        items = [
            {'product_id': p.id, 'quantity': random.randint(1, 3)}
            for p in random.sample(in_stock, k=min(len(in_stock), random.randint(1, 4)))
        ]
        order = place_order(
            user,
            items,
            payment_method=random.choice(['card', 'paypal', 'cash_on_delivery']),
        )

        target = random.choices(outcomes, weights=weights)[0]
        if target == 'cancelled':
            order = change_status(order, 'cancelled', actor=user, reason='Changed my mind')
        elif target != 'pending':
            for step in ['processing', 'shipped', 'delivered']:
                order = change_status(order, step, actor=admin)
                if step == target:
                    break

        # Spread orders over the last year for the analytics charts
        Order.objects.filter(pk=order.pk).update(created_at=now - timedelta(days=random.randint(0, 365)))
        orders.append(order)

    print(f"Created {len(orders)} orders")
    return orders


def generate_reviews_and_comments(users, products, count=80):
    """Generate product reviews, comments and a few replies."""
    print(f"Generating {count} reviews and comments...")
    comments = []

    for _ in range(count):
        user = random.choice(users)
        product = random.choice(products)
        add_review(product, user, random.randint(3, 5), fake.sentence())

        comment = create_comment(user, fake.paragraph(nb_sentences=2), product=product,
                                 rating=random.randint(1, 5))
        comments.append(comment)
        if random.random() < 0.3:
            comments.append(create_comment(random.choice(users), fake.sentence(), parent_id=comment.id))

    print(f"Created {len(comments)} comments")
    return comments


def clear_all_data():
    """Clear all existing data."""
    print("Clearing existing data...")

    Notification.objects.all().delete()
    Comment.objects.all().delete()
    Order.objects.all().delete()
    Product.objects.all().delete()
    User.objects.all().delete()

    print("All data cleared")


def main():
    """Main function to generate all data."""
    print("\n" + "="*60)
    print("GreenZest Demo Data Generator")
    print("="*60 + "\n")

    clear_all_data()

    admin = create_admin('Admin GreenZest', 'admin@greenzest.com', 'Admin123!')
    products = generate_products(40)
    users = generate_users(30)
    orders = generate_orders(users, products, admin, 120)
    comments = generate_reviews_and_comments(users, products, 80)

    print("\n" + "="*60)
    print("Data Generation Complete!")
    print("="*60)
    print(f"\nSummary:")
    print(f"  - Products: {len(products)}")
    print(f"  - Users: {len(users)} (password: {DEMO_PASSWORD})")
    print(f"  - Orders: {len(orders)}")
    print(f"  - Comments: {len(comments)}")
    print(f"  - Notifications: {Notification.objects.count()}")
    print()


if __name__ == '__main__':
    main()
