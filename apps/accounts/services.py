"""
Account operations: signup, login with lockout, admin management,
profile and impact updates.
"""
import logging
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from apps.core.exceptions import (
    AccountDisabledException,
    AccountLockedException,
    DuplicateEmailException,
    InvalidCredentialsException,
    NotFoundException,
    PermissionDeniedException,
    ValidationException,
)
from .models import User
from .validators import normalize_email

logger = logging.getLogger(__name__)


def register_user(name: str, email: str, password: str, role: str = User.ROLE_USER) -> User:
    """
    Create an account with a hashed password and zeroed loyalty/impact state.
    """
    email = normalize_email(email)
    if User.objects.filter(email__iexact=email).exists():
        raise DuplicateEmailException(email)

    user = User(name=name.strip(), email=email, role=role)
    user.set_password(password)
    user.refresh_tier()
    try:
        with transaction.atomic():
            user.save()
    except IntegrityError:
        # Lost a race against a concurrent signup for the same address
        raise DuplicateEmailException(email)

    logger.info(f"Registered {role} account {user.id}")
    return user


def authenticate(email: str, password: str) -> User:
    """
    Check credentials and apply the lockout policy.

    Failed attempts are persisted before the exception is raised, so the
    counter update is committed in its own transaction.
    """
    email = normalize_email(email)
    now = timezone.now()
    failure = None

    with transaction.atomic():
        user = User.objects.select_for_update().filter(email__iexact=email).first()
        if user is None:
            failure = InvalidCredentialsException()
        elif user.is_locked(now):
            logger.warning(f"Login refused for locked account {user.id}")
            failure = AccountLockedException(user.lock_until)
        else:
            if user.lock_until is not None:
                # Lock window elapsed - start counting afresh
                user.lock_until = None
                user.failed_login_attempts = 0

            if not user.check_password(password):
                _register_failed_attempt(user, now)
                failure = InvalidCredentialsException()
            elif not user.is_active:
                user.save(update_fields=['lock_until', 'failed_login_attempts', 'updated_at'])
                failure = AccountDisabledException()
            else:
                user.failed_login_attempts = 0
                user.lock_until = None
                user.last_login = now
                user.save(update_fields=['failed_login_attempts', 'lock_until', 'last_login', 'updated_at'])

    if failure is not None:
        raise failure

    logger.info(f"User {user.id} logged in")
    return user


def _register_failed_attempt(user: User, now) -> None:
    user.failed_login_attempts += 1
    if user.failed_login_attempts >= settings.LOGIN_MAX_FAILED_ATTEMPTS:
        user.lock_until = now + timedelta(minutes=settings.LOGIN_LOCKOUT_MINUTES)
        logger.warning(
            f"Account {user.id} locked until {user.lock_until.isoformat()} "
            f"after {user.failed_login_attempts} failed attempts"
        )
    user.save(update_fields=['failed_login_attempts', 'lock_until', 'updated_at'])


def resolve_active_user(user_id: str) -> Optional[User]:
    """Look up the user behind a token; ``None`` if missing or deactivated."""
    try:
        user = User.objects.get(pk=user_id)
    except (User.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        return None
    if not user.is_active:
        return None
    return user


def get_user(user_id) -> User:
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFoundException("User")


def create_admin(name: str, email: str, password: str) -> User:
    return register_user(name, email, password, role=User.ROLE_ADMIN)


def demote_admin(actor: User, target_id) -> User:
    """Turn an admin back into a regular user. Admins cannot demote themselves."""
    if str(actor.id) == str(target_id):
        raise ValidationException("You cannot demote yourself")
    target = User.objects.filter(pk=target_id, role=User.ROLE_ADMIN).first()
    if target is None:
        raise NotFoundException("Admin")
    target.role = User.ROLE_USER
    target.save(update_fields=['role', 'updated_at'])
    logger.info(f"Admin {actor.id} demoted {target.id}")
    return target


def set_user_active(actor: User, target_id, is_active: bool) -> User:
    """Soft (de)activation. Accounts are never hard-deleted."""
    target = get_user(target_id)
    if target.id == actor.id and not is_active:
        raise PermissionDeniedException("You cannot deactivate your own account")
    target.is_active = is_active
    target.save(update_fields=['is_active', 'updated_at'])
    logger.info(f"Admin {actor.id} set is_active={is_active} on {target.id}")
    return target


def update_profile(user: User, name: str = None, phone: str = None, address: dict = None) -> User:
    fields = []
    if name:
        user.name = name.strip()
        fields.append('name')
    if phone:
        user.phone = phone.strip()
        fields.append('phone')
    if address:
        merged = dict(user.address or {})
        merged.update({k: v for k, v in address.items() if v is not None})
        user.address = merged
        fields.append('address')
    if fields:
        user.save(update_fields=fields + ['updated_at'])
    return user


def record_impact(user: User, co2_saved: float, water_saved: float, oranges_recycled: int) -> User:
    """Accumulate environmental impact under a row lock."""
    with transaction.atomic():
        locked = User.objects.select_for_update().get(pk=user.pk)
        locked.add_impact(co2_saved, water_saved, oranges_recycled)
        locked.save(update_fields=[
            'total_co2_saved', 'total_water_saved', 'total_oranges_recycled',
            'loyalty_points', 'tier', 'updated_at',
        ])
    return locked


def award_loyalty_points(user_id, points: int) -> User:
    """Add ``points`` to a user under a row lock and recompute the tier."""
    locked = User.objects.select_for_update().get(pk=user_id)
    locked.add_loyalty_points(points)
    locked.save(update_fields=['loyalty_points', 'tier', 'updated_at'])
    return locked


def list_users(role: str = None, search: str = None):
    queryset = User.objects.all().order_by('-created_at')
    if role:
        queryset = queryset.filter(role=role)
    if search:
        queryset = queryset.filter(Q(name__icontains=search) | Q(email__icontains=search))
    return queryset
