"""
Notification helpers.

Notifications are best-effort side effects: callers that must not fail
because of them use ``notify_safely``.
"""
import logging
from typing import Dict, Iterable, Optional

from django.db import transaction
from django.db.models import QuerySet

from apps.core.exceptions import NotFoundException
from apps.core.utils import to_json_safe, truncate_for_display
from .models import Notification

logger = logging.getLogger(__name__)

TITLE_MAX = 100
MESSAGE_MAX = 500


def create_notification(
    user,
    type: str,
    title: str,
    message: str,
    action: Optional[Dict[str, str]] = None,
    data: Optional[Dict] = None,
) -> Notification:
    return Notification.objects.create(
        user=user,
        type=type,
        title=truncate_for_display(title, TITLE_MAX),
        message=truncate_for_display(message, MESSAGE_MAX),
        action=action,
        data=to_json_safe(data or {}),
    )


def notify_safely(user, type: str, title: str, message: str, action=None, data=None) -> Optional[Notification]:
    """Create a notification, logging instead of raising on failure."""
    try:
        with transaction.atomic():
            notification = create_notification(user, type, title, message, action=action, data=data)
    except Exception:
        logger.exception(f"Could not create '{type}' notification for user {getattr(user, 'id', user)}")
        return None
    logger.info(f"Notification '{title}' created for user {notification.user_id}")
    return notification


def broadcast(users: Iterable, type: str, title: str, message: str, action=None, data=None) -> int:
    """Send the same notification to every user in ``users``."""
    payload = to_json_safe(data or {})
    notifications = [
        Notification(
            user=user,
            type=type,
            title=truncate_for_display(title, TITLE_MAX),
            message=truncate_for_display(message, MESSAGE_MAX),
            action=action,
            data=payload,
        )
        for user in users
    ]
    Notification.objects.bulk_create(notifications)
    return len(notifications)


def notifications_for(user, unread_only: bool = False) -> QuerySet:
    queryset = Notification.objects.filter(user=user)
    if unread_only:
        queryset = queryset.filter(read=False)
    return queryset.order_by('-created_at')


def unread_count(user) -> int:
    return Notification.objects.filter(user=user, read=False).count()


def get_own_notification(user, notification_id) -> Notification:
    notification = Notification.objects.filter(pk=notification_id, user=user).first()
    if notification is None:
        raise NotFoundException("Notification")
    return notification


def mark_read(user, notification_id) -> Notification:
    notification = get_own_notification(user, notification_id)
    if not notification.read:
        notification.read = True
        notification.save(update_fields=['read', 'updated_at'])
    return notification


def mark_all_read(user) -> int:
    return Notification.objects.filter(user=user, read=False).update(read=True)


def delete_notification(user, notification_id) -> None:
    get_own_notification(user, notification_id).delete()
