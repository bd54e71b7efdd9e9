"""
Notification Models - in-app messages for storefront users
Tables: Notifications
"""
from django.db import models

from apps.core.models import BaseModel


class Notification(BaseModel):
    """
    Message shown in a user's notification centre. Created as a side effect
    of other operations; only the ``read`` flag changes afterwards.
    """
    TYPE_CHOICES = [
        ('order', 'Order'),
        ('promotion', 'Promotion'),
        ('news', 'News'),
        ('system', 'System'),
        ('payment', 'Payment'),
    ]

    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='notifications')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    title = models.CharField(max_length=100)
    message = models.CharField(max_length=500)
    read = models.BooleanField(default=False)
    action = models.JSONField(blank=True, null=True, help_text="label and url of the call to action")
    data = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = 'notifications_notifications'
        verbose_name = 'Notification'
        verbose_name_plural = 'Notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'read'], name='notifications_unread_idx'),
            models.Index(fields=['user', '-created_at'], name='notifications_recent_idx'),
        ]

    def __str__(self):
        return f"[{self.type}] {self.title}"
