"""
Notification centre for the logged-in user.
"""
import logging

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.views import APIView

from apps.core.utils import parse_bool
from apps.notifications import services as notifications
from ..serializers import NotificationSerializer
from .base import paginate, success

logger = logging.getLogger(__name__)


class NotificationListView(APIView):

    @extend_schema(
        parameters=[
            OpenApiParameter('page', int, description="Page number (default 1)"),
            OpenApiParameter('limit', int, description="Page size (default 20, max 100)"),
            OpenApiParameter('unread_only', bool, description="Only unread notifications"),
        ],
        responses={200: NotificationSerializer(many=True)},
        description="Caller's notifications, newest first",
    )
    def get(self, request):
        unread_only = parse_bool(request.query_params.get('unread_only'))
        rows, pagination = paginate(request, notifications.notifications_for(request.user, unread_only))
        pagination["unread_count"] = notifications.unread_count(request.user)
        return success(
            notifications=NotificationSerializer(rows, many=True).data,
            pagination=pagination,
        )


class UnreadCountView(APIView):

    @extend_schema(responses={200: None}, description="Number of unread notifications")
    def get(self, request):
        return success(unread_count=notifications.unread_count(request.user))


class MarkAllReadView(APIView):

    @extend_schema(request=None, responses={200: None}, description="Mark every notification read")
    def put(self, request):
        updated = notifications.mark_all_read(request.user)
        return success("All notifications marked as read", updated=updated)


class MarkReadView(APIView):

    @extend_schema(request=None, responses={200: NotificationSerializer}, description="Mark one notification read")
    def put(self, request, notification_id):
        notification = notifications.mark_read(request.user, notification_id)
        return success("Notification marked as read", notification=NotificationSerializer(notification).data)


class NotificationDetailView(APIView):

    @extend_schema(responses={200: None}, description="Delete one notification")
    def delete(self, request, notification_id):
        notifications.delete_notification(request.user, notification_id)
        return success("Notification deleted")
