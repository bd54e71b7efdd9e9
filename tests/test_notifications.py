from unittest import mock

import pytest

from apps.notifications.models import Notification
from apps.notifications.services import create_notification, notify_safely

pytestmark = pytest.mark.django_db


@pytest.fixture
def inbox(user):
    for i in range(25):
        create_notification(user, 'news', f"News {i}", 'Fresh oranges arrived')
    Notification.objects.filter(user=user, title__in=['News 0', 'News 1']).update(read=True)
    return user


def test_pagination_and_unread_count(auth_client, inbox):
    response = auth_client.get('/api/notifications/?page=2&limit=10')
    body = response.json()

    assert response.status_code == 200
    assert len(body['notifications']) == 10
    assert body['pagination']['current_page'] == 2
    assert body['pagination']['total_pages'] == 3
    assert body['pagination']['total'] == 25
    assert body['pagination']['unread_count'] == 23


def test_limit_is_capped(auth_client, inbox):
    body = auth_client.get('/api/notifications/?limit=1000').json()
    assert body['pagination']['limit'] == 100
    assert len(body['notifications']) == 25


def test_unread_only(auth_client, inbox):
    body = auth_client.get('/api/notifications/?unread_only=true&limit=100').json()
    assert len(body['notifications']) == 23
    assert all(not n['read'] for n in body['notifications'])


def test_mark_read_and_read_all(auth_client, inbox):
    notification = Notification.objects.filter(user=inbox, read=False).first()

    response = auth_client.put(f'/api/notifications/{notification.id}/read/')
    assert response.status_code == 200
    assert response.json()['notification']['read'] is True
    assert auth_client.get('/api/notifications/unread-count/').json()['unread_count'] == 22

    response = auth_client.put('/api/notifications/read-all/')
    assert response.json()['updated'] == 22
    assert auth_client.get('/api/notifications/unread-count/').json()['unread_count'] == 0


def test_other_users_notifications_are_invisible(client_for, other_user, inbox):
    notification = Notification.objects.filter(user=inbox).first()
    client = client_for(other_user)

    assert client.put(f'/api/notifications/{notification.id}/read/').status_code == 404
    assert client.delete(f'/api/notifications/{notification.id}/').status_code == 404
    assert Notification.objects.filter(pk=notification.pk).exists()


def test_delete(auth_client, inbox):
    notification = Notification.objects.filter(user=inbox).first()
    assert auth_client.delete(f'/api/notifications/{notification.id}/').status_code == 200
    assert not Notification.objects.filter(pk=notification.pk).exists()


def test_long_text_is_truncated(user):
    notification = create_notification(user, 'system', 'T' * 150, 'M' * 600)
    assert len(notification.title) == 100
    assert len(notification.message) == 500


def test_notify_safely_swallows_failures(user):
    with mock.patch('apps.notifications.services.create_notification', side_effect=RuntimeError('boom')):
        assert notify_safely(user, 'order', 'Title', 'Message') is None
