from datetime import timedelta

import pytest
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.tokens import ExpiredToken, InvalidToken, decode_token, issue_token
from .conftest import PASSWORD

pytestmark = pytest.mark.django_db


def test_signup_returns_token_and_sanitized_user(api_client):
    response = api_client.post('/api/auth/signup/', {
        'name': 'Salma Idrissi',
        'email': 'Salma@Example.com',
        'password': PASSWORD,
    }, format='json')

    assert response.status_code == 201
    body = response.json()
    assert body['success'] is True
    assert body['token']
    assert body['user']['email'] == 'salma@example.com'
    assert body['user']['tier'] == 'bronze'
    assert body['user']['loyalty_points'] == 0
    assert 'password' not in body['user']
    assert 'failed_login_attempts' not in body['user']
    assert decode_token(body['token']) == body['user']['id']


def test_register_alias(api_client):
    response = api_client.post('/api/auth/register/', {
        'name': 'Salma Idrissi',
        'email': 'salma@example.com',
        'password': PASSWORD,
    }, format='json')
    assert response.status_code == 201


def test_duplicate_signup_is_rejected(api_client, user):
    response = api_client.post('/api/auth/signup/', {
        'name': 'Someone Else',
        'email': 'AMINA@example.com',
        'password': PASSWORD,
    }, format='json')

    assert response.status_code == 400
    assert response.json()['success'] is False
    assert response.json()['code'] == 'DUPLICATE_EMAIL'


def test_signup_enforces_password_policy(api_client):
    response = api_client.post('/api/auth/signup/', {
        'name': 'Weak Password',
        'email': 'weak@example.com',
        'password': 'short',
    }, format='json')

    assert response.status_code == 400
    body = response.json()
    fields = {error['field'] for error in body['errors']}
    assert fields == {'password'}
    assert len(body['errors']) >= 3


def test_login_success(api_client, user):
    response = api_client.post('/api/auth/login/', {'email': user.email, 'password': PASSWORD}, format='json')

    assert response.status_code == 200
    assert response.json()['user']['id'] == str(user.id)
    user.refresh_from_db()
    assert user.last_login is not None
    assert user.failed_login_attempts == 0


def test_unknown_email_and_wrong_password_look_the_same(api_client, user):
    unknown = api_client.post('/api/auth/login/', {'email': 'nobody@example.com', 'password': PASSWORD}, format='json')
    wrong = api_client.post('/api/auth/login/', {'email': user.email, 'password': 'Wrong1234'}, format='json')

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json()['message'] == wrong.json()['message']


def test_lockout_after_five_failures(api_client, user):
    for _ in range(5):
        response = api_client.post('/api/auth/login/', {'email': user.email, 'password': 'Wrong1234'}, format='json')
        assert response.status_code == 401

    user.refresh_from_db()
    assert user.failed_login_attempts == 5
    assert user.lock_until is not None

    # Right password, still locked
    response = api_client.post('/api/auth/login/', {'email': user.email, 'password': PASSWORD}, format='json')
    assert response.status_code == 423
    assert response.json()['code'] == 'ACCOUNT_LOCKED'


def test_expired_lock_allows_login(api_client, user):
    user.failed_login_attempts = 5
    user.lock_until = timezone.now() - timedelta(minutes=1)
    user.save()

    response = api_client.post('/api/auth/login/', {'email': user.email, 'password': PASSWORD}, format='json')

    assert response.status_code == 200
    user.refresh_from_db()
    assert user.failed_login_attempts == 0
    assert user.lock_until is None


def test_deactivated_account_cannot_log_in(api_client, user):
    user.is_active = False
    user.save()

    response = api_client.post('/api/auth/login/', {'email': user.email, 'password': PASSWORD}, format='json')
    assert response.status_code == 401
    assert response.json()['code'] == 'ACCOUNT_DISABLED'


def test_verify_requires_token(api_client):
    response = api_client.get('/api/auth/verify/')
    assert response.status_code == 401
    assert response.json()['success'] is False


def test_verify_with_token(auth_client, user):
    response = auth_client.get('/api/auth/verify/')
    assert response.status_code == 200
    assert response.json()['user']['email'] == user.email


def test_invalid_token_is_rejected(api_client):
    api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
    response = api_client.get('/api/auth/verify/')
    assert response.status_code == 401


def test_token_of_deactivated_user_is_rejected(auth_client, user):
    User.objects.filter(pk=user.pk).update(is_active=False)
    response = auth_client.get('/api/user/me/')
    assert response.status_code == 401


def test_logout(auth_client):
    response = auth_client.post('/api/auth/logout/')
    assert response.status_code == 200
    assert response.json()['success'] is True


def test_create_admin_requires_secret(auth_client):
    payload = {'name': 'New Admin', 'email': 'new-admin@example.com', 'password': PASSWORD}

    denied = auth_client.post('/api/auth/create-admin/', {**payload, 'admin_secret': 'nope'}, format='json')
    assert denied.status_code == 403
    assert not User.objects.filter(email='new-admin@example.com').exists()

    created = auth_client.post(
        '/api/auth/create-admin/', {**payload, 'admin_secret': 'test-admin-secret'}, format='json'
    )
    assert created.status_code == 201
    assert created.json()['user']['role'] == 'admin'


def test_expired_token(user, settings):
    settings.JWT_EXPIRY_DAYS = -1
    token = issue_token(user)
    with pytest.raises(ExpiredToken):
        decode_token(token)


def test_tampered_token(user):
    token = issue_token(user)
    with pytest.raises(InvalidToken):
        decode_token(token[:-2] + ('A' if token[-2] != 'A' else 'B') + token[-1])
