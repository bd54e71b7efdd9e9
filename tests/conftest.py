"""
Shared fixtures for the GreenZest test suite.
"""
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.accounts.services import create_admin, register_user
from apps.accounts.tokens import issue_token
from apps.catalog.models import Product

PASSWORD = 'Citrus2024'


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user(db):
    return register_user('Amina Benali', 'amina@example.com', PASSWORD)


@pytest.fixture
def other_user(db):
    return register_user('Youssef Alaoui', 'youssef@example.com', PASSWORD)


@pytest.fixture
def admin(db):
    return create_admin('Admin GreenZest', 'admin@greenzest.com', PASSWORD)


@pytest.fixture
def client_for():
    """Build an APIClient that sends a bearer token for ``user``."""
    def _client_for(user):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(user)}")
        return client
    return _client_for


@pytest.fixture
def auth_client(client_for, user):
    return client_for(user)


@pytest.fixture
def admin_client(client_for, admin):
    return client_for(admin)


@pytest.fixture
def make_product(db):
    counter = {'n': 0}

    def _make_product(**overrides):
        counter['n'] += 1
        data = {
            'name': f"Citrus Product {counter['n']}",
            'description': 'Made from upcycled orange peels',
            'price': Decimal('10.00'),
            'category': 'cosmetics',
            'stock': 10,
        }
        data.update(overrides)
        return Product.objects.create(**data)
    return _make_product


@pytest.fixture
def product(make_product):
    return make_product()
