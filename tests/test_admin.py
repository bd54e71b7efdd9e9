from decimal import Decimal

import pytest

from apps.accounts.models import User
from apps.catalog.models import Product
from apps.notifications.models import Notification
from apps.orders.services import place_order

pytestmark = pytest.mark.django_db


def test_admin_routes_reject_regular_users(auth_client, product):
    response = auth_client.delete(f'/api/admin/products/{product.id}/')
    assert response.status_code == 403
    assert response.json()['success'] is False
    assert Product.objects.filter(pk=product.pk).exists()

    assert auth_client.get('/api/admin/stats/').status_code == 403


def test_admin_routes_require_authentication(api_client):
    assert api_client.get('/api/admin/users/').status_code == 401


def test_product_crud(admin_client):
    created = admin_client.post('/api/admin/products/', {
        'name': 'Citrus Candle',
        'description': 'Hand-poured with orange wax',
        'price': '95.00',
        'category': 'gifts',
        'stock': 12,
    }, format='json')
    assert created.status_code == 201
    product = created.json()['product']
    assert product['sku'].startswith('GZ-GIF-')
    assert product['average_rating'] == 0

    updated = admin_client.put(f"/api/admin/products/{product['id']}/", {
        'is_on_sale': True,
        'sale_percentage': 20,
    }, format='json')
    assert updated.status_code == 200
    assert updated.json()['product']['sale_price'] == 76.0

    deleted = admin_client.delete(f"/api/admin/products/{product['id']}/")
    assert deleted.status_code == 200
    assert not Product.objects.filter(pk=product['id']).exists()


def test_product_on_sale_needs_percentage(admin_client, product):
    response = admin_client.put(f'/api/admin/products/{product.id}/', {'is_on_sale': True}, format='json')
    assert response.status_code == 400
    assert response.json()['errors'][0]['field'] == 'sale_percentage'


def test_deleting_a_product_keeps_order_snapshots(admin_client, user, product):
    order = place_order(user, [{'product_id': product.id, 'quantity': 1}], payment_method='card')
    admin_client.delete(f'/api/admin/products/{product.id}/')

    item = order.items.get()
    assert item.product_id is None
    assert item.name == product.name
    assert item.price == Decimal('10.00')


def test_user_listing_and_deactivation(admin_client, admin, user):
    listing = admin_client.get('/api/admin/users/?search=amina')
    assert [u['email'] for u in listing.json()['users']] == [user.email]

    response = admin_client.put(f'/api/admin/users/{user.id}/status/', {'is_active': False}, format='json')
    assert response.status_code == 200
    user.refresh_from_db()
    assert user.is_active is False

    own = admin_client.put(f'/api/admin/users/{admin.id}/status/', {'is_active': False}, format='json')
    assert own.status_code == 403


def test_admin_order_status_flow(admin_client, user, product):
    order = place_order(user, [{'product_id': product.id, 'quantity': 1}], payment_method='card')

    for step in ['processing', 'shipped', 'delivered']:
        response = admin_client.put(f'/api/admin/orders/{order.id}/status/', {'status': step}, format='json')
        assert response.status_code == 200
        assert response.json()['order']['status'] == step

    rejected = admin_client.put(f'/api/admin/orders/{order.id}/status/', {'status': 'cancelled'}, format='json')
    assert rejected.status_code == 400

    listing = admin_client.get('/api/admin/orders/?status=delivered').json()
    assert listing['pagination']['total'] == 1
    assert listing['orders'][0]['user']['email'] == user.email


def test_stats(admin_client, user, product):
    place_order(user, [{'product_id': product.id, 'quantity': 2}], payment_method='card')

    stats = admin_client.get('/api/admin/stats/').json()['stats']
    assert stats['total_users'] == 2
    assert stats['admins'] == 1
    assert stats['total_orders'] == 1
    assert stats['today_orders'] == 1
    assert stats['total_revenue'] == 20
    assert stats['pending_orders'] == 1
    assert stats['top_products'][0]['sold_count'] == 2


def test_analytics(admin_client, user, product):
    place_order(user, [{'product_id': product.id, 'quantity': 1}], payment_method='card')

    daily = admin_client.get('/api/admin/analytics/').json()
    assert daily['period'] == 'day'
    assert len(daily['analytics']) == 7
    assert daily['analytics'][-1]['orders'] == 1

    assert len(admin_client.get('/api/admin/analytics/?period=week').json()['analytics']) == 8
    assert len(admin_client.get('/api/admin/analytics/?period=month').json()['analytics']) == 12
    assert admin_client.get('/api/admin/analytics/?period=year').status_code == 400


def test_admin_accounts(admin_client, admin, user):
    created = admin_client.post('/api/admin/admins/', {
        'name': 'Second Admin',
        'email': 'second@greenzest.com',
        'password': 'Orange2024',
    }, format='json')
    assert created.status_code == 201
    second_id = created.json()['admin']['id']

    assert admin_client.get('/api/admin/admins/').json()['count'] == 2

    demoted = admin_client.put(f'/api/admin/admins/{second_id}/demote/')
    assert demoted.status_code == 200
    assert User.objects.get(pk=second_id).role == 'user'

    assert admin_client.put(f'/api/admin/admins/{admin.id}/demote/').status_code == 400
    assert admin_client.put(f'/api/admin/admins/{user.id}/demote/').status_code == 404


def test_broadcast(admin_client, admin, user, other_user):
    other_user.is_active = False
    other_user.save()

    response = admin_client.post('/api/admin/notifications/broadcast/', {
        'type': 'promotion',
        'title': 'Spring sale',
        'message': '20% off every citrus product this week',
        'action': {'label': 'Shop now', 'url': '/products'},
    }, format='json')

    assert response.status_code == 201
    assert response.json()['sent'] == 2
    assert Notification.objects.filter(title='Spring sale', user=user).exists()
    assert not Notification.objects.filter(title='Spring sale', user=other_user).exists()
