from decimal import Decimal

import pytest

from apps.catalog.models import Product
from apps.core.exceptions import InsufficientStockException, InvalidTransitionException
from apps.notifications.models import Notification
from apps.orders.models import Order, format_order_number
from apps.orders.services import can_transition, cancel_order, change_status, place_order

pytestmark = pytest.mark.django_db


@pytest.fixture
def soap(make_product):
    return make_product(name='Orange Soap', price=Decimal('10.00'), stock=10)


@pytest.fixture
def brush(make_product):
    return make_product(name='Peel Brush', price=Decimal('5.00'), stock=4, category='kitchen')


def order_payload(*lines, **extra):
    payload = {
        'items': [{'product_id': str(p.id), 'quantity': q} for p, q in lines],
        'payment_method': 'card',
    }
    payload.update(extra)
    return payload


def test_format_order_number():
    assert format_order_number(7) == 'CMD-0007'
    assert format_order_number(12345) == 'CMD-12345'


@pytest.mark.parametrize('current, requested, allowed', [
    ('pending', 'processing', True),
    ('pending', 'delivered', True),
    ('processing', 'pending', False),
    ('shipped', 'cancelled', True),
    ('delivered', 'cancelled', False),
    ('cancelled', 'pending', False),
    ('cancelled', 'cancelled', False),
])
def test_can_transition(current, requested, allowed):
    assert can_transition(current, requested) is allowed


def test_place_order_computes_total_from_catalog(auth_client, user, soap, brush):
    response = auth_client.post(
        '/api/orders/',
        order_payload((soap, 2), (brush, 1), total='1.00'),
        format='json',
    )

    assert response.status_code == 201
    order = response.data['order']
    assert order['total'] == 25
    assert order['status'] == 'pending'
    assert [item['name'] for item in order['items']] == ['Orange Soap', 'Peel Brush']
    assert response.data['points_earned'] == 25

    soap.refresh_from_db()
    brush.refresh_from_db()
    assert (soap.stock, soap.sold_count) == (8, 2)
    assert (brush.stock, brush.sold_count) == (3, 1)

    user.refresh_from_db()
    assert user.loyalty_points == 25
    assert user.tier == 'bronze'

    types = sorted(Notification.objects.filter(user=user).values_list('type', flat=True))
    assert types == ['order', 'promotion']


def test_place_order_uses_sale_price_and_merges_duplicates(user, make_product):
    product = make_product(price=Decimal('20.00'), is_on_sale=True, sale_percentage=50, stock=5)
    order = place_order(user, [
        {'product_id': product.id, 'quantity': 1},
        {'product_id': product.id, 'quantity': 2},
    ], payment_method='paypal')

    assert order.total == Decimal('30.00')
    assert order.items.count() == 1
    assert order.items.get().quantity == 3
    assert order.items.get().price == Decimal('10.00')


def test_place_order_defaults_shipping_address_to_profile(user, soap):
    user.address = {'city': 'Marrakech', 'country': 'Morocco'}
    user.save()

    order = place_order(user, [{'product_id': soap.id, 'quantity': 1}], payment_method='card')
    assert order.shipping_address == {'city': 'Marrakech', 'country': 'Morocco'}


def test_insufficient_stock_rolls_back_everything(user, soap, brush):
    with pytest.raises(InsufficientStockException):
        place_order(user, [
            {'product_id': soap.id, 'quantity': 2},
            {'product_id': brush.id, 'quantity': 5},
        ], payment_method='card')

    soap.refresh_from_db()
    assert soap.stock == 10
    assert Order.objects.count() == 0
    user.refresh_from_db()
    assert user.loyalty_points == 0


def test_insufficient_stock_via_api(auth_client, brush):
    response = auth_client.post('/api/orders/', order_payload((brush, 99)), format='json')
    assert response.status_code == 400
    assert response.json()['code'] == 'INSUFFICIENT_STOCK'


def test_inactive_product_cannot_be_ordered(auth_client, make_product):
    retired = make_product(is_active=False)
    response = auth_client.post('/api/orders/', order_payload((retired, 1)), format='json')
    assert response.status_code == 400


def test_order_validation_errors(auth_client, soap):
    response = auth_client.post('/api/orders/', {'items': [], 'payment_method': 'bitcoin'}, format='json')
    assert response.status_code == 400
    fields = {error['field'] for error in response.json()['errors']}
    assert fields == {'items', 'payment_method'}

    response = auth_client.post('/api/orders/', order_payload((soap, 0)), format='json')
    assert response.status_code == 400
    assert response.json()['errors'][0]['field'] == 'items.0.quantity'


def test_order_numbers_increase(user, soap):
    first = place_order(user, [{'product_id': soap.id, 'quantity': 1}], payment_method='card')
    second = place_order(user, [{'product_id': soap.id, 'quantity': 1}], payment_method='card')

    assert second.sequence > first.sequence
    assert first.order_number == format_order_number(first.sequence)
    assert second.order_number != first.order_number


def test_unauthenticated_order_list(api_client):
    response = api_client.get('/api/orders/')
    assert response.status_code == 401


def test_users_only_see_their_own_orders(auth_client, client_for, other_user, soap):
    foreign = place_order(other_user, [{'product_id': soap.id, 'quantity': 1}], payment_method='card')

    assert auth_client.get('/api/orders/').json()['count'] == 0
    assert auth_client.get(f'/api/orders/{foreign.id}/').status_code == 404
    assert client_for(other_user).get(f'/api/orders/{foreign.id}/').status_code == 200


def test_cancel_restores_stock(auth_client, user, soap):
    order = place_order(user, [{'product_id': soap.id, 'quantity': 3}], payment_method='card')
    soap.refresh_from_db()
    assert soap.stock == 7

    response = auth_client.post(f'/api/orders/{order.id}/cancel/', {'reason': 'Ordered twice'}, format='json')
    assert response.status_code == 200
    assert response.json()['order']['status'] == 'cancelled'
    assert response.json()['order']['cancellation_reason'] == 'Ordered twice'

    soap.refresh_from_db()
    assert soap.stock == 10
    assert soap.sold_count == 0

    again = auth_client.post(f'/api/orders/{order.id}/cancel/', format='json')
    assert again.status_code == 400
    assert again.json()['code'] == 'INVALID_TRANSITION'


def test_cancel_skips_deleted_products(user, soap, brush):
    order = place_order(user, [
        {'product_id': soap.id, 'quantity': 1},
        {'product_id': brush.id, 'quantity': 1},
    ], payment_method='card')
    brush.delete()

    cancel_order(user, order.id)

    soap.refresh_from_db()
    assert soap.stock == 10
    assert order.items.filter(product__isnull=True).get().name == 'Peel Brush'


def test_delivered_orders_are_terminal(user, admin, soap):
    order = place_order(user, [{'product_id': soap.id, 'quantity': 1}], payment_method='cash_on_delivery')
    order = change_status(order, 'delivered', actor=admin)

    assert order.delivered_at is not None
    assert order.payment_status == 'paid'
    with pytest.raises(InvalidTransitionException):
        change_status(order, 'cancelled', actor=admin)
    assert Product.objects.get(pk=soap.pk).stock == 9


def test_status_change_notifies_owner(user, admin, soap):
    order = place_order(user, [{'product_id': soap.id, 'quantity': 1}], payment_method='card')
    change_status(order, 'shipped', actor=admin)

    latest = Notification.objects.get(user=user, title='Order shipped!')
    assert latest.type == 'order'
    assert order.order_number in latest.message


def test_cancelling_a_paid_order_refunds_it(user, admin, soap):
    order = place_order(user, [{'product_id': soap.id, 'quantity': 1}], payment_method='card')
    Order.objects.filter(pk=order.pk).update(payment_status='paid')

    order = change_status(order, 'cancelled', actor=admin, reason='Out of season')
    assert order.payment_status == 'refunded'
    assert order.cancelled_by == admin


def test_status_route_requires_admin(auth_client, user, soap):
    order = place_order(user, [{'product_id': soap.id, 'quantity': 1}], payment_method='card')
    response = auth_client.put(f'/api/orders/{order.id}/status/', {'status': 'shipped'}, format='json')
    assert response.status_code == 403


def test_admin_changes_a_customer_order_through_status_route(admin_client, user, soap):
    order = place_order(user, [{'product_id': soap.id, 'quantity': 1}], payment_method='card')

    response = admin_client.put(f'/api/orders/{order.id}/status/', {'status': 'shipped'}, format='json')
    assert response.status_code == 200
    assert response.json()['order']['status'] == 'shipped'

    order.refresh_from_db()
    assert order.status == 'shipped'


def test_status_route_open_to_owners_when_configured(auth_client, user, soap, settings):
    settings.ORDER_STATUS_REQUIRES_ADMIN = False
    order = place_order(user, [{'product_id': soap.id, 'quantity': 1}], payment_method='card')

    response = auth_client.put(f'/api/orders/{order.id}/status/', {'status': 'processing'}, format='json')
    assert response.status_code == 200
    assert response.json()['order']['status'] == 'processing'


def test_invoices(auth_client, user, soap):
    order = place_order(user, [{'product_id': soap.id, 'quantity': 2}], payment_method='card')

    single = auth_client.get(f'/api/orders/{order.id}/invoice/')
    assert single.status_code == 200
    assert single.json()['order']['user'] == {'name': user.name, 'email': user.email}
    assert single.json()['order']['items'][0]['line_total'] == 20.0

    bulk = auth_client.get('/api/orders/invoices/')
    assert bulk.json()['count'] == 1
