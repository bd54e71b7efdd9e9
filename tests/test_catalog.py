from decimal import Decimal

import pytest

from apps.catalog.ratings import rating_summary
from apps.catalog.services import (
    add_review,
    create_product,
    generate_sku,
    get_product,
    remove_review,
    search_products,
    update_product,
)
from apps.orders.services import place_order

pytestmark = pytest.mark.django_db


def test_rating_summary():
    assert rating_summary([]) == (0.0, 0)
    assert rating_summary([5, 4, 3]) == (4.0, 3)


def test_reviews_keep_rating_aggregates_in_sync(product, user, other_user):
    add_review(product, user, 5, 'Lovely scent')
    add_review(product, other_user, 2, 'Too strong')
    product.refresh_from_db()
    assert product.average_rating == pytest.approx(3.5)
    assert product.review_count == 2

    # Re-submitting replaces the earlier review
    add_review(product, user, 3)
    product.refresh_from_db()
    assert product.review_count == 2
    assert product.average_rating == pytest.approx(2.5)

    remove_review(product.reviews.get(user=other_user))
    product.refresh_from_db()
    assert product.review_count == 1
    assert product.average_rating == pytest.approx(3.0)


def test_generated_sku_uses_category_prefix():
    product = create_product({
        'name': 'Dish Soap',
        'description': 'Orange oil',
        'price': Decimal('30.00'),
        'category': 'cleaning',
    })
    assert product.sku.startswith('GZ-CLE-')
    assert generate_sku('cleaning') != product.sku


def test_sale_price_and_stock_flags(make_product):
    product = make_product(price=Decimal('80.00'), is_on_sale=True, sale_percentage=25, stock=3)
    assert product.sale_price == Decimal('60.00')
    assert product.in_stock
    assert product.low_stock

    sold_out = make_product(stock=0)
    assert not sold_out.in_stock
    assert not sold_out.low_stock


def test_search_is_case_insensitive(make_product):
    make_product(name='Orange Peel Scrub')
    make_product(name='Bamboo Brush', description='Great with ORANGE oil')
    make_product(name='Hidden Orange', is_active=False)

    names = {p.name for p in search_products('orange')}
    assert names == {'Orange Peel Scrub', 'Bamboo Brush'}


def test_public_listing_hides_inactive_products(api_client, make_product):
    make_product(name='Visible')
    make_product(name='Retired', is_active=False)

    response = api_client.get('/api/products/')
    assert response.status_code == 200
    assert [p['name'] for p in response.json()['products']] == ['Visible']


def test_category_listing(api_client, make_product):
    make_product(category='kitchen')
    make_product(category='gifts')

    response = api_client.get('/api/products/category/kitchen/')
    assert response.status_code == 200
    assert response.json()['count'] == 1

    assert api_client.get('/api/products/category/garden/').status_code == 400


def test_featured_and_on_sale(api_client, make_product):
    make_product(is_featured=True)
    make_product(is_on_sale=True, sale_percentage=10)

    assert api_client.get('/api/products/featured/').json()['count'] == 1
    on_sale = api_client.get('/api/products/on-sale/').json()['products']
    assert len(on_sale) == 1
    assert on_sale[0]['sale_price'] == 9.0


def test_search_endpoint(api_client, make_product):
    make_product(name='Citrus Lip Balm')
    response = api_client.get('/api/products/search/lip/')
    assert response.status_code == 200
    assert response.json()['count'] == 1


def test_product_detail_and_missing_product(api_client, product):
    response = api_client.get(f'/api/products/{product.id}/')
    assert response.status_code == 200
    assert response.json()['product']['name'] == product.name
    assert response.json()['product']['reviews'] == []

    missing = api_client.get('/api/products/00000000-0000-0000-0000-000000000000/')
    assert missing.status_code == 404
    assert missing.json()['success'] is False


def test_product_detail_ignores_a_bad_token(api_client, product):
    api_client.credentials(HTTP_AUTHORIZATION='Bearer garbage')
    assert api_client.get(f'/api/products/{product.id}/').status_code == 200


def test_post_review_via_api(auth_client, api_client, product):
    response = auth_client.post(f'/api/products/{product.id}/reviews/', {'rating': 4}, format='json')
    assert response.status_code == 201
    assert response.json()['review_count'] == 1
    assert response.json()['average_rating'] == 4.0

    assert api_client.post(f'/api/products/{product.id}/reviews/', {'rating': 4}, format='json').status_code == 401
    assert auth_client.post(f'/api/products/{product.id}/reviews/', {'rating': 6}, format='json').status_code == 400


def test_product_detail_reports_the_recorded_view(api_client, product):
    first = api_client.get(f'/api/products/{product.id}/').json()['product']
    second = api_client.get(f'/api/products/{product.id}/').json()['product']

    assert first['view_count'] == 1
    assert second['view_count'] == 2
    product.refresh_from_db()
    assert product.view_count == 2


def test_withdraw_review_via_api(auth_client, client_for, other_user, product):
    add_review(product, other_user, 2)
    auth_client.post(f'/api/products/{product.id}/reviews/', {'rating': 4}, format='json')

    response = auth_client.delete(f'/api/products/{product.id}/reviews/')
    assert response.status_code == 200
    assert response.json()['review_count'] == 1
    assert response.json()['average_rating'] == 2.0

    assert auth_client.delete(f'/api/products/{product.id}/reviews/').status_code == 404
    assert client_for(other_user).delete(f'/api/products/{product.id}/reviews/').status_code == 200
    product.refresh_from_db()
    assert product.review_count == 0
    assert product.average_rating == 0


def test_admin_edit_keeps_counters_moved_by_orders_and_reviews(user, other_user, product):
    stale = get_product(product.id)
    place_order(user, [{'product_id': product.id, 'quantity': 3}], payment_method='card')
    add_review(product, other_user, 4)

    update_product(stale, {'name': 'Orange Soap Deluxe'})

    product.refresh_from_db()
    assert product.name == 'Orange Soap Deluxe'
    assert product.stock == 7
    assert product.sold_count == 3
    assert product.review_count == 1
    assert product.average_rating == pytest.approx(4.0)
