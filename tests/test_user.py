import pytest

pytestmark = pytest.mark.django_db


def test_me(auth_client, user):
    body = auth_client.get('/api/user/me/').json()
    assert body['user']['id'] == str(user.id)
    assert 'password' not in body['user']


def test_update_profile_merges_address(auth_client, user):
    user.address = {'city': 'Fes', 'country': 'Morocco'}
    user.save()

    response = auth_client.put('/api/user/profile/', {
        'name': 'Amina B.',
        'phone': '+212 600-123456',
        'address': {'city': 'Rabat'},
    }, format='json')

    assert response.status_code == 200
    user.refresh_from_db()
    assert user.name == 'Amina B.'
    assert user.phone == '+212 600-123456'
    assert user.address == {'city': 'Rabat', 'country': 'Morocco'}


def test_update_profile_rejects_bad_phone(auth_client):
    response = auth_client.put('/api/user/profile/', {'phone': 'call me maybe'}, format='json')
    assert response.status_code == 400
    assert response.json()['errors'][0]['field'] == 'phone'


def test_impact_update_awards_points(auth_client, user):
    response = auth_client.put('/api/user/impact/', {
        'co2_saved': 12.5,
        'water_saved': 300,
        'oranges_recycled': 4,
    }, format='json')

    assert response.status_code == 200
    impact = response.json()['impact']
    assert impact['total_co2_saved'] == 12.5
    assert impact['loyalty_points'] == 12

    assert auth_client.get('/api/user/impact/').json()['impact']['total_oranges_recycled'] == 4


def test_impact_rejects_negative_values(auth_client):
    response = auth_client.put('/api/user/impact/', {'co2_saved': -1}, format='json')
    assert response.status_code == 400


def test_stats_report_achievements_and_progress(auth_client, user):
    user.total_co2_saved = 11
    user.add_loyalty_points(150)
    user.save()

    stats = auth_client.get('/api/user/stats/').json()['stats']
    assert [a['name'] for a in stats['achievements']] == ['Eco-Warrior']
    assert stats['tier'] == 'silver'
    assert stats['next_tier'] == 'gold'
    assert stats['progress_to_next_tier'] == 12.5
