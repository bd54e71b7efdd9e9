import pytest

from apps.accounts.loyalty import achievements_for, next_tier_progress, tier_for_points
from apps.accounts.models import User


@pytest.mark.parametrize('points, tier', [
    (0, 'bronze'),
    (99, 'bronze'),
    (100, 'silver'),
    (499, 'silver'),
    (500, 'gold'),
    (999, 'gold'),
    (1000, 'platinum'),
    (25000, 'platinum'),
])
def test_tier_for_points(points, tier):
    assert tier_for_points(points) == tier


def test_next_tier_progress_midway():
    assert next_tier_progress(50) == ('silver', 50.0)
    assert next_tier_progress(300) == ('gold', 50.0)
    assert next_tier_progress(750) == ('platinum', 50.0)


def test_platinum_has_no_next_tier():
    assert next_tier_progress(1500) == (None, 100.0)


def test_achievements_thresholds():
    user = User(total_co2_saved=10, total_water_saved=49999, total_oranges_recycled=100, loyalty_points=0)
    names = [a['name'] for a in achievements_for(user)]
    assert names == ['Eco-Warrior', 'Expert Recycler']


def test_add_loyalty_points_recomputes_tier():
    user = User(loyalty_points=90)
    user.add_loyalty_points(15)
    assert user.loyalty_points == 105
    assert user.tier == 'silver'


def test_add_loyalty_points_rejects_negative():
    user = User(loyalty_points=90)
    with pytest.raises(ValueError):
        user.add_loyalty_points(-1)
    assert user.loyalty_points == 90


def test_add_impact_awards_whole_kilograms_of_co2():
    user = User(loyalty_points=95)
    user.add_impact(5.7, 1000, 3)
    assert user.total_co2_saved == pytest.approx(5.7)
    assert user.total_water_saved == 1000
    assert user.total_oranges_recycled == 3
    assert user.loyalty_points == 100
    assert user.tier == tier_for_points(user.loyalty_points) == 'silver'


def test_add_impact_rejects_negative_counters():
    user = User()
    with pytest.raises(ValueError):
        user.add_impact(-1, 0, 0)
