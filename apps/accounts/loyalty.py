"""
Loyalty tiers and achievements.

Everything here is a pure function of a user's counters so the derived
``tier`` can be recomputed (and audited) after any mutation.
"""
from typing import Dict, List, Optional, Tuple

BRONZE = 'bronze'
SILVER = 'silver'
GOLD = 'gold'
PLATINUM = 'platinum'

# Ordered lowest to highest
TIER_THRESHOLDS: List[Tuple[str, int]] = [
    (BRONZE, 0),
    (SILVER, 100),
    (GOLD, 500),
    (PLATINUM, 1000),
]

TIER_CHOICES = [(name, name.capitalize()) for name, _ in TIER_THRESHOLDS]


def tier_for_points(points: int) -> str:
    """Highest tier whose threshold does not exceed ``points``."""
    current = BRONZE
    for name, threshold in TIER_THRESHOLDS:
        if points >= threshold:
            current = name
    return current


def next_tier_progress(points: int) -> Tuple[Optional[str], float]:
    """
    Return the next tier and the percentage of the way there.

    Platinum members have no next tier and are reported at 100%.
    """
    current = tier_for_points(points)
    names = [name for name, _ in TIER_THRESHOLDS]
    index = names.index(current)
    if index == len(names) - 1:
        return None, 100.0

    floor = TIER_THRESHOLDS[index][1]
    next_name, ceiling = TIER_THRESHOLDS[index + 1]
    progress = (points - floor) / (ceiling - floor) * 100
    return next_name, round(min(max(progress, 0.0), 100.0), 2)


ACHIEVEMENTS = [
    # (key, name, description, icon, counter attribute, threshold)
    ('eco_warrior', 'Eco-Warrior', 'Saved 10kg of CO2', '🌱', 'total_co2_saved', 10),
    ('water_keeper', 'Water Keeper', 'Saved 50,000L of water', '💧', 'total_water_saved', 50000),
    ('expert_recycler', 'Expert Recycler', 'Recycled 100 orange peels', '🍊', 'total_oranges_recycled', 100),
    ('loyal_member', 'Loyal Member', 'Reached 500 loyalty points', '🏆', 'loyalty_points', 500),
]


def achievements_for(user) -> List[Dict[str, str]]:
    """Achievements unlocked by the user's current counters."""
    unlocked = []
    for key, name, description, icon, attribute, threshold in ACHIEVEMENTS:
        if (getattr(user, attribute, 0) or 0) >= threshold:
            unlocked.append({
                "key": key,
                "name": name,
                "description": description,
                "icon": icon,
            })
    return unlocked
