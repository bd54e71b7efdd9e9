"""
Admin dashboard aggregation.

Pure reductions over already-loaded users, orders and products. Nothing here
touches the database, so the views decide what gets loaded and the
reductions can be tested with plain objects.
"""
from collections import Counter, OrderedDict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List

from django.utils import timezone

from apps.accounts.loyalty import TIER_THRESHOLDS

PERIODS = ('day', 'week', 'month')

DAYS_IN_SERIES = 7
WEEKS_IN_SERIES = 8
MONTHS_IN_SERIES = 12

CANCELLED = 'cancelled'
OPEN_STATUSES = ('pending', 'processing')


def _local_date(value) -> date:
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    return value


def _revenue(orders: Iterable) -> Decimal:
    return sum((Decimal(o.total) for o in orders if o.status != CANCELLED), Decimal('0'))


def user_stats(users: Iterable) -> Dict:
    users = list(users)
    tiers = Counter(u.tier for u in users)
    return {
        "total_users": len(users),
        "active_users": sum(1 for u in users if u.is_active),
        "admins": sum(1 for u in users if u.role == 'admin'),
        "total_co2_saved": sum(u.total_co2_saved or 0 for u in users),
        "total_water_saved": sum(u.total_water_saved or 0 for u in users),
        "total_oranges_recycled": sum(u.total_oranges_recycled or 0 for u in users),
        "tiers": {tier: tiers.get(tier, 0) for tier, _ in TIER_THRESHOLDS},
    }


def order_stats(orders: Iterable, today: date) -> Dict:
    """Totals over every order plus the slice placed on ``today``."""
    orders = list(orders)
    todays = [o for o in orders if _local_date(o.created_at) == today]
    return {
        "total_orders": len(orders),
        "total_revenue": _revenue(orders),
        "today_orders": len(todays),
        "today_revenue": _revenue(todays),
        "pending_orders": sum(1 for o in orders if o.status in OPEN_STATUSES),
        "by_status": dict(Counter(o.status for o in orders)),
    }


def product_stats(products: Iterable, low_stock_threshold: int) -> Dict:
    products = list(products)
    return {
        "total_products": len(products),
        "active_products": sum(1 for p in products if p.is_active),
        "out_of_stock": sum(1 for p in products if p.stock == 0),
        "low_stock": sum(1 for p in products if 0 < p.stock <= low_stock_threshold),
        "by_category": dict(Counter(p.category for p in products)),
    }


def _month_start(day: date, months_back: int) -> date:
    index = day.year * 12 + (day.month - 1) - months_back
    return date(index // 12, index % 12 + 1, 1)


def _bucket_starts(period: str, today: date) -> List[date]:
    if period == 'day':
        return [today - timedelta(days=n) for n in range(DAYS_IN_SERIES - 1, -1, -1)]
    if period == 'week':
        monday = today - timedelta(days=today.weekday())
        return [monday - timedelta(weeks=n) for n in range(WEEKS_IN_SERIES - 1, -1, -1)]
    if period == 'month':
        return [_month_start(today, n) for n in range(MONTHS_IN_SERIES - 1, -1, -1)]
    raise ValueError(f"Unknown period '{period}', expected one of {', '.join(PERIODS)}")


def _bucket_key(period: str, day: date) -> date:
    if period == 'day':
        return day
    if period == 'week':
        return day - timedelta(days=day.weekday())
    return day.replace(day=1)


def revenue_series(orders: Iterable, period: str, today: date) -> List[Dict]:
    """
    Order count and revenue per calendar bucket ending with the bucket that
    contains ``today``. Cancelled orders are left out of both figures.

    ``day`` covers the last 7 days, ``week`` the last 8 weeks (starting
    Monday) and ``month`` the last 12 calendar months. Empty buckets are
    reported with zeros.
    """
    buckets = OrderedDict(
        (start, {"orders": 0, "revenue": Decimal('0')})
        for start in _bucket_starts(period, today)
    )
    for order in orders:
        if order.status == CANCELLED:
            continue
        key = _bucket_key(period, _local_date(order.created_at))
        if key in buckets:
            buckets[key]["orders"] += 1
            buckets[key]["revenue"] += Decimal(order.total)

    return [
        {"period": start.isoformat(), "orders": values["orders"], "revenue": values["revenue"]}
        for start, values in buckets.items()
    ]


def top_products(products: Iterable, limit: int = 5) -> List:
    return sorted(products, key=lambda p: p.sold_count, reverse=True)[:limit]
