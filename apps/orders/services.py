"""
Order placement and status transitions.

Placement runs in a single transaction: products are row-locked, stock is
decremented with a conditional UPDATE (``stock >= quantity``) and any
shortfall rolls the whole order back. Notifications are sent after the
transaction commits and never fail the request.
"""
import logging
from collections import OrderedDict
from decimal import ROUND_FLOOR, Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F, Max, QuerySet, Value
from django.db.models.functions import Greatest
from django.utils import timezone

from apps.accounts.services import award_loyalty_points
from apps.catalog.models import Product
from apps.core.exceptions import (
    InsufficientStockException,
    InvalidTransitionException,
    NotFoundException,
    ValidationException,
)
from apps.notifications.services import notify_safely
from .models import Order, OrderItem, format_order_number

logger = logging.getLogger(__name__)

STATUS_FLOW = [
    Order.STATUS_PENDING,
    Order.STATUS_PROCESSING,
    Order.STATUS_SHIPPED,
    Order.STATUS_DELIVERED,
]
TERMINAL_STATUSES = {Order.STATUS_DELIVERED, Order.STATUS_CANCELLED}

# Concurrent placements can pick the same next sequence; the unique
# constraint rejects the loser, which then retries.
SEQUENCE_RETRIES = 3

ORDER_ACTION = {"label": "View order", "url": "/account"}


def can_transition(current: str, requested: str) -> bool:
    """
    Forward moves along the flow, or cancellation, from a non-terminal status.
    """
    if current in TERMINAL_STATUSES:
        return False
    if requested == Order.STATUS_CANCELLED:
        return True
    if requested not in STATUS_FLOW or current not in STATUS_FLOW:
        return False
    return STATUS_FLOW.index(requested) > STATUS_FLOW.index(current)


def loyalty_points_for(total: Decimal) -> int:
    """One point per whole currency unit spent."""
    return int(Decimal(total).to_integral_value(rounding=ROUND_FLOOR))


def status_message(order_number: str, status: str) -> Tuple[str, str]:
    messages = {
        Order.STATUS_PROCESSING: (
            "Order in preparation",
            f"Your order {order_number} is now being prepared.",
        ),
        Order.STATUS_SHIPPED: (
            "Order shipped!",
            f"Your order {order_number} has been shipped and will arrive soon!",
        ),
        Order.STATUS_DELIVERED: (
            "Order delivered!",
            f"Your order {order_number} has been delivered. Thank you for your trust!",
        ),
        Order.STATUS_CANCELLED: (
            "Order cancelled",
            f"Your order {order_number} has been cancelled.",
        ),
    }
    return messages.get(status, (
        "Order status updated",
        f"The status of your order {order_number} is now: {status}",
    ))


def _merge_lines(items: Iterable[Dict]) -> "OrderedDict[str, int]":
    """Collapse repeated products into one line, keeping first-seen order."""
    lines: "OrderedDict[str, int]" = OrderedDict()
    for item in items:
        product_id = str(item['product_id'])
        quantity = int(item['quantity'])
        if quantity < 1:
            raise ValidationException("Quantity must be at least 1", field="items.quantity")
        lines[product_id] = lines.get(product_id, 0) + quantity
    return lines


def place_order(
    user,
    items: List[Dict],
    payment_method: str,
    shipping_address: Optional[Dict] = None,
    billing_address: Optional[Dict] = None,
    notes: str = '',
    delivery_instructions: str = '',
    declared_total: Optional[Decimal] = None,
) -> Order:
    """
    Create an order for ``user`` from ``items`` (``product_id``/``quantity``
    pairs). Names and prices are taken from the catalog, never the client.
    """
    lines = _merge_lines(items)
    if not lines:
        raise ValidationException("An order needs at least one item", field="items")

    for attempt in range(1, SEQUENCE_RETRIES + 1):
        try:
            with transaction.atomic():
                order = _create_order(
                    user, lines, payment_method,
                    shipping_address=shipping_address if shipping_address else dict(user.address or {}),
                    billing_address=billing_address or {},
                    notes=notes,
                    delivery_instructions=delivery_instructions,
                )
            break
        except IntegrityError:
            if attempt == SEQUENCE_RETRIES:
                raise
            logger.warning(f"Order sequence collision for user {user.id}, retrying ({attempt})")

    if declared_total is not None and Decimal(declared_total) != order.total:
        logger.warning(
            f"Order {order.order_number}: client total {declared_total} ignored, "
            f"computed {order.total}"
        )

    logger.info(f"Order {order.order_number} placed by {user.id} - total {order.total}")
    _notify_order_placed(user, order)
    return order


def _create_order(user, lines, payment_method, **fields) -> Order:
    products = {
        str(p.pk): p
        for p in Product.objects.select_for_update().filter(pk__in=list(lines.keys()))
    }

    snapshots = []
    total = Decimal('0.00')
    for product_id, quantity in lines.items():
        product = products.get(product_id)
        if product is None or not product.is_active:
            raise ValidationException(f"Product {product_id} is not available", field="items")

        updated = Product.objects.filter(pk=product.pk, stock__gte=quantity).update(
            stock=F('stock') - quantity,
            sold_count=F('sold_count') + quantity,
        )
        if not updated:
            raise InsufficientStockException(product.name, product.stock)

        price = product.sale_price
        total += price * quantity
        snapshots.append((product, price, quantity))

    sequence = (Order.objects.aggregate(top=Max('sequence'))['top'] or 0) + 1
    order = Order.objects.create(
        user=user,
        sequence=sequence,
        order_number=format_order_number(sequence),
        total=total.quantize(Decimal('0.01')),
        payment_method=payment_method,
        **fields,
    )
    OrderItem.objects.bulk_create([
        OrderItem(
            order=order,
            product=product,
            position=position,
            name=product.name,
            price=price,
            quantity=quantity,
            image=product.main_image,
        )
        for position, (product, price, quantity) in enumerate(snapshots)
    ])

    award_loyalty_points(user.id, loyalty_points_for(order.total))
    return order


def _notify_order_placed(user, order: Order) -> None:
    notify_safely(
        user,
        'order',
        "Order confirmed",
        f"Your order {order.order_number} has been confirmed. Total: {order.total} {settings.CURRENCY}",
        action=ORDER_ACTION,
        data={"order_id": order.id, "order_number": order.order_number},
    )

    points = loyalty_points_for(order.total)
    if points > 0:
        notify_safely(
            user,
            'promotion',
            "Loyalty points earned!",
            f"You earned {points} GreenZest points for your order. Keep shopping sustainably!",
            action={"label": "View my points", "url": "/account"},
            data={"points_earned": points, "order_number": order.order_number},
        )


def change_status(order: Order, new_status: str, actor, reason: str = '') -> Order:
    """
    Move ``order`` to ``new_status``. Terminal orders accept no transition.
    Cancelling puts every line item's quantity back into stock.
    """
    with transaction.atomic():
        locked = Order.objects.select_for_update().get(pk=order.pk)
        current = locked.status
        if not can_transition(current, new_status):
            logger.warning(f"Rejected transition {current} -> {new_status} on {locked.order_number}")
            raise InvalidTransitionException(current, new_status)

        now = timezone.now()
        locked.status = new_status
        if new_status == Order.STATUS_CANCELLED:
            _restore_stock(locked)
            locked.cancelled_at = now
            locked.cancelled_by = actor
            locked.cancellation_reason = reason or ''
            if locked.payment_status == 'paid':
                locked.payment_status = 'refunded'
        elif new_status == Order.STATUS_DELIVERED:
            locked.delivered_at = now
            if locked.payment_method == 'cash_on_delivery' and locked.payment_status == 'pending':
                locked.payment_status = 'paid'
        locked.save()

    logger.info(f"Order {locked.order_number}: {current} -> {new_status} by {actor.id}")

    title, message = status_message(locked.order_number, new_status)
    notify_safely(
        locked.user,
        'order',
        title,
        message,
        action={"label": "Track my order", "url": "/account"},
        data={"order_id": locked.id, "order_number": locked.order_number, "status": new_status},
    )
    return locked


def _restore_stock(order: Order) -> None:
    for item in order.items.all():
        if item.product_id is None:
            # Product deleted since the order was placed
            continue
        Product.objects.filter(pk=item.product_id).update(
            stock=F('stock') + item.quantity,
            sold_count=Greatest(F('sold_count') - item.quantity, Value(0)),
        )


def cancel_order(user, order_id, reason: str = '') -> Order:
    """Owner cancellation."""
    order = get_order_for(user, order_id)
    return change_status(order, Order.STATUS_CANCELLED, actor=user, reason=reason)


def orders_for(user) -> QuerySet:
    return Order.objects.filter(user=user).prefetch_related('items').order_by('-sequence')


def all_orders() -> QuerySet:
    return Order.objects.select_related('user').prefetch_related('items').order_by('-sequence')


def get_order_for(user, order_id) -> Order:
    """An order owned by ``user``; other users' orders look missing."""
    order = orders_for(user).filter(pk=order_id).first()
    if order is None:
        raise NotFoundException("Order")
    return order


def get_order(order_id) -> Order:
    order = all_orders().filter(pk=order_id).first()
    if order is None:
        raise NotFoundException("Order")
    return order
