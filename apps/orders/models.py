"""
Order Models - customer orders with snapshotted line items
Tables: Orders, OrderItems
"""
from django.db import models

from apps.core.models import BaseModel


def format_order_number(sequence: int) -> str:
    return f"CMD-{sequence:04d}"


class Order(BaseModel):
    """
    Customer order. Line items are snapshots taken at order time, so later
    product edits or deletions never change a historical order.
    """
    STATUS_PENDING = 'pending'
    STATUS_PROCESSING = 'processing'
    STATUS_SHIPPED = 'shipped'
    STATUS_DELIVERED = 'delivered'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PROCESSING, 'Processing'),
        (STATUS_SHIPPED, 'Shipped'),
        (STATUS_DELIVERED, 'Delivered'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    PAYMENT_METHOD_CHOICES = [
        ('card', 'Card'),
        ('paypal', 'PayPal'),
        ('cash_on_delivery', 'Cash on delivery'),
    ]

    PAYMENT_STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('paid', 'Paid'),
        ('failed', 'Failed'),
        ('refunded', 'Refunded'),
    ]

    sequence = models.PositiveIntegerField(unique=True, editable=False)
    order_number = models.CharField(max_length=20, unique=True, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='orders')
    total = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='pending')
    shipping_address = models.JSONField(default=dict, blank=True)
    billing_address = models.JSONField(default=dict, blank=True)
    notes = models.TextField(blank=True, default='')
    delivery_instructions = models.TextField(blank=True, default='')
    tracking_number = models.CharField(max_length=100, blank=True, default='')
    estimated_delivery = models.DateTimeField(blank=True, null=True)
    delivered_at = models.DateTimeField(blank=True, null=True)
    cancelled_at = models.DateTimeField(blank=True, null=True)
    cancelled_by = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, related_name='cancelled_orders', blank=True, null=True
    )
    cancellation_reason = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'orders_orders'
        verbose_name = 'Order'
        verbose_name_plural = 'Orders'
        ordering = ['-sequence']

    def __str__(self):
        return f"Order {self.order_number} - {self.status}"

    @property
    def is_terminal(self) -> bool:
        return self.status in (self.STATUS_DELIVERED, self.STATUS_CANCELLED)


class OrderItem(BaseModel):
    """
    Snapshot of one ordered product: name and unit price as they were when
    the order was placed.
    """
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(
        'catalog.Product', on_delete=models.SET_NULL, related_name='order_items', blank=True, null=True
    )
    position = models.PositiveSmallIntegerField(default=0)
    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField()
    image = models.CharField(max_length=500, blank=True, default='')

    class Meta:
        db_table = 'orders_order_items'
        verbose_name = 'Order item'
        verbose_name_plural = 'Order items'
        ordering = ['order', 'position']

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    @property
    def line_total(self):
        return self.price * self.quantity
