"""
Catalog Models - GreenZest product catalog
Tables: Products, Reviews
"""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.core.models import BaseModel
from .ratings import rating_summary


class Product(BaseModel):
    """
    Product in the catalog.

    ``average_rating`` and ``review_count`` are derived from the review rows
    and only change through ``refresh_rating()``.
    """
    CATEGORY_CHOICES = [
        ('cosmetics', 'Cosmetics'),
        ('cleaning', 'Cleaning'),
        ('kitchen', 'Kitchen'),
        ('bathroom', 'Bathroom'),
        ('accessories', 'Accessories'),
        ('gifts', 'Gifts'),
    ]

    name = models.CharField(max_length=255)
    description = models.TextField()
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    original_price = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    subcategory = models.CharField(max_length=100, blank=True, default='')
    image = models.CharField(max_length=500, blank=True, default='')
    images = models.JSONField(default=list, blank=True)
    stock = models.PositiveIntegerField(default=0)
    sku = models.CharField(max_length=50, unique=True, blank=True, null=True)
    weight = models.FloatField(blank=True, null=True)
    dimensions = models.JSONField(default=dict, blank=True, help_text="length, width, height")

    is_active = models.BooleanField(default=True)
    is_featured = models.BooleanField(default=False)
    is_on_sale = models.BooleanField(default=False)
    sale_percentage = models.PositiveSmallIntegerField(
        blank=True, null=True, validators=[MaxValueValidator(100)]
    )
    tags = models.JSONField(default=list, blank=True)

    # Eco impact per unit sold
    co2_saved = models.FloatField(default=0)
    water_saved = models.FloatField(default=0)
    plastic_saved = models.FloatField(default=0)

    ingredients = models.JSONField(default=list, blank=True)
    instructions = models.TextField(blank=True, default='')
    warnings = models.TextField(blank=True, default='')
    certifications = models.JSONField(default=list, blank=True)

    average_rating = models.FloatField(default=0)
    review_count = models.PositiveIntegerField(default=0)
    sold_count = models.PositiveIntegerField(default=0)
    view_count = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'catalog_products'
        verbose_name = 'Product'
        verbose_name_plural = 'Products'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['category', 'is_active'], name='catalog_category_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.price} {settings.CURRENCY})"

    @property
    def sale_price(self) -> Decimal:
        if self.is_on_sale and self.sale_percentage:
            discount = self.price * Decimal(self.sale_percentage) / Decimal(100)
            return (self.price - discount).quantize(Decimal('0.01'))
        return self.price

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def low_stock(self) -> bool:
        return 0 < self.stock <= settings.LOW_STOCK_THRESHOLD

    @property
    def main_image(self) -> str:
        return self.image or (self.images[0] if self.images else '')

    def refresh_rating(self, save: bool = True):
        """Recompute the rating aggregates from the current reviews."""
        ratings = list(self.reviews.values_list('rating', flat=True))
        self.average_rating, self.review_count = rating_summary(ratings)
        if save:
            self.save(update_fields=['average_rating', 'review_count', 'updated_at'])


class Review(BaseModel):
    """
    Customer rating on a product. One review per customer per product.
    """
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='reviews')
    user = models.ForeignKey(
        'accounts.User', on_delete=models.SET_NULL, related_name='reviews', blank=True, null=True
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'catalog_reviews'
        verbose_name = 'Review'
        verbose_name_plural = 'Reviews'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['product', 'user'], name='catalog_one_review_per_user'),
        ]

    def __str__(self):
        return f"{self.rating}/5 on {self.product_id}"
