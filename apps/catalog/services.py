"""
Catalog operations: product lifecycle, SKU generation, reviews and queries.
"""
import logging
from typing import Any, Dict

from django.db import IntegrityError, transaction
from django.db.models import F, Q, QuerySet

from apps.core.exceptions import NotFoundException, ValidationException
from .models import Product, Review

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 8


def active_products() -> QuerySet:
    return Product.objects.filter(is_active=True)


def featured_products() -> QuerySet:
    return active_products().filter(is_featured=True)[:FEATURED_LIMIT]


def products_on_sale() -> QuerySet:
    return active_products().filter(is_on_sale=True)[:FEATURED_LIMIT]


def products_in_category(category: str) -> QuerySet:
    category = category.lower()
    if category not in dict(Product.CATEGORY_CHOICES):
        raise ValidationException(f"Unknown category '{category}'", field="category")
    return active_products().filter(category=category)


def search_products(query: str) -> QuerySet:
    query = query.strip()
    if not query:
        return Product.objects.none()
    return active_products().filter(
        Q(name__icontains=query) | Q(description__icontains=query) | Q(subcategory__icontains=query)
    )


def get_product(product_id, active_only: bool = False) -> Product:
    queryset = active_products() if active_only else Product.objects.all()
    try:
        return queryset.get(pk=product_id)
    except Product.DoesNotExist:
        raise NotFoundException("Product")


def generate_sku(category: str) -> str:
    """``GZ-<first three letters of category>-<4-digit counter>``, skipping taken values."""
    prefix = f"GZ-{category.upper()[:3]}-"
    counter = Product.objects.count() + 1
    while Product.objects.filter(sku=f"{prefix}{counter:04d}").exists():
        counter += 1
    return f"{prefix}{counter:04d}"


def create_product(data: Dict[str, Any]) -> Product:
    product = Product(**data)
    if not product.sku:
        product.sku = generate_sku(product.category)
    try:
        with transaction.atomic():
            product.save()
    except IntegrityError:
        raise ValidationException("A product with this SKU already exists", field="sku")
    logger.info(f"Created product {product.id} ({product.sku})")
    return product


def update_product(product: Product, data: Dict[str, Any]) -> Product:
    """
    Apply ``data`` to ``product``. Only the given columns are written, so
    counters moved by concurrent orders and reviews (stock, sold_count,
    rating aggregates) are left as the database holds them.
    """
    for field, value in data.items():
        setattr(product, field, value)
    try:
        with transaction.atomic():
            product.save(update_fields=list(data) + ['updated_at'])
    except IntegrityError:
        raise ValidationException("A product with this SKU already exists", field="sku")
    logger.info(f"Updated product {product.id}")
    return product


def delete_product(product: Product) -> None:
    """Remove a product. Order line items keep their name/price snapshots."""
    product_id = product.id
    product.delete()
    logger.info(f"Deleted product {product_id}")


@transaction.atomic
def add_review(product: Product, user, rating: int, comment: str = '') -> Review:
    """Create or replace ``user``'s review and refresh the product aggregates."""
    review, created = Review.objects.update_or_create(
        product=product,
        user=user,
        defaults={'rating': rating, 'comment': comment},
    )
    product.refresh_rating()
    logger.info(f"{'Added' if created else 'Updated'} review on {product.id} by {user.id}")
    return review


def get_review(product: Product, user) -> Review:
    review = Review.objects.filter(product=product, user=user).first()
    if review is None:
        raise NotFoundException("Review")
    return review


@transaction.atomic
def remove_review(review: Review) -> None:
    product = review.product
    review.delete()
    product.refresh_rating()
    logger.info(f"Removed review on {product.id} by {review.user_id}")


def record_view(product: Product) -> None:
    Product.objects.filter(pk=product.pk).update(view_count=F('view_count') + 1)
    product.refresh_from_db(fields=['view_count'])
