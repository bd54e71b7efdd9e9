"""
Public catalog endpoints. A valid token is optional; it only matters for
posting reviews and comments.
"""
import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from apps.catalog import services as catalog
from apps.comments import services as comments
from ..authentication import OptionalBearerTokenAuthentication
from ..serializers import (
    CommentCreateSerializer,
    CommentSerializer,
    CommentThreadSerializer,
    ProductDetailSerializer,
    ProductSerializer,
    ReviewCreateSerializer,
    ReviewSerializer,
)
from .base import success

logger = logging.getLogger(__name__)


class PublicCatalogView(APIView):
    authentication_classes = [OptionalBearerTokenAuthentication]
    permission_classes = [AllowAny]

    def product_list(self, queryset, **extra):
        products = list(queryset)
        return success(count=len(products), products=ProductSerializer(products, many=True).data, **extra)


class ProductListView(PublicCatalogView):

    @extend_schema(responses={200: ProductSerializer(many=True)}, description="All active products")
    def get(self, request):
        return self.product_list(catalog.active_products())


class FeaturedProductsView(PublicCatalogView):

    @extend_schema(responses={200: ProductSerializer(many=True)}, description="Featured products")
    def get(self, request):
        return self.product_list(catalog.featured_products())


class OnSaleProductsView(PublicCatalogView):

    @extend_schema(responses={200: ProductSerializer(many=True)}, description="Products on sale")
    def get(self, request):
        return self.product_list(catalog.products_on_sale())


class CategoryProductsView(PublicCatalogView):

    @extend_schema(responses={200: ProductSerializer(many=True)}, description="Active products in a category")
    def get(self, request, category):
        return self.product_list(catalog.products_in_category(category), category=category.lower())


class SearchProductsView(PublicCatalogView):

    @extend_schema(
        responses={200: ProductSerializer(many=True)},
        description="Case-insensitive match on name, description and subcategory",
    )
    def get(self, request, query):
        logger.info(f"Product search: {query[:100]}")
        return self.product_list(catalog.search_products(query), query=query)


class ProductDetailView(PublicCatalogView):

    @extend_schema(responses={200: ProductDetailSerializer}, description="One product with its reviews")
    def get(self, request, product_id):
        is_admin = getattr(request.user, 'is_admin', False)
        product = catalog.get_product(product_id, active_only=not is_admin)
        catalog.record_view(product)
        return success(product=ProductDetailSerializer(product).data)


class ProductReviewView(APIView):
    """
    Rate a product. Submitting again replaces the caller's earlier review;
    DELETE withdraws it.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=ReviewCreateSerializer,
        responses={201: ReviewSerializer},
        description="Add or replace the caller's review",
    )
    def post(self, request, product_id):
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        product = catalog.get_product(product_id, active_only=True)
        review = catalog.add_review(product, request.user, data['rating'], data['comment'])
        return success(
            "Review saved",
            status.HTTP_201_CREATED,
            review=ReviewSerializer(review).data,
            average_rating=product.average_rating,
            review_count=product.review_count,
        )

    @extend_schema(responses={200: None}, description="Remove the caller's review")
    def delete(self, request, product_id):
        review = catalog.get_review(catalog.get_product(product_id), request.user)
        catalog.remove_review(review)
        product = review.product
        return success(
            "Review removed",
            average_rating=product.average_rating,
            review_count=product.review_count,
        )


class ProductCommentsView(PublicCatalogView):

    def get_permissions(self):
        if self.request.method == 'POST':
            return [IsAuthenticated()]
        return super().get_permissions()

    @extend_schema(
        responses={200: CommentThreadSerializer(many=True)},
        description="Approved comments on a product with their replies",
    )
    def get(self, request, product_id):
        product = catalog.get_product(product_id, active_only=True)
        threads = list(comments.comments_for_product(product))
        return success(count=len(threads), comments=CommentThreadSerializer(threads, many=True).data)

    @extend_schema(
        request=CommentCreateSerializer,
        responses={201: CommentSerializer},
        description="Comment on a product or reply to a comment",
    )
    def post(self, request, product_id):
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        product = catalog.get_product(product_id, active_only=True)
        comment = comments.create_comment(
            request.user,
            data['content'],
            product=product,
            parent_id=data.get('parent_id'),
            rating=data['rating'],
            type=data['type'],
        )
        return success("Comment posted", status.HTTP_201_CREATED, comment=CommentSerializer(comment).data)
