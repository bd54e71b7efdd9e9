"""
Admin dashboard endpoints: users, orders, catalog, statistics, admin
accounts, comment moderation and broadcasts.

Every view here requires an authenticated admin.
"""
import logging

from django.conf import settings
from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.accounts import services as accounts
from apps.accounts.models import User
from apps.catalog import services as catalog
from apps.catalog.models import Product
from apps.comments import services as comments
from apps.core.exceptions import ValidationException
from apps.dashboard import stats
from apps.notifications.services import broadcast
from apps.orders import services as orders
from apps.orders.models import Order
from ..permissions import IsAdmin
from ..serializers import (
    AdminOrderSerializer,
    BroadcastSerializer,
    CommentApprovalSerializer,
    CommentSerializer,
    CommentSpamSerializer,
    OrderStatusSerializer,
    ProductDetailSerializer,
    ProductSerializer,
    ProductWriteSerializer,
    SignupSerializer,
    UserSerializer,
    UserStatusSerializer,
)
from .base import paginate, success

logger = logging.getLogger(__name__)


class AdminView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class AdminUserListView(AdminView):

    @extend_schema(
        parameters=[
            OpenApiParameter('search', str, description="Match on name or email"),
            OpenApiParameter('role', str, enum=['user', 'admin']),
            OpenApiParameter('page', int),
            OpenApiParameter('limit', int),
        ],
        responses={200: UserSerializer(many=True)},
        description="All accounts",
    )
    def get(self, request):
        queryset = accounts.list_users(
            role=request.query_params.get('role'),
            search=request.query_params.get('search'),
        )
        rows, pagination = paginate(request, queryset)
        return success(users=UserSerializer(rows, many=True).data, pagination=pagination)


class AdminUserStatusView(AdminView):

    @extend_schema(request=UserStatusSerializer, responses={200: UserSerializer}, description="(De)activate a user")
    def put(self, request, user_id):
        serializer = UserStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        is_active = serializer.validated_data['is_active']

        user = accounts.set_user_active(request.user, user_id, is_active)
        return success(
            "User activated" if is_active else "User deactivated",
            user=UserSerializer(user).data,
        )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

class AdminOrderListView(AdminView):

    @extend_schema(
        parameters=[
            OpenApiParameter('status', str, enum=[choice for choice, _ in Order.STATUS_CHOICES]),
            OpenApiParameter('page', int),
            OpenApiParameter('limit', int),
        ],
        responses={200: AdminOrderSerializer(many=True)},
        description="All orders, newest first",
    )
    def get(self, request):
        queryset = orders.all_orders()
        order_status = request.query_params.get('status')
        if order_status:
            queryset = queryset.filter(status=order_status)
        rows, pagination = paginate(request, queryset)
        return success(orders=AdminOrderSerializer(rows, many=True).data, pagination=pagination)


class AdminOrderStatusView(AdminView):

    @extend_schema(request=OrderStatusSerializer, responses={200: AdminOrderSerializer}, description="Change status")
    def put(self, request, order_id):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = orders.get_order(order_id)
        order = orders.change_status(order, data['status'], actor=request.user, reason=data['reason'])
        return success("Order status updated", order=AdminOrderSerializer(order).data)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

class AdminProductListView(AdminView):

    @extend_schema(responses={200: ProductSerializer(many=True)}, description="Every product, active or not")
    def get(self, request):
        products = list(Product.objects.all())
        return success(count=len(products), products=ProductSerializer(products, many=True).data)

    @extend_schema(request=ProductWriteSerializer, responses={201: ProductSerializer}, description="Create a product")
    def post(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = catalog.create_product(serializer.validated_data)
        return success("Product created", status.HTTP_201_CREATED, product=ProductSerializer(product).data)


class AdminProductDetailView(AdminView):

    @extend_schema(responses={200: ProductDetailSerializer}, description="One product")
    def get(self, request, product_id):
        product = catalog.get_product(product_id)
        return success(product=ProductDetailSerializer(product).data)

    @extend_schema(request=ProductWriteSerializer, responses={200: ProductSerializer}, description="Update a product")
    def put(self, request, product_id):
        product = catalog.get_product(product_id)
        serializer = ProductWriteSerializer(product, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        product = catalog.update_product(product, serializer.validated_data)
        return success("Product updated", product=ProductSerializer(product).data)

    @extend_schema(responses={200: None}, description="Delete a product")
    def delete(self, request, product_id):
        product = catalog.get_product(product_id)
        catalog.delete_product(product)
        return success("Product deleted")


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

class AdminStatsView(AdminView):

    @extend_schema(responses={200: None}, description="Dashboard totals for users, orders and products")
    def get(self, request):
        users = list(User.objects.all())
        all_orders = list(Order.objects.all())
        products = list(Product.objects.all())

        summary = {}
        summary.update(stats.user_stats(users))
        summary.update(stats.order_stats(all_orders, timezone.localdate()))
        summary.update(stats.product_stats(products, settings.LOW_STOCK_THRESHOLD))
        summary["top_products"] = [
            {"id": p.id, "name": p.name, "sold_count": p.sold_count}
            for p in stats.top_products(products)
        ]
        return success(stats=summary)


class AdminAnalyticsView(AdminView):

    @extend_schema(
        parameters=[OpenApiParameter('period', str, enum=list(stats.PERIODS), description="Default: day")],
        responses={200: None},
        description="Order count and revenue per day, week or month",
    )
    def get(self, request):
        period = request.query_params.get('period', 'day')
        if period not in stats.PERIODS:
            raise ValidationException(
                f"period must be one of {', '.join(stats.PERIODS)}", field="period"
            )

        series = stats.revenue_series(Order.objects.only('status', 'total', 'created_at'), period, timezone.localdate())
        return success(period=period, analytics=series)


# ---------------------------------------------------------------------------
# Admin accounts
# ---------------------------------------------------------------------------

class AdminAccountListView(AdminView):

    @extend_schema(responses={200: UserSerializer(many=True)}, description="All admin accounts")
    def get(self, request):
        admins = list(accounts.list_users(role=User.ROLE_ADMIN))
        return success(count=len(admins), admins=UserSerializer(admins, many=True).data)

    @extend_schema(request=SignupSerializer, responses={201: UserSerializer}, description="Create an admin account")
    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        admin = accounts.create_admin(data['name'], data['email'], data['password'])
        logger.info(f"Admin {admin.id} created by {request.user.id}")
        return success("Admin created", status.HTTP_201_CREATED, admin=UserSerializer(admin).data)


class AdminDemoteView(AdminView):

    @extend_schema(request=None, responses={200: UserSerializer}, description="Turn an admin into a regular user")
    def put(self, request, user_id):
        user = accounts.demote_admin(request.user, user_id)
        return success("Admin demoted", user=UserSerializer(user).data)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

class AdminCommentListView(AdminView):

    @extend_schema(responses={200: CommentSerializer(many=True)}, description="Every comment, including hidden ones")
    def get(self, request):
        rows, pagination = paginate(request, comments.all_comments())
        return success(comments=CommentSerializer(rows, many=True).data, pagination=pagination)


class AdminCommentDetailView(AdminView):

    @extend_schema(responses={200: None}, description="Delete a comment and its replies")
    def delete(self, request, comment_id):
        comments.delete_comment(comment_id)
        return success("Comment deleted")


class AdminCommentApproveView(AdminView):

    @extend_schema(request=CommentApprovalSerializer, responses={200: CommentSerializer})
    def put(self, request, comment_id):
        serializer = CommentApprovalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        is_approved = serializer.validated_data['is_approved']

        comment = comments.set_approved(comment_id, is_approved)
        return success(
            "Comment approved" if is_approved else "Comment unapproved",
            comment=CommentSerializer(comment).data,
        )


class AdminCommentSpamView(AdminView):

    @extend_schema(request=CommentSpamSerializer, responses={200: CommentSerializer})
    def put(self, request, comment_id):
        serializer = CommentSpamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        is_spam = serializer.validated_data['is_spam']

        comment = comments.set_spam(comment_id, is_spam)
        return success(
            "Comment flagged as spam" if is_spam else "Comment unflagged",
            comment=CommentSerializer(comment).data,
        )


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

class AdminBroadcastView(AdminView):

    @extend_schema(request=BroadcastSerializer, responses={201: None}, description="Notify many users at once")
    def post(self, request):
        serializer = BroadcastSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        recipients = User.objects.filter(is_active=True)
        if data.get('user_ids'):
            recipients = recipients.filter(pk__in=data['user_ids'])

        sent = broadcast(
            recipients,
            data['type'],
            data['title'],
            data['message'],
            action=data.get('action'),
        )
        logger.info(f"Admin {request.user.id} broadcast '{data['title']}' to {sent} users")
        return success("Notification sent", status.HTTP_201_CREATED, sent=sent)
