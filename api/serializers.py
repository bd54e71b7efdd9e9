"""
API Serializers for Request/Response handling
"""
from rest_framework import serializers

from apps.accounts.loyalty import achievements_for, next_tier_progress
from apps.accounts.models import User
from apps.accounts.validators import is_valid_phone, password_policy_errors
from apps.catalog.models import Product, Review
from apps.comments.models import Comment
from apps.notifications.models import Notification
from apps.orders.models import Order, OrderItem


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

class AddressSerializer(serializers.Serializer):
    street = serializers.CharField(required=False, allow_blank=True, max_length=255)
    city = serializers.CharField(required=False, allow_blank=True, max_length=100)
    postal_code = serializers.CharField(required=False, allow_blank=True, max_length=20)
    country = serializers.CharField(required=False, allow_blank=True, max_length=100)


class UserSerializer(serializers.ModelSerializer):
    """
    Public view of an account. Credentials and lockout state never leave
    the server.
    """

    class Meta:
        model = User
        fields = [
            'id', 'name', 'email', 'phone', 'address', 'role', 'is_active',
            'total_co2_saved', 'total_water_saved', 'total_oranges_recycled',
            'loyalty_points', 'tier', 'member_since', 'preferences',
            'last_login', 'created_at',
        ]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'name', 'email']
        read_only_fields = fields


class SignupSerializer(serializers.Serializer):
    """
    Request serializer for signup and admin creation.
    """
    name = serializers.CharField(min_length=2, max_length=50)
    email = serializers.EmailField(max_length=254)
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_name(self, value):
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError("Name must be between 2 and 50 characters")
        return value

    def validate_password(self, value):
        errors = password_policy_errors(value)
        if errors:
            raise serializers.ValidationError(errors)
        return value


class CreateAdminSerializer(SignupSerializer):
    admin_secret = serializers.CharField(write_only=True, trim_whitespace=False)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class AuthResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    token = serializers.CharField()
    user = UserSerializer()


class ProfileUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, min_length=2, max_length=50)
    phone = serializers.CharField(required=False, max_length=20)
    address = AddressSerializer(required=False)

    def validate_phone(self, value):
        if not is_valid_phone(value):
            raise serializers.ValidationError("Invalid phone number")
        return value


class ImpactUpdateSerializer(serializers.Serializer):
    co2_saved = serializers.FloatField(min_value=0, default=0)
    water_saved = serializers.FloatField(min_value=0, default=0)
    oranges_recycled = serializers.IntegerField(min_value=0, default=0)


class ImpactSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'name', 'total_co2_saved', 'total_water_saved', 'total_oranges_recycled',
            'loyalty_points', 'tier',
        ]
        read_only_fields = fields


class UserStatsSerializer(ImpactSerializer):
    """Impact counters plus unlocked achievements and tier progress."""
    achievements = serializers.SerializerMethodField()
    next_tier = serializers.SerializerMethodField()
    progress_to_next_tier = serializers.SerializerMethodField()

    class Meta(ImpactSerializer.Meta):
        fields = ImpactSerializer.Meta.fields + [
            'member_since', 'achievements', 'next_tier', 'progress_to_next_tier',
        ]
        read_only_fields = fields

    def get_achievements(self, obj):
        return achievements_for(obj)

    def get_next_tier(self, obj):
        return next_tier_progress(obj.loyalty_points)[0]

    def get_progress_to_next_tier(self, obj):
        return next_tier_progress(obj.loyalty_points)[1]


class UserStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class ReviewSerializer(serializers.ModelSerializer):
    user = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = ['id', 'user', 'rating', 'comment', 'created_at']
        read_only_fields = fields

    def get_user(self, obj):
        if obj.user is None:
            return None
        return {"id": obj.user.id, "name": obj.user.name}


class ReviewCreateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, default='', max_length=1000)


class ProductSerializer(serializers.ModelSerializer):
    sale_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    in_stock = serializers.BooleanField(read_only=True)
    low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'description', 'price', 'original_price', 'sale_price',
            'category', 'subcategory', 'image', 'images', 'stock', 'in_stock',
            'low_stock', 'sku', 'weight', 'dimensions', 'is_active', 'is_featured',
            'is_on_sale', 'sale_percentage', 'tags', 'co2_saved', 'water_saved',
            'plastic_saved', 'ingredients', 'instructions', 'warnings',
            'certifications', 'average_rating', 'review_count', 'sold_count',
            'view_count', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class ProductDetailSerializer(ProductSerializer):
    reviews = ReviewSerializer(many=True, read_only=True)

    class Meta(ProductSerializer.Meta):
        fields = ProductSerializer.Meta.fields + ['reviews']
        read_only_fields = fields


class ProductWriteSerializer(serializers.ModelSerializer):
    """
    Admin create/update payload. Rating and sales counters are derived and
    cannot be written.
    """

    class Meta:
        model = Product
        fields = [
            'name', 'description', 'price', 'original_price', 'category',
            'subcategory', 'image', 'images', 'stock', 'sku', 'weight',
            'dimensions', 'is_active', 'is_featured', 'is_on_sale',
            'sale_percentage', 'tags', 'co2_saved', 'water_saved',
            'plastic_saved', 'ingredients', 'instructions', 'warnings',
            'certifications',
        ]
        extra_kwargs = {
            # Uniqueness is enforced by the service so generated SKUs work
            'sku': {'validators': [], 'required': False},
        }

    def validate(self, attrs):
        on_sale = attrs.get('is_on_sale', getattr(self.instance, 'is_on_sale', False))
        percentage = attrs.get('sale_percentage', getattr(self.instance, 'sale_percentage', None))
        if on_sale and not percentage:
            raise serializers.ValidationError({'sale_percentage': "Required when the product is on sale"})
        return attrs


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

class OrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True, allow_null=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ['product_id', 'name', 'price', 'quantity', 'image', 'line_total']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'items', 'total', 'status', 'payment_method',
            'payment_status', 'shipping_address', 'billing_address', 'notes',
            'delivery_instructions', 'tracking_number', 'estimated_delivery',
            'delivered_at', 'cancelled_at', 'cancellation_reason',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class AdminOrderSerializer(OrderSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ['user']
        read_only_fields = fields


class InvoiceSerializer(serializers.ModelSerializer):
    """Data needed to render one invoice client-side."""
    items = OrderItemSerializer(many=True, read_only=True)
    user = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'total', 'status', 'items', 'payment_method',
            'payment_status', 'shipping_address', 'billing_address', 'created_at', 'user',
        ]
        read_only_fields = fields

    def get_user(self, obj):
        return {"name": obj.user.name, "email": obj.user.email}


class OrderItemInputSerializer(serializers.Serializer):
    """
    One requested line. Any name or price sent along is ignored; both come
    from the catalog.
    """
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, max_value=1000)


class OrderCreateSerializer(serializers.Serializer):
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    payment_method = serializers.ChoiceField(choices=Order.PAYMENT_METHOD_CHOICES)
    shipping_address = AddressSerializer(required=False)
    billing_address = AddressSerializer(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='', max_length=500)
    delivery_instructions = serializers.CharField(required=False, allow_blank=True, default='', max_length=500)
    total = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False,
        help_text="Client-side total; informational only, the server recomputes it",
    )


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
    reason = serializers.CharField(required=False, allow_blank=True, default='', max_length=500)


class OrderCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='', max_length=500)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ['id', 'type', 'title', 'message', 'read', 'action', 'data', 'created_at']
        read_only_fields = fields


class NotificationActionSerializer(serializers.Serializer):
    label = serializers.CharField(max_length=50)
    url = serializers.CharField(max_length=255)


class BroadcastSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Notification.TYPE_CHOICES, default='news')
    title = serializers.CharField(max_length=100)
    message = serializers.CharField(max_length=500)
    action = NotificationActionSerializer(required=False)
    user_ids = serializers.ListField(
        child=serializers.UUIDField(), required=False,
        help_text="Restrict the broadcast to these users (default: every active user)",
    )


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

class CommentSerializer(serializers.ModelSerializer):
    user = serializers.SerializerMethodField()
    product_id = serializers.UUIDField(read_only=True, allow_null=True)
    parent_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Comment
        fields = [
            'id', 'user', 'product_id', 'parent_id', 'content', 'rating', 'type',
            'is_approved', 'is_spam', 'created_at',
        ]
        read_only_fields = fields

    def get_user(self, obj):
        return {"id": obj.user.id, "name": obj.user.name}


class CommentThreadSerializer(CommentSerializer):
    """Top-level comment with its (already filtered) replies."""
    replies = CommentSerializer(many=True, read_only=True)

    class Meta(CommentSerializer.Meta):
        fields = CommentSerializer.Meta.fields + ['replies']
        read_only_fields = fields


class CommentCreateSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=1000)
    rating = serializers.IntegerField(min_value=1, max_value=5, default=5)
    type = serializers.ChoiceField(choices=Comment.TYPE_CHOICES, default='product_review')
    product_id = serializers.UUIDField(required=False, allow_null=True)
    parent_id = serializers.UUIDField(required=False, allow_null=True)


class CommentApprovalSerializer(serializers.Serializer):
    is_approved = serializers.BooleanField()


class CommentSpamSerializer(serializers.Serializer):
    is_spam = serializers.BooleanField()


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------

class HealthCheckSerializer(serializers.Serializer):
    """
    Response serializer for health check.
    """
    status = serializers.CharField()
    version = serializers.CharField()
    database = serializers.CharField()
    timestamp = serializers.DateTimeField()
