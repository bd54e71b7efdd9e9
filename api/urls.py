"""
API URL Configuration
"""
from django.urls import path

from .views import admin, auth, comments, health, notifications, orders, products, user

app_name = 'api'

urlpatterns = [
    # Auth
    path('auth/signup/', auth.SignupView.as_view(), name='signup'),
    path('auth/register/', auth.SignupView.as_view(), name='register'),
    path('auth/login/', auth.LoginView.as_view(), name='login'),
    path('auth/verify/', auth.VerifyTokenView.as_view(), name='verify'),
    path('auth/logout/', auth.LogoutView.as_view(), name='logout'),
    path('auth/create-admin/', auth.CreateAdminView.as_view(), name='create-admin'),

    # Current user
    path('user/me/', user.MeView.as_view(), name='user-me'),
    path('user/profile/', user.ProfileView.as_view(), name='user-profile'),
    path('user/impact/', user.ImpactView.as_view(), name='user-impact'),
    path('user/stats/', user.UserStatsView.as_view(), name='user-stats'),

    # Catalog
    path('products/', products.ProductListView.as_view(), name='product-list'),
    path('products/featured/', products.FeaturedProductsView.as_view(), name='product-featured'),
    path('products/on-sale/', products.OnSaleProductsView.as_view(), name='product-on-sale'),
    path('products/category/<str:category>/', products.CategoryProductsView.as_view(), name='product-category'),
    path('products/search/<str:query>/', products.SearchProductsView.as_view(), name='product-search'),
    path('products/<uuid:product_id>/', products.ProductDetailView.as_view(), name='product-detail'),
    path('products/<uuid:product_id>/reviews/', products.ProductReviewView.as_view(), name='product-reviews'),
    path('products/<uuid:product_id>/comments/', products.ProductCommentsView.as_view(), name='product-comments'),

    # Comments
    path('comments/', comments.CommentCreateView.as_view(), name='comment-create'),

    # Orders
    path('orders/', orders.OrderListView.as_view(), name='order-list'),
    path('orders/invoices/', orders.OrderInvoicesView.as_view(), name='order-invoices'),
    path('orders/<uuid:order_id>/', orders.OrderDetailView.as_view(), name='order-detail'),
    path('orders/<uuid:order_id>/invoice/', orders.OrderInvoiceView.as_view(), name='order-invoice'),
    path('orders/<uuid:order_id>/cancel/', orders.OrderCancelView.as_view(), name='order-cancel'),
    path('orders/<uuid:order_id>/status/', orders.OrderStatusView.as_view(), name='order-status'),

    # Notifications
    path('notifications/', notifications.NotificationListView.as_view(), name='notification-list'),
    path('notifications/unread-count/', notifications.UnreadCountView.as_view(), name='notification-unread-count'),
    path('notifications/read-all/', notifications.MarkAllReadView.as_view(), name='notification-read-all'),
    path('notifications/<uuid:notification_id>/read/', notifications.MarkReadView.as_view(), name='notification-read'),
    path('notifications/<uuid:notification_id>/', notifications.NotificationDetailView.as_view(), name='notification-detail'),

    # Admin
    path('admin/users/', admin.AdminUserListView.as_view(), name='admin-users'),
    path('admin/users/<uuid:user_id>/status/', admin.AdminUserStatusView.as_view(), name='admin-user-status'),
    path('admin/orders/', admin.AdminOrderListView.as_view(), name='admin-orders'),
    path('admin/orders/<uuid:order_id>/status/', admin.AdminOrderStatusView.as_view(), name='admin-order-status'),
    path('admin/products/', admin.AdminProductListView.as_view(), name='admin-products'),
    path('admin/products/<uuid:product_id>/', admin.AdminProductDetailView.as_view(), name='admin-product-detail'),
    path('admin/stats/', admin.AdminStatsView.as_view(), name='admin-stats'),
    path('admin/analytics/', admin.AdminAnalyticsView.as_view(), name='admin-analytics'),
    path('admin/admins/', admin.AdminAccountListView.as_view(), name='admin-admins'),
    path('admin/admins/<uuid:user_id>/demote/', admin.AdminDemoteView.as_view(), name='admin-demote'),
    path('admin/comments/', admin.AdminCommentListView.as_view(), name='admin-comments'),
    path('admin/comments/<uuid:comment_id>/', admin.AdminCommentDetailView.as_view(), name='admin-comment-detail'),
    path('admin/comments/<uuid:comment_id>/approve/', admin.AdminCommentApproveView.as_view(), name='admin-comment-approve'),
    path('admin/comments/<uuid:comment_id>/spam/', admin.AdminCommentSpamView.as_view(), name='admin-comment-spam'),
    path('admin/notifications/broadcast/', admin.AdminBroadcastView.as_view(), name='admin-broadcast'),

    # System
    path('health/', health.HealthCheckView.as_view(), name='health'),
]
