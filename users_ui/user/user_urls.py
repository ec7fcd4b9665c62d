# users_ui/user/user_urls.py
from django.urls import path

from . import user_views

app_name = "user"

urlpatterns = [
    path("", user_views.dashboard, name="dashboard"),

    # Orders
    path("orders/", user_views.orders, name="orders"),
    path("orders/refresh/", user_views.refresh_orders, name="refresh_orders"),
    path("orders/new/", user_views.order_create, name="order_create"),
    path("orders/<str:order_id>/", user_views.order_detail, name="order_detail"),
    path("orders/<str:order_id>/edit/", user_views.order_edit, name="order_edit"),
    path("orders/<str:order_id>/cancel/", user_views.cancel_order, name="cancel_order"),

    # Reviews
    path("reviews/", user_views.reviews, name="reviews"),
    path("reviews/new/", user_views.review_create, name="review_create"),
    path("reviews/<str:review_id>/edit/", user_views.review_edit, name="review_edit"),
    path("reviews/<str:review_id>/delete/", user_views.review_delete, name="review_delete"),

    # Notifications
    path("notifications/", user_views.notifications, name="notifications"),
    path("notifications/refresh/", user_views.refresh_notifications, name="refresh_notifications"),
    path("notifications/<str:notification_id>/delete/", user_views.notification_delete, name="notification_delete"),

    # Payment methods
    path("payment-methods/", user_views.payment_methods, name="payment_methods"),
    path("payment-methods/<str:method_id>/", user_views.payment_method_detail, name="payment_method_detail"),
]
