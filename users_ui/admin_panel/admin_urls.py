# users_ui/admin_panel/admin_urls.py
from django.urls import path

from . import admin_views

app_name = "admin_panel"

urlpatterns = [
    path("", admin_views.dashboard, name="dashboard"),

    # Coupons
    path("coupons/", admin_views.coupons, name="coupons"),
    path("coupons/new/", admin_views.coupon_create, name="coupon_create"),
    path("coupons/<str:coupon_id>/delete/", admin_views.coupon_delete, name="coupon_delete"),

    # Technicians
    path("technicians/", admin_views.technicians, name="technicians"),
    path("technicians/new/", admin_views.technician_create, name="technician_create"),

    # Payment methods
    path("payment-methods/", admin_views.payment_methods, name="payment_methods"),
    path("payment-methods/new/", admin_views.payment_method_create, name="payment_method_create"),
    path("payment-methods/usage/", admin_views.payment_usage, name="payment_usage"),
    path("payment-methods/<str:method_id>/", admin_views.payment_method_detail, name="payment_method_detail"),
    path("payment-methods/<str:method_id>/edit/", admin_views.payment_method_edit, name="payment_method_edit"),
    path("payment-methods/<str:method_id>/toggle/", admin_views.payment_method_toggle, name="payment_method_toggle"),
    path("payment-methods/<str:method_id>/deactivate/", admin_views.payment_method_deactivate,
         name="payment_method_deactivate"),
    path("payment-methods/<str:method_id>/activate/", admin_views.payment_method_activate,
         name="payment_method_activate"),
]
