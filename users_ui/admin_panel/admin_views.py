# users_ui/admin_panel/admin_views.py
import logging

from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse
from django.views.decorators.http import require_POST

from core import queries
from core.api_client import ApiError
from core.helpers import (
    PAYMENT_TYPE_LABELS,
    PAYMENT_TYPE_TABS,
    TECHNICIAN_TABS,
    filter_payment_methods,
    filter_technicians,
    summarize_payment_usage,
    usage_chart_html,
)
from users_ui.base_views import role_view, read_or_error, safe_next, flash_api_error
from .forms import CouponForm, TechnicianForm, PaymentMethodForm

logger = logging.getLogger(__name__)


# -------------------------
# Dashboard
# -------------------------
@role_view("ADMIN", template_name="admin_panel/dashboard.html")
def dashboard(request):
    token = request.session_user.token

    coupons, coupons_error = read_or_error(lambda: queries.get_coupons(token), default=[])
    technicians, technicians_error = read_or_error(lambda: queries.get_technician_ratings(token), default=[])
    usage, usage_error = read_or_error(lambda: queries.get_payment_method_usage(token), default=[])

    return {
        "coupons": coupons,
        "coupons_error": coupons_error,
        "technician_count": len(technicians),
        "technicians_error": technicians_error,
        "usage": summarize_payment_usage(usage),
        "usage_error": usage_error,
        "active_methods": sum(1 for m in usage if m.is_active),
    }


# -------------------------
# Coupons
# -------------------------
@role_view("ADMIN", template_name="admin_panel/coupons.html")
def coupons(request):
    items, error = read_or_error(lambda: queries.get_coupons(request.session_user.token), default=[])
    return {"coupons": items, "error": error}


@role_view("ADMIN", template_name="admin_panel/coupon_form.html")
def coupon_create(request):
    form = CouponForm(request.POST or None)
    if request.method == "POST":
        if not form.is_valid():
            messages.error(request, "Please fix the errors in the form before submitting.")
        else:
            try:
                queries.create_coupon(request.session_user.token, form.payload())
            except ApiError as e:
                flash_api_error(request, e, "Failed to create coupon")
            else:
                messages.success(request, "Coupon created successfully")
                return redirect("admin_panel:coupons")
    return {"form": form}


@require_POST
@role_view("ADMIN")
def coupon_delete(request, coupon_id):
    try:
        queries.delete_coupon(request.session_user.token, coupon_id)
    except ApiError as e:
        flash_api_error(request, e, "Failed to delete coupon")
    else:
        messages.success(request, "Coupon deleted")
    return redirect(safe_next(request, reverse("admin_panel:coupons")))


# -------------------------
# Technicians
# -------------------------
@role_view("ADMIN", template_name="admin_panel/technicians.html")
def technicians(request):
    tab = request.GET.get("tab", "all")
    if tab not in TECHNICIAN_TABS:
        tab = "all"
    search = request.GET.get("q", "").strip()

    items, error = read_or_error(lambda: queries.get_technician_ratings(request.session_user.token), default=[])
    return {
        "technicians": filter_technicians(items, tab=tab, search=search),
        "total_technicians": len(items),
        "error": error,
        "tabs": [("all", "All"), ("experienced", "Experienced"), ("top-rated", "Top Rated"), ("new", "New")],
        "active_tab": tab,
        "search": search,
    }


@role_view("ADMIN", template_name="admin_panel/technician_form.html")
def technician_create(request):
    form = TechnicianForm(request.POST or None)
    if request.method == "POST":
        if not form.is_valid():
            messages.error(request, "Validation Error: Please fix the errors in the form before submitting.")
        else:
            try:
                queries.register_technician(request.session_user.token, form.payload())
            except ApiError as e:
                flash_api_error(request, e, "Creation Failed")
            else:
                messages.success(request, f"Successfully created account for {form.cleaned_data['fullName']}")
                return redirect("admin_panel:technicians")
    return {"form": form}


# -------------------------
# Payment methods
# -------------------------
PAYMENT_TABS = [("all", "Semua"), ("active", "Aktif"), ("inactive", "Nonaktif")] + [
    (key, PAYMENT_TYPE_LABELS[value]) for key, value in PAYMENT_TYPE_TABS.items()
]


@role_view("ADMIN", template_name="admin_panel/payment_methods.html")
def payment_methods(request):
    tab = request.GET.get("tab", "all")
    if tab not in dict(PAYMENT_TABS):
        tab = "all"
    search = request.GET.get("q", "").strip()

    items, error = read_or_error(lambda: queries.get_payment_method_usage(request.session_user.token), default=[])
    return {
        "payment_methods": filter_payment_methods(items, tab=tab, search=search),
        "total_methods": len(items),
        "error": error,
        "tabs": PAYMENT_TABS,
        "active_tab": tab,
        "search": search,
    }


@require_POST
@role_view("ADMIN")
def payment_method_toggle(request, method_id):
    """ACTIVE methods get deactivated, anything else gets activated."""
    token = request.session_user.token
    currently_active = request.POST.get("status", "").upper() == "ACTIVE"
    try:
        if currently_active:
            queries.deactivate_payment_method(token, method_id)
        else:
            queries.activate_payment_method(token, method_id)
    except ApiError as e:
        flash_api_error(request, e, "Gagal mengubah status metode pembayaran")
    else:
        messages.success(
            request,
            "Metode pembayaran dinonaktifkan" if currently_active else "Metode pembayaran diaktifkan",
        )
    return redirect(safe_next(request, reverse("admin_panel:payment_methods")))


@require_POST
@role_view("ADMIN")
def payment_method_deactivate(request, method_id):
    try:
        queries.deactivate_payment_method(request.session_user.token, method_id)
    except ApiError as e:
        flash_api_error(request, e, "Gagal menonaktifkan metode pembayaran")
    else:
        messages.success(request, "Metode pembayaran dinonaktifkan")
    return redirect("admin_panel:payment_method_detail", method_id=method_id)


@require_POST
@role_view("ADMIN")
def payment_method_activate(request, method_id):
    try:
        queries.activate_payment_method(request.session_user.token, method_id)
    except ApiError as e:
        flash_api_error(request, e, "Gagal mengaktifkan metode pembayaran")
    else:
        messages.success(request, "Metode pembayaran diaktifkan kembali")
    return redirect("admin_panel:payment_method_detail", method_id=method_id)


@role_view("ADMIN", template_name="admin_panel/payment_method_detail.html")
def payment_method_detail(request, method_id):
    method, error = read_or_error(
        lambda: queries.get_admin_payment_method(request.session_user.token, method_id)
    )
    return {"method": method, "error": error}


@role_view("ADMIN", template_name="admin_panel/payment_method_form.html")
def payment_method_create(request):
    form = PaymentMethodForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        try:
            queries.create_payment_method(request.session_user.token, form.payload())
        except ApiError as e:
            flash_api_error(request, e, "Gagal menyimpan metode pembayaran")
        else:
            messages.success(request, "Metode pembayaran berhasil dibuat")
            return redirect("admin_panel:payment_methods")
    return {"form": form, "is_edit": False, "method": None, "error": None}


@role_view("ADMIN", template_name="admin_panel/payment_method_form.html")
def payment_method_edit(request, method_id):
    token = request.session_user.token
    try:
        method = queries.get_admin_payment_method(token, method_id)
    except ApiError as e:
        if e.is_unauthorized:
            raise
        return {"form": None, "is_edit": True, "method": None,
                "error": f"Gagal mengambil data metode pembayaran: {e.message}"}

    form = PaymentMethodForm(request.POST or None, initial=method.form_initial())
    if request.method == "POST" and form.is_valid():
        try:
            queries.edit_payment_method(token, method_id, form.payload())
        except ApiError as e:
            flash_api_error(request, e, "Gagal menyimpan metode pembayaran")
        else:
            messages.success(request, "Metode pembayaran berhasil diperbarui")
            return redirect("admin_panel:payment_methods")
    return {"form": form, "is_edit": True, "method": method, "error": None}


@role_view("ADMIN", template_name="admin_panel/payment_usage.html")
def payment_usage(request):
    items, error = read_or_error(lambda: queries.get_payment_method_usage(request.session_user.token), default=[])
    summary = summarize_payment_usage(items)
    try:
        chart_html = usage_chart_html(summary)
    except ValueError as e:
        logger.warning("Usage chart failed: %s", e)
        chart_html = None
    return {
        "summary": summary,
        "methods": sorted(items, key=lambda m: -(m.orderCount or 0)),
        "chart_html": chart_html,
        "error": error,
    }
