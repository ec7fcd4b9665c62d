# users_ui/user/user_views.py
import logging

from django.conf import settings
from django.contrib import messages
from django.core import signing
from django.shortcuts import redirect
from django.urls import reverse
from django.views.decorators.http import require_POST

from core import queries
from core.api_client import ApiError
from core.helpers import (
    ORDER_STATUS_LABELS,
    ORDER_STATUS_TABS,
    count_orders_by_status,
    filter_orders,
    format_rupiah,
)
from users_ui.base_views import role_view, read_or_error, safe_next, flash_api_error
from .forms import (
    OrderDetailsForm,
    TechnicianChoiceForm,
    PaymentChoiceForm,
    OrderEditForm,
    ReviewForm,
)

logger = logging.getLogger(__name__)

ORDER_DRAFT_FIELD = "draft"
ORDER_DRAFT_SALT = "users_ui.user.order_draft"
WIZARD_INPUTS = (
    "itemName", "itemCondition", "repairDetails", "serviceDate",
    "technicianId", "paymentMethodId", "couponId",
)
WIZARD_STEPS = (1, 2, 3)
RECENT_ORDERS = 5


# -------------------------
# Dashboard
# -------------------------
@role_view("USER", template_name="user/dashboard.html")
def dashboard(request):
    token = request.session_user.token

    orders, orders_error = read_or_error(lambda: queries.get_orders(token), default=[])
    reviews, reviews_error = read_or_error(lambda: queries.get_user_reviews(token), default=[])

    recent = filter_orders(orders, sort="newest")[:RECENT_ORDERS]
    active = [o for o in orders if o.status not in ("COMPLETED", "CANCELLED")]
    counts = count_orders_by_status(orders)

    return {
        "recent_orders": recent,
        "orders_error": orders_error,
        "reviews": reviews,
        "reviews_error": reviews_error,
        "status_counts": [(ORDER_STATUS_LABELS[s], n) for s, n in counts.items()],
        "total_orders": len(orders),
        "active_orders": len(active),
        "completed_orders": counts.get("COMPLETED", 0),
    }


# -------------------------
# Orders
# -------------------------
@role_view("USER", template_name="user/orders.html")
def orders(request):
    token = request.session_user.token
    tab = request.GET.get("tab", "all")
    if tab != "all" and tab not in ORDER_STATUS_TABS:
        tab = "all"
    search = request.GET.get("q", "").strip()
    sort = "oldest" if request.GET.get("sort") == "oldest" else "newest"

    all_orders, error = read_or_error(lambda: queries.get_orders(token), default=[])
    filtered = filter_orders(all_orders, status_tab=tab, search=search, sort=sort)

    tabs = [("all", "All")] + [(key, ORDER_STATUS_LABELS[status]) for key, status in ORDER_STATUS_TABS.items()]
    return {
        "orders": filtered,
        "total_orders": len(all_orders),
        "error": error,
        "tabs": tabs,
        "active_tab": tab,
        "search": search,
        "sort": sort,
    }


@require_POST
@role_view("USER")
def refresh_orders(request):
    messages.success(request, "Orders refreshed")
    return redirect(safe_next(request, reverse("user:orders")))


@require_POST
@role_view("USER")
def cancel_order(request, order_id):
    try:
        queries.cancel_order(request.session_user.token, order_id)
    except ApiError as e:
        flash_api_error(request, e, "Could not cancel the order")
    else:
        messages.success(request, "Your order has been cancelled successfully.")
    return redirect("user:orders")


@role_view("USER", template_name="user/order_detail.html")
def order_detail(request, order_id):
    try:
        order = queries.get_order(request.session_user.token, order_id)
    except ApiError as e:
        if e.is_unauthorized:
            raise
        if e.status_code == 403:
            messages.error(request, "Access denied")
            return redirect("user:orders")
        if e.status_code == 404:
            return {"order": None, "error": "Order not found."}
        return {"order": None, "error": e.message}

    return {"order": order, "error": None}


@role_view("USER", template_name="user/order_edit.html")
def order_edit(request, order_id):
    token = request.session_user.token
    try:
        order = queries.get_order(token, order_id)
    except ApiError as e:
        if e.is_unauthorized:
            raise
        return {"order": None, "form": None, "error": "Failed to load order."}

    if not order.is_editable:
        messages.error(request, "Order cannot be edited at this stage.")
        return redirect("user:order_detail", order_id=order_id)

    if request.method == "POST":
        form = OrderEditForm(request.POST)
        if form.is_valid():
            try:
                queries.update_order(token, order_id, form.payload())
            except ApiError as e:
                flash_api_error(request, e, "Failed to update order")
            else:
                messages.success(request, "Order updated successfully")
                return redirect("user:order_detail", order_id=order_id)
    else:
        form = OrderEditForm(initial={
            "itemName": order.itemName,
            "itemCondition": order.itemCondition,
            "repairDetails": order.repairDetails,
            "serviceDate": order.service_date_input,
            "technicianId": order.technicianId or "",
        })

    return {"order": order, "form": form, "error": None}


# -------------------------
# Order wizard
# -------------------------
def encode_draft(draft):
    return signing.dumps(draft, salt=ORDER_DRAFT_SALT, compress=True)


def decode_draft(value):
    """The draft posted back by the wizard form; missing or tampered drafts start over."""
    if value:
        try:
            draft = signing.loads(value, salt=ORDER_DRAFT_SALT)
        except signing.BadSignature:
            logger.warning("Discarding an order draft with a bad signature")
        else:
            if (isinstance(draft, dict) and draft.get("step") in WIZARD_STEPS
                    and isinstance(draft.get("data"), dict)):
                return draft
    return {"step": 1, "data": {}}


def _coupon_previews(token, coupons):
    """Discounted base price per coupon; the base price when a preview fails."""
    base = settings.ORDER_BASE_PRICE
    previews = []
    for coupon in coupons:
        try:
            price = queries.preview_coupon(token, coupon.id, base)
        except ApiError as e:
            logger.info("Coupon preview failed for %s: %s", coupon.id, e)
            price = base
        previews.append({"coupon": coupon, "price": price, "price_display": format_rupiah(price)})
    return previews


def order_failure_message(status_code, message=None):
    """Flash text for a non-201 answer from POST /orders."""
    if status_code == 403:
        return "Access denied: You don't have permission to create orders. Please check your account status."
    if status_code == 404:
        return ("Invalid selection: One of the selected items (technician, payment method, or coupon) "
                "is no longer available.")
    if status_code == 400:
        return f"Invalid order data: {message or 'Please check your order details and try again.'}"
    if status_code == 500:
        return "Server error: An unexpected error occurred. Please try again later."
    if status_code is None:
        return "Network error: Please check your internet connection and try again."
    return f"Failed to create order: Unexpected error ({status_code}). Please try again later."


def _wizard_choices(token, step):
    """Technicians for step 2; payment methods and coupon previews for step 3."""
    choices = {"technicians": [], "payment_methods": [], "coupon_previews": [], "error": None}
    if step == 2:
        choices["technicians"], choices["error"] = read_or_error(
            lambda: queries.get_technician_ratings(token), default=[])
    elif step == 3:
        choices["payment_methods"], choices["error"] = read_or_error(
            lambda: queries.get_active_payment_methods(token), default=[])
        coupons, coupons_error = read_or_error(lambda: queries.get_valid_coupons(token), default=[])
        if coupons_error:
            logger.info("Valid coupons unavailable: %s", coupons_error)
        choices["coupon_previews"] = _coupon_previews(token, coupons)
    return choices


def _wizard_form(step, data, draft_data, choices):
    if step == 1:
        return OrderDetailsForm(data, initial=draft_data)
    if step == 2:
        return TechnicianChoiceForm(data, initial=draft_data, technicians=choices["technicians"])
    return PaymentChoiceForm(
        data,
        initial=draft_data,
        payment_methods=choices["payment_methods"],
        coupons=[p["coupon"] for p in choices["coupon_previews"]],
    )


def _wizard_page(token, draft, form=None, choices=None):
    step = draft["step"]
    if choices is None:
        choices = _wizard_choices(token, step)
    if form is None:
        form = _wizard_form(step, None, draft["data"], choices)
    return {
        "step": step,
        "steps": WIZARD_STEPS,
        "form": form,
        "draft": draft["data"],
        "draft_token": encode_draft(draft),
        "technicians": choices["technicians"],
        "payment_methods": choices["payment_methods"],
        "coupon_previews": choices["coupon_previews"],
        "base_price": settings.ORDER_BASE_PRICE,
        "base_price_display": format_rupiah(settings.ORDER_BASE_PRICE),
        "chosen_technician": draft["data"].get("technicianName"),
        "error": choices["error"],
    }


@role_view("USER", template_name="user/order_create.html")
def order_create(request):
    """Three-step order wizard; the draft travels in a signed hidden field."""
    token = request.session_user.token
    action = request.POST.get("action") if request.method == "POST" else None
    draft = decode_draft(request.POST.get(ORDER_DRAFT_FIELD)) if action else {"step": 1, "data": {}}
    step = draft["step"]

    if action == "prev":
        # Going back keeps whatever was typed, without validation
        draft["data"].update({k: request.POST[k] for k in WIZARD_INPUTS if k in request.POST})
        draft["step"] = max(1, step - 1)
        return _wizard_page(token, draft)

    choices = _wizard_choices(token, step)
    data = request.POST if action in ("next", "submit") else None
    form = _wizard_form(step, data, draft["data"], choices)

    if action == "next" and step < 3 and form.is_valid():
        draft["data"].update(form.cleaned_data)
        if step == 2:
            draft["data"]["technicianName"] = next(
                (t.fullName for t in choices["technicians"]
                 if t.technicianId == form.cleaned_data["technicianId"]), ""
            )
        draft["step"] = step + 1
        return _wizard_page(token, draft)

    if action == "submit" and step == 3:
        if not form.is_valid():
            messages.error(request, "Please fill in all required fields")
        else:
            draft["data"].update(form.cleaned_data)
            payload = {
                "itemName": draft["data"].get("itemName"),
                "itemCondition": draft["data"].get("itemCondition"),
                "repairDetails": draft["data"].get("repairDetails"),
                "serviceDate": draft["data"].get("serviceDate"),
                "technicianId": draft["data"].get("technicianId"),
                "paymentMethodId": draft["data"].get("paymentMethodId"),
                "couponId": draft["data"].get("couponId") or None,
            }
            try:
                status_code, body = queries.create_order(token, payload)
            except ApiError as e:
                if e.is_unauthorized:
                    raise
                logger.warning("Order creation failed (%s): %s", e.status_code, e)
                messages.error(request, order_failure_message(e.status_code, e.message))
            else:
                if status_code == 201:
                    detail = (body or {}).get("message") if isinstance(body, dict) else None
                    messages.success(
                        request,
                        f"Order created successfully! {detail or 'Your repair order has been submitted and is being processed.'}",
                    )
                    return redirect("user:orders")
                messages.error(request, order_failure_message(status_code))

    return _wizard_page(token, draft, form, choices)


# -------------------------
# Reviews
# -------------------------
@role_view("USER", template_name="user/reviews.html")
def reviews(request):
    items, error = read_or_error(lambda: queries.get_reviews(request.session_user.token), default=[])
    return {"reviews": items, "error": error}


@role_view("USER", template_name="user/review_form.html")
def review_create(request):
    token = request.session_user.token
    technicians, error = read_or_error(lambda: queries.get_technician_ratings(token), default=[])
    if error:
        messages.error(request, "Failed to load technicians!")

    form = ReviewForm(request.POST or None, technicians=technicians,
                      initial={"technicianId": request.GET.get("technician", "")})
    if request.method == "POST" and form.is_valid():
        try:
            queries.create_review(
                token,
                form.cleaned_data["technicianId"],
                form.cleaned_data["rating"],
                form.cleaned_data["comment"],
            )
        except ApiError as e:
            flash_api_error(request, e, "Failed to send review")
        else:
            messages.success(request, "Review sent!")
            return redirect("user:reviews")

    return {"form": form, "is_edit": False, "review": None, "error": None}


@role_view("USER", template_name="user/review_form.html")
def review_edit(request, review_id):
    token = request.session_user.token
    try:
        review = queries.get_review(token, review_id)
    except ApiError as e:
        if e.is_unauthorized:
            raise
        return {"form": None, "is_edit": True, "review": None, "error": "Failed to load review!"}

    if request.method == "POST":
        form = ReviewForm(request.POST)
        if form.is_valid():
            try:
                queries.update_review(token, review_id, form.cleaned_data["rating"], form.cleaned_data["comment"])
            except ApiError as e:
                flash_api_error(request, e, "Failed to update review")
            else:
                messages.success(request, "Review updated!")
                return redirect("user:reviews")
    else:
        form = ReviewForm(initial={"rating": review.rating, "comment": review.comment})

    return {"form": form, "is_edit": True, "review": review, "error": None}


@require_POST
@role_view("USER")
def review_delete(request, review_id):
    try:
        queries.delete_review(request.session_user.token, review_id)
    except ApiError as e:
        flash_api_error(request, e, "Failed to delete review")
    else:
        messages.success(request, "Review deleted.")
    return redirect(safe_next(request, reverse("user:reviews")))


# -------------------------
# Notifications
# -------------------------
@role_view("USER", template_name="user/notifications.html")
def notifications(request):
    items, error = read_or_error(lambda: queries.get_notifications(request.session_user.token), default=[])
    if error:
        error = "Failed to load notifications. Please try again later."
    return {"notifications": items, "error": error}


@require_POST
@role_view("USER")
def refresh_notifications(request):
    messages.success(request, "Your notifications have been updated.")
    return redirect("user:notifications")


@require_POST
@role_view("USER")
def notification_delete(request, notification_id):
    try:
        queries.delete_notification(request.session_user.token, notification_id)
    except ApiError as e:
        flash_api_error(request, e, "Failed to delete notification")
    else:
        messages.success(request, "Notification deleted.")
    return redirect("user:notifications")


# -------------------------
# Payment methods (read-only)
# -------------------------
@role_view("USER", template_name="user/payment_methods.html")
def payment_methods(request):
    items, error = read_or_error(
        lambda: queries.get_active_payment_methods(request.session_user.token), default=[]
    )
    return {"payment_methods": items, "error": error}


@role_view("USER", template_name="user/payment_method_detail.html")
def payment_method_detail(request, method_id):
    method, error = read_or_error(
        lambda: queries.get_active_payment_method(request.session_user.token, method_id)
    )
    return {"method": method, "error": error}
