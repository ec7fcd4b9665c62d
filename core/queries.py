# core/queries.py
import logging

from django.conf import settings

from core import core_models
from core.api_client import ApiError, order_api, payment_api, review_api, auth_api, unwrap

logger = logging.getLogger(__name__)


def _as_list(payload, key=None):
    items = unwrap(payload, key)
    if items is None:
        return []
    if isinstance(items, dict):
        # Some list endpoints answer {"<key>": [...], "count": n} under another name
        for value in items.values():
            if isinstance(value, list):
                return value
        return []
    return list(items)


def _check_envelope(payload, fallback):
    """Payment service reports failures inside a 200 envelope."""
    if isinstance(payload, dict) and payload.get("status") == "error":
        logger.warning("Payment service error envelope: %s", payload.get("message"))
        raise ApiError(payload.get("message") or fallback, payload=payload)
    return payload


# -------------------------
# Auth
# -------------------------
def _extract_token(payload):
    if not isinstance(payload, dict):
        return None
    for key in ("token", "accessToken", "access_token"):
        if payload.get(key):
            return payload[key]
    data = payload.get("data")
    if isinstance(data, dict):
        return _extract_token(data)
    return None


def login(email, password):
    """Return the bearer token for the given credentials."""
    payload = auth_api().post("/auth/login", json={"email": email, "password": password})
    token = _extract_token(payload)
    if not token:
        logger.warning("Auth service returned no token for %s", email)
        raise ApiError("Login failed: no token returned by the auth service.", payload=payload)
    return token


def register_user(data):
    return auth_api().post("/auth/register/user", json=data)


def register_technician(token, data):
    return auth_api().post("/auth/register/technician", token=token, json=data)


def logout(token):
    return auth_api().post("/auth/logout", token=token)


def get_profile(token) -> core_models.UserProfile:
    payload = auth_api().get("/profile", token=token)
    return core_models.UserProfile.from_dict(unwrap(payload, "user"))


def update_profile(token, data) -> core_models.UserProfile:
    payload = auth_api().put("/profile", token=token, json=data)
    return core_models.UserProfile.from_dict(unwrap(payload, "user"))


# -------------------------
# Orders
# -------------------------
def get_orders(token):
    payload = order_api().get("/orders", token=token)
    return [core_models.Order.from_dict(o) for o in _as_list(payload, "orders")]


def get_order(token, order_id) -> core_models.Order:
    payload = order_api().get(f"/orders/{order_id}", token=token)
    return core_models.Order.from_dict(unwrap(payload, "order"))


def create_order(token, data):
    """
    POST /orders. Returns (status_code, body); callers decide the outcome from the code,
    a plain 201 being the only success the order service reports.
    """
    return order_api().request("POST", "/orders", token=token, json=data)


def update_order(token, order_id, data) -> core_models.Order:
    payload = order_api().put(f"/orders/{order_id}", token=token, json=data)
    return core_models.Order.from_dict(unwrap(payload, "order"))


def cancel_order(token, order_id):
    return order_api().delete(f"/orders/{order_id}", token=token)


# -------------------------
# Coupons
# -------------------------
def get_coupons(token):
    payload = order_api().get("/coupons", token=token)
    return [core_models.Coupon.from_dict(c) for c in _as_list(payload, "coupons")]


def get_valid_coupons(token):
    payload = order_api().get("/coupons/valid", token=token)
    return [core_models.Coupon.from_dict(c) for c in _as_list(payload, "coupons")]


def preview_coupon(token, coupon_id, original_price=None):
    """Return the discounted price of original_price for the given coupon."""
    if original_price is None:
        original_price = settings.ORDER_BASE_PRICE
    payload = order_api().post(
        f"/coupons/{coupon_id}/preview", token=token, json={"original_price": original_price}
    )
    try:
        return float(payload["discounted_price"])
    except (TypeError, KeyError, ValueError) as e:
        raise ApiError("Invalid coupon preview response.", payload=payload) from e


def create_coupon(token, data) -> core_models.Coupon:
    payload = order_api().post("/coupons", token=token, json=data)
    return core_models.Coupon.from_dict(unwrap(payload, "coupon"))


def delete_coupon(token, coupon_id):
    return order_api().delete(f"/coupons/{coupon_id}", token=token)


# -------------------------
# Notifications
# -------------------------
def get_notifications(token):
    payload = order_api().get("/notifications", token=token)
    return [core_models.Notification.from_dict(n) for n in _as_list(payload, "notifications")]


def delete_notification(token, notification_id):
    return order_api().delete(f"/notifications/{notification_id}", token=token)


# -------------------------
# Payment methods
# -------------------------
def _payment_methods(payload, fallback):
    payload = _check_envelope(payload, fallback)
    return [core_models.PaymentMethod.from_dict(p) for p in _as_list(payload)]


def _payment_method(payload, fallback):
    payload = _check_envelope(payload, fallback)
    return core_models.PaymentMethod.from_dict(unwrap(payload))


def get_active_payment_methods(token=None):
    payload = payment_api().get("/payment-methods/active", token=token)
    return _payment_methods(payload, "Failed to fetch payment methods.")


def get_active_payment_method(token, method_id):
    payload = payment_api().get(f"/payment-methods/active/{method_id}", token=token)
    return _payment_method(payload, "Payment method not found.")


def get_admin_payment_methods(token):
    payload = payment_api().get("/payment-methods/admin", token=token)
    return _payment_methods(payload, "Failed to fetch payment methods.")


def get_admin_payment_method(token, method_id):
    payload = payment_api().get(f"/payment-methods/admin/{method_id}", token=token)
    return _payment_method(payload, "Payment method not found.")


def get_payment_method_usage(token):
    """Payment methods with orderCount and ACTIVE/INACTIVE status."""
    payload = payment_api().get("/payment-methods/admin/details-with-counts", token=token)
    return _payment_methods(payload, "Failed to fetch payment method statistics.")


def create_payment_method(token, data):
    payload = payment_api().post("/payment-methods/admin/create", token=token, json=data)
    return _payment_method(payload, "Failed to create payment method.")


def edit_payment_method(token, method_id, data):
    payload = payment_api().put(f"/payment-methods/admin/{method_id}/edit", token=token, json=data)
    return _payment_method(payload, "Failed to update payment method.")


def deactivate_payment_method(token, method_id):
    payload = payment_api().delete(f"/payment-methods/admin/{method_id}/delete", token=token)
    return _check_envelope(payload, "Failed to deactivate payment method.")


def activate_payment_method(token, method_id):
    payload = payment_api().patch(f"/payment-methods/admin/{method_id}/activate", token=token)
    return _check_envelope(payload, "Failed to activate payment method.")


# -------------------------
# Reviews & ratings
# -------------------------
def get_reviews(token):
    payload = review_api().get("/review", token=token)
    return [core_models.Review.from_dict(r) for r in _as_list(payload, "reviews")]


def get_user_reviews(token):
    payload = review_api().get("/review/user", token=token)
    return [core_models.Review.from_dict(r) for r in _as_list(payload, "reviews")]


def get_technician_reviews(token):
    payload = review_api().get("/review/technician", token=token)
    return [core_models.Review.from_dict(r) for r in _as_list(payload, "reviews")]


def get_review(token, review_id) -> core_models.Review:
    payload = review_api().get(f"/review/{review_id}", token=token)
    return core_models.Review.from_dict(unwrap(payload, "review"))


def create_review(token, technician_id, rating, comment):
    body = {"technicianId": technician_id, "rating": rating, "comment": comment}
    return review_api().post("/review", token=token, json=body)


def update_review(token, review_id, rating, comment):
    return review_api().put(f"/review/{review_id}", token=token, json={"comment": comment, "rating": rating})


def delete_review(token, review_id):
    return review_api().delete(f"/review/{review_id}", token=token)


def get_technician_ratings(token=None):
    payload = review_api().get("/technician-ratings", token=token)
    return [core_models.TechnicianRating.from_dict(t) for t in _as_list(payload, "technicians")]


def get_technician_rating(token, technician_id) -> core_models.TechnicianRating:
    payload = review_api().get(f"/technician-ratings/{technician_id}", token=token)
    rating = core_models.TechnicianRating.from_dict(unwrap(payload))
    if not rating.technicianId:
        rating.technicianId = str(technician_id)
    return rating
