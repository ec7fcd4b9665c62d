"""Customer pages: orders, the order wizard, reviews, notifications, payment methods."""

from unittest.mock import patch

import pytest

from conftest import flashed
from core.api_client import ApiError
from core.core_models import Order, Coupon, PaymentMethod, Review, TechnicianRating, Notification
from users_ui.user.user_views import decode_draft, encode_draft, order_failure_message


def _order(id="o-1", status="PENDING", **extra):
    data = {
        "id": id, "itemName": f"Item {id}", "itemCondition": "Retak", "repairDetails": "Ganti layar",
        "serviceDate": "2025-07-01T00:00:00Z", "status": status, "createdAt": "2025-06-01T08:00:00Z",
    }
    data.update(extra)
    return Order.from_dict(data)


TECHNICIANS = [
    TechnicianRating.from_dict({"technicianId": "t1", "fullName": "Andi", "averageRating": 4.7, "totalReviews": 3}),
    TechnicianRating.from_dict({"technicianId": "t2", "fullName": "Budi", "averageRating": 4.1}),
]
METHODS = [PaymentMethod.from_dict({"id": "pm-1", "name": "BCA Transfer", "paymentMethod": "BANK_TRANSFER"})]


class TestDashboard:
    @patch("core.queries.get_user_reviews", return_value=[])
    @patch("core.queries.get_orders")
    def test_counts(self, mock_orders, mock_reviews, as_user):
        mock_orders.return_value = [_order("o-1"), _order("o-2", "COMPLETED"), _order("o-3", "CANCELLED")]

        response = as_user.get("/dashboard/user/")

        assert response.status_code == 200
        assert response.context["total_orders"] == 3
        assert response.context["active_orders"] == 1
        assert response.context["completed_orders"] == 1
        assert "No reviews yet" in response.content.decode()

    @patch("core.queries.get_user_reviews", return_value=[])
    @patch("core.queries.get_orders")
    def test_order_error_is_inline(self, mock_orders, mock_reviews, as_user):
        mock_orders.side_effect = ApiError("Order service unavailable", status_code=503)

        response = as_user.get("/dashboard/user/")

        assert response.status_code == 200
        content = response.content.decode()
        assert "Order service unavailable" in content
        assert "Try Again" in content


class TestOrders:
    @patch("core.queries.get_orders")
    def test_tab_and_search(self, mock_orders, as_user):
        mock_orders.return_value = [
            _order("o-1", itemName="Laptop"),
            _order("o-2", "COMPLETED", itemName="Laptop Gaming"),
            _order("o-3", "COMPLETED", itemName="Kulkas"),
        ]

        response = as_user.get("/dashboard/user/orders/", {"tab": "completed", "q": "laptop"})

        assert [o.id for o in response.context["orders"]] == ["o-2"]
        assert response.context["active_tab"] == "completed"

    @patch("core.queries.get_orders", return_value=[])
    def test_unknown_tab_falls_back(self, mock_orders, as_user):
        response = as_user.get("/dashboard/user/orders/", {"tab": "bogus"})
        assert response.context["active_tab"] == "all"

    @patch("core.queries.get_orders", return_value=[])
    def test_empty_state(self, mock_orders, as_user):
        response = as_user.get("/dashboard/user/orders/")
        assert "No orders yet" in response.content.decode()

    @patch("core.queries.get_orders")
    def test_error_card(self, mock_orders, as_user):
        mock_orders.side_effect = ApiError("HTTP error! status: 500", status_code=500)

        response = as_user.get("/dashboard/user/orders/")

        content = response.content.decode()
        assert "HTTP error! status: 500" in content
        assert "Try Again" in content

    def test_refresh_redirects_back(self, as_user):
        response = as_user.post("/dashboard/user/orders/refresh/", {"next": "/dashboard/user/orders/?tab=pending"})

        assert response.status_code == 302
        assert response.url == "/dashboard/user/orders/?tab=pending"
        assert "Orders refreshed" in flashed(response)

    @patch("core.queries.cancel_order")
    def test_cancel(self, mock_cancel, as_user):
        response = as_user.post("/dashboard/user/orders/o-1/cancel/")

        mock_cancel.assert_called_once_with("test-token", "o-1")
        assert response.url == "/dashboard/user/orders/"
        assert "Your order has been cancelled successfully." in flashed(response)

    @patch("core.queries.cancel_order")
    def test_cancel_failure(self, mock_cancel, as_user):
        mock_cancel.side_effect = ApiError("Order already approved", status_code=400)

        response = as_user.post("/dashboard/user/orders/o-1/cancel/")

        assert "Could not cancel the order: Order already approved" in flashed(response)


class TestOrderDetail:
    @patch("core.queries.get_order")
    def test_renders(self, mock_get, as_user):
        mock_get.return_value = _order("o-9", estimatedPrice=150000)

        response = as_user.get("/dashboard/user/orders/o-9/")

        content = response.content.decode()
        assert "Item o-9" in content
        assert "Rp150.000" in content
        assert "Edit Order" in content

    @patch("core.queries.get_order")
    def test_not_found(self, mock_get, as_user):
        mock_get.side_effect = ApiError("missing", status_code=404)

        response = as_user.get("/dashboard/user/orders/o-404/")

        assert response.status_code == 200
        assert "Order not found." in response.content.decode()

    @patch("core.queries.get_order")
    def test_forbidden_redirects(self, mock_get, as_user):
        mock_get.side_effect = ApiError("forbidden", status_code=403)

        response = as_user.get("/dashboard/user/orders/o-1/")

        assert response.url == "/dashboard/user/orders/"
        assert "Access denied" in flashed(response)


class TestOrderEdit:
    @patch("core.queries.get_order")
    def test_locked_status_redirects(self, mock_get, as_user):
        mock_get.return_value = _order("o-1", "IN_PROGRESS")

        response = as_user.get("/dashboard/user/orders/o-1/edit/")

        assert response.url == "/dashboard/user/orders/o-1/"
        assert "Order cannot be edited at this stage." in flashed(response)

    @patch("core.queries.update_order")
    @patch("core.queries.get_order")
    def test_update(self, mock_get, mock_update, as_user):
        mock_get.return_value = _order("o-1", technicianId="t1")

        response = as_user.post("/dashboard/user/orders/o-1/edit/", {
            "itemName": "TV", "itemCondition": "Mati", "repairDetails": "Cek power",
            "serviceDate": "2025-08-01", "technicianId": "t1",
        })

        assert response.url == "/dashboard/user/orders/o-1/"
        token, order_id, payload = mock_update.call_args.args
        assert (token, order_id) == ("test-token", "o-1")
        assert payload["serviceDate"] == "2025-08-01T00:00:00.000Z"
        assert payload["technicianId"] == "t1"

    @patch("core.queries.get_order")
    def test_prefilled_form(self, mock_get, as_user):
        mock_get.return_value = _order("o-1")

        response = as_user.get("/dashboard/user/orders/o-1/edit/")

        assert response.context["form"].initial["serviceDate"] == "2025-07-01"


WIZARD_URL = "/dashboard/user/orders/new/"


def _draft(step, **data):
    return encode_draft({"step": step, "data": data})


def _posted_draft(response):
    return decode_draft(response.context["draft_token"])


STEP_ONE = {
    "itemName": "iPhone 12",
    "itemCondition": "Layar retak",
    "repairDetails": "Ganti LCD",
    "serviceDate": "2025-07-10",
}


class TestOrderWizard:
    @patch("core.queries.get_technician_ratings", return_value=TECHNICIANS)
    def test_step_one_moves_to_step_two(self, mock_techs, as_user):
        response = as_user.post(WIZARD_URL, {"action": "next", **STEP_ONE})

        assert response.status_code == 200
        assert response.context["step"] == 2
        draft = _posted_draft(response)
        assert draft["step"] == 2
        assert draft["data"]["itemName"] == "iPhone 12"
        assert 'name="draft"' in response.content.decode()

    def test_step_one_validation(self, as_user):
        response = as_user.post(WIZARD_URL, {"action": "next", "itemName": ""})

        assert response.status_code == 200
        assert response.context["step"] == 1
        assert "Item name is required" in response.content.decode()

    @patch("core.queries.get_technician_ratings", return_value=TECHNICIANS)
    def test_long_details_stay_out_of_session_cookie(self, mock_techs, as_user, settings):
        """Test a maximal step one keeps every cookie under the browser limit"""
        long_text = {
            "itemName": "ü" * 255,
            "itemCondition": "Layar retak 📱" * 72,
            "repairDetails": "Ganti LCD, baterai kembung, tombol power macet. " * 40,
            "serviceDate": "2025-07-10",
        }
        long_text["itemCondition"] = long_text["itemCondition"][:1000]
        long_text["repairDetails"] = long_text["repairDetails"][:2000]

        response = as_user.post(WIZARD_URL, {"action": "next", **long_text})

        assert response.context["step"] == 2
        assert settings.SESSION_COOKIE_NAME not in response.cookies
        assert all(len(cookie.OutputString()) < 4096 for cookie in response.cookies.values())
        assert _posted_draft(response)["data"]["repairDetails"] == long_text["repairDetails"].strip()
        assert as_user.session["api_token"] == "test-token"

    def test_over_long_details_rejected(self, as_user):
        response = as_user.post(WIZARD_URL, {"action": "next", **STEP_ONE, "repairDetails": "x" * 2001})

        assert response.context["step"] == 1
        assert "at most 2000 characters" in response.content.decode()

    @patch("core.queries.get_valid_coupons", return_value=[])
    @patch("core.queries.get_active_payment_methods", return_value=METHODS)
    @patch("core.queries.get_technician_ratings", return_value=TECHNICIANS)
    def test_step_two_records_technician(self, mock_techs, mock_methods, mock_coupons, as_user):
        response = as_user.post(WIZARD_URL, {
            "action": "next", "draft": _draft(2, itemName="iPhone 12"), "technicianId": "t1",
        })

        assert response.context["step"] == 3
        draft = _posted_draft(response)
        assert draft["data"]["technicianId"] == "t1"
        assert draft["data"]["technicianName"] == "Andi"
        assert draft["data"]["itemName"] == "iPhone 12"
        assert "Technician: Andi" in response.content.decode()

    def test_previous_keeps_data(self, as_user):
        response = as_user.post(WIZARD_URL, {
            "action": "prev", "draft": _draft(2, itemName="iPhone 12"), "technicianId": "t2",
        })

        draft = _posted_draft(response)
        assert response.context["step"] == 1
        assert draft["step"] == 1
        assert draft["data"]["technicianId"] == "t2"
        assert draft["data"]["itemName"] == "iPhone 12"
        assert response.context["form"].initial["itemName"] == "iPhone 12"

    @patch("core.queries.get_technician_ratings", return_value=TECHNICIANS)
    def test_previous_ignores_unknown_fields(self, mock_techs, as_user):
        """Test only wizard inputs are copied into the draft when going back"""
        response = as_user.post(WIZARD_URL, {
            "action": "prev",
            "draft": _draft(3, itemName="iPhone 12", technicianId="t1"),
            "paymentMethodId": "pm-1",
            "technicianName": "Spoofed",
            "isAdmin": "true",
        })

        data = _posted_draft(response)["data"]
        assert data["paymentMethodId"] == "pm-1"
        assert "isAdmin" not in data
        assert "technicianName" not in data

    def test_tampered_draft_starts_over(self, as_user):
        token = _draft(3, itemName="iPhone 12", technicianId="t1")

        with patch("core.queries.create_order") as mock_create:
            response = as_user.post(WIZARD_URL, {
                "action": "submit", "draft": "x" + token, "paymentMethodId": "pm-1",
            })

        mock_create.assert_not_called()
        assert response.context["step"] == 1
        assert _posted_draft(response)["data"] == {}

    @patch("core.queries.preview_coupon")
    @patch("core.queries.get_valid_coupons")
    @patch("core.queries.get_active_payment_methods", return_value=METHODS)
    @patch("core.queries.get_technician_ratings", return_value=TECHNICIANS)
    def test_coupon_preview_falls_back_to_base_price(self, mock_techs, mock_methods, mock_coupons, mock_preview,
                                                     as_user, settings):
        settings.ORDER_BASE_PRICE = 200000
        mock_coupons.return_value = [
            Coupon.from_dict({"id": "c1", "code": "HEMAT10", "couponType": "PERCENTAGE", "discount_amount": 10}),
            Coupon.from_dict({"id": "c2", "code": "RUSAK", "couponType": "FIXED", "discount_amount": 5000}),
        ]
        mock_preview.side_effect = [180000.0, ApiError("preview failed", status_code=500)]

        response = as_user.post(WIZARD_URL, {
            "action": "next", "draft": _draft(2, itemName="iPhone 12"), "technicianId": "t1",
        })

        previews = response.context["coupon_previews"]
        assert [p["price"] for p in previews] == [180000.0, 200000]
        assert "Rp180.000" in response.content.decode()

    @patch("core.queries.create_order")
    @patch("core.queries.get_valid_coupons", return_value=[])
    @patch("core.queries.get_active_payment_methods", return_value=METHODS)
    def test_submit_creates_order(self, mock_methods, mock_coupons, mock_create, as_user):
        mock_create.return_value = (201, {"message": "Order #42 created"})
        draft = _draft(3, technicianId="t1", technicianName="Andi", **STEP_ONE)

        response = as_user.post(WIZARD_URL, {
            "action": "submit", "draft": draft, "paymentMethodId": "pm-1", "couponId": "",
        })

        assert response.url == "/dashboard/user/orders/"
        token, payload = mock_create.call_args.args
        assert token == "test-token"
        assert payload == {
            "itemName": "iPhone 12",
            "itemCondition": "Layar retak",
            "repairDetails": "Ganti LCD",
            "serviceDate": "2025-07-10",
            "technicianId": "t1",
            "paymentMethodId": "pm-1",
            "couponId": None,
        }
        assert "Order created successfully! Order #42 created" in flashed(response)

    @patch("core.queries.create_order")
    @patch("core.queries.get_valid_coupons", return_value=[])
    @patch("core.queries.get_active_payment_methods", return_value=METHODS)
    def test_submit_failure_keeps_draft(self, mock_methods, mock_coupons, mock_create, as_user):
        mock_create.side_effect = ApiError("gone", status_code=404)

        response = as_user.post(WIZARD_URL, {
            "action": "submit", "draft": _draft(3, itemName="iPhone 12", technicianId="t1"),
            "paymentMethodId": "pm-1",
        })

        assert response.status_code == 200
        assert any(m.startswith("Invalid selection") for m in flashed(response))
        draft = _posted_draft(response)
        assert draft["step"] == 3
        assert draft["data"]["itemName"] == "iPhone 12"

    @patch("core.queries.get_valid_coupons", return_value=[])
    @patch("core.queries.get_active_payment_methods", return_value=METHODS)
    def test_submit_requires_payment_method(self, mock_methods, mock_coupons, as_user):
        with patch("core.queries.create_order") as mock_create:
            response = as_user.post(WIZARD_URL, {"action": "submit", "draft": _draft(3, itemName="iPhone 12")})

        mock_create.assert_not_called()
        assert "Please fill in all required fields" in flashed(response)

    def test_get_starts_fresh(self, as_user):
        response = as_user.get(WIZARD_URL)

        assert response.status_code == 200
        assert response.context["step"] == 1
        assert _posted_draft(response) == {"step": 1, "data": {}}


@pytest.mark.parametrize("status,expected", [
    (403, "Access denied"),
    (404, "Invalid selection"),
    (400, "Invalid order data: bad date"),
    (500, "Server error"),
    (None, "Network error"),
    (418, "Failed to create order: Unexpected error (418)"),
])
def test_order_failure_message(status, expected):
    assert order_failure_message(status, "bad date").startswith(expected)


class TestReviews:
    @patch("core.queries.get_reviews")
    def test_owner_sees_actions(self, mock_reviews, as_user):
        mock_reviews.return_value = [
            Review.from_dict({"id": "r1", "technicianId": "t1", "rating": 5, "comment": "Mantap", "owner": True}),
            Review.from_dict({"id": "r2", "technicianId": "t2", "rating": 2, "comment": "Lama", "owner": False}),
        ]

        response = as_user.get("/dashboard/user/reviews/")

        content = response.content.decode()
        assert "/dashboard/user/reviews/r1/edit/" in content
        assert "/dashboard/user/reviews/r2/edit/" not in content

    @patch("core.queries.create_review")
    @patch("core.queries.get_technician_ratings", return_value=TECHNICIANS)
    def test_create(self, mock_techs, mock_create, as_user):
        response = as_user.post("/dashboard/user/reviews/new/", {
            "technicianId": "t1", "rating": "5", "comment": "Cepat dan rapi",
        })

        assert response.url == "/dashboard/user/reviews/"
        mock_create.assert_called_once_with("test-token", "t1", 5, "Cepat dan rapi")
        assert "Review sent!" in flashed(response)

    @patch("core.queries.get_technician_ratings")
    def test_create_technician_load_failure(self, mock_techs, as_user):
        mock_techs.side_effect = ApiError("down", status_code=500)

        response = as_user.get("/dashboard/user/reviews/new/")

        assert response.status_code == 200
        assert "Failed to load technicians!" in flashed(response)

    @patch("core.queries.update_review")
    @patch("core.queries.get_review")
    def test_edit(self, mock_get, mock_update, as_user):
        mock_get.return_value = Review.from_dict({"id": "r1", "technicianId": "t1", "rating": 3, "comment": "ok"})

        response = as_user.post("/dashboard/user/reviews/r1/edit/", {"rating": "4", "comment": "Lebih baik"})

        assert response.url == "/dashboard/user/reviews/"
        mock_update.assert_called_once_with("test-token", "r1", 4, "Lebih baik")

    @patch("core.queries.get_review")
    def test_edit_load_failure(self, mock_get, as_user):
        mock_get.side_effect = ApiError("nope", status_code=404)

        response = as_user.get("/dashboard/user/reviews/r1/edit/")

        assert "Failed to load review!" in response.content.decode()

    @patch("core.queries.delete_review")
    def test_delete(self, mock_delete, as_user):
        response = as_user.post("/dashboard/user/reviews/r1/delete/")

        mock_delete.assert_called_once_with("test-token", "r1")
        assert response.url == "/dashboard/user/reviews/"


class TestNotifications:
    @patch("core.queries.get_notifications")
    def test_list(self, mock_notifications, as_user):
        mock_notifications.return_value = [
            Notification.from_dict({"id": "n1", "message": "Pesanan disetujui", "orderId": "o-1"}),
        ]

        response = as_user.get("/dashboard/user/notifications/")

        content = response.content.decode()
        assert "Pesanan disetujui" in content
        assert "/dashboard/user/orders/o-1/" in content

    @patch("core.queries.get_notifications")
    def test_error(self, mock_notifications, as_user):
        mock_notifications.side_effect = ApiError("boom", status_code=500)

        response = as_user.get("/dashboard/user/notifications/")

        assert "Failed to load notifications. Please try again later." in response.content.decode()

    @patch("core.queries.delete_notification")
    def test_delete(self, mock_delete, as_user):
        response = as_user.post("/dashboard/user/notifications/n1/delete/")

        mock_delete.assert_called_once_with("test-token", "n1")
        assert response.url == "/dashboard/user/notifications/"

    def test_refresh_flashes_and_redirects(self, as_user):
        response = as_user.post("/dashboard/user/notifications/refresh/")

        assert response.status_code == 302
        assert response.url == "/dashboard/user/notifications/"
        assert "Your notifications have been updated." in flashed(response)

    def test_refresh_requires_post(self, as_user):
        assert as_user.get("/dashboard/user/notifications/refresh/").status_code == 405


class TestPaymentMethods:
    @patch("core.queries.get_active_payment_methods", return_value=[])
    def test_empty(self, mock_methods, as_user):
        response = as_user.get("/dashboard/user/payment-methods/")
        assert "Belum ada metode pembayaran aktif" in response.content.decode()

    @patch("core.queries.get_active_payment_method")
    def test_detail(self, mock_method, as_user):
        mock_method.return_value = PaymentMethod.from_dict({
            "id": "pm-1", "name": "OVO", "paymentMethod": "E_WALLET", "processingFee": 0,
            "virtualAccountNumber": "8808123", "instructions": "Bayar via aplikasi",
        })

        response = as_user.get("/dashboard/user/payment-methods/pm-1/")

        content = response.content.decode()
        assert "E-Wallet" in content
        assert "Gratis" in content
        assert "8808123" in content
