"""Unit tests for the service query layer, with the HTTP clients mocked."""

from unittest.mock import MagicMock, patch

import pytest

from core import queries
from core.api_client import ApiError


def _client(**returns):
    client = MagicMock()
    for method, value in returns.items():
        getattr(client, method).return_value = value
    return client


class TestAuthQueries:
    @pytest.mark.parametrize("payload", [
        {"token": "t1"},
        {"accessToken": "t1"},
        {"data": {"access_token": "t1"}},
    ])
    def test_login_extracts_token(self, payload):
        """Test the token is found in any of the response shapes"""
        with patch("core.queries.auth_api", return_value=_client(post=payload)):
            assert queries.login("a@b.co", "secret") == "t1"

    def test_login_without_token_raises(self):
        """Test a login response without a token is an error"""
        with patch("core.queries.auth_api", return_value=_client(post={"message": "ok"})):
            with pytest.raises(ApiError):
                queries.login("a@b.co", "secret")

    def test_get_profile_unwraps_user(self):
        payload = {"user": {"id": 7, "fullName": "Ani", "email": "ani@x.id", "role": "technician"}}
        with patch("core.queries.auth_api", return_value=_client(get=payload)):
            profile = queries.get_profile("tok")

        assert profile.id == "7"
        assert profile.role == "TECHNICIAN"
        assert profile.is_technician


class TestOrderQueries:
    def test_get_orders_maps_items(self):
        payload = {"orders": [{"id": "o1", "itemName": "TV", "status": "PENDING"}]}
        with patch("core.queries.order_api", return_value=_client(get=payload)):
            orders = queries.get_orders("tok")

        assert [o.itemName for o in orders] == ["TV"]
        assert orders[0].is_editable

    def test_preview_coupon_uses_base_price(self, settings):
        settings.ORDER_BASE_PRICE = 100000
        client = _client(post={"discounted_price": "85000"})
        with patch("core.queries.order_api", return_value=client):
            price = queries.preview_coupon("tok", "c1")

        assert price == 85000.0
        assert client.post.call_args.kwargs["json"] == {"original_price": 100000}

    def test_preview_coupon_bad_response(self):
        with patch("core.queries.order_api", return_value=_client(post={})):
            with pytest.raises(ApiError):
                queries.preview_coupon("tok", "c1", 50000)


class TestPaymentQueries:
    def test_error_envelope_raises(self):
        """Test status=error inside a 200 response becomes ApiError"""
        payload = {"status": "error", "message": "Method not found", "data": None}
        with patch("core.queries.payment_api", return_value=_client(get=payload)):
            with pytest.raises(ApiError) as exc:
                queries.get_admin_payment_method("tok", "pm-1")

        assert str(exc.value) == "Method not found"

    def test_success_envelope_is_unwrapped(self):
        payload = {"status": "success", "message": "ok", "data": [
            {"id": "pm-1", "name": "BCA", "payment_method": "BANK_TRANSFER", "order_count": 4, "status": "ACTIVE"},
        ]}
        with patch("core.queries.payment_api", return_value=_client(get=payload)):
            methods = queries.get_payment_method_usage("tok")

        assert methods[0].paymentMethod == "BANK_TRANSFER"
        assert methods[0].orderCount == 4
        assert methods[0].is_active


class TestReviewQueries:
    def test_update_review_body(self):
        client = _client(put={})
        with patch("core.queries.review_api", return_value=client):
            queries.update_review("tok", "r1", 4, "Mantap")

        assert client.put.call_args.args == ("/review/r1",)
        assert client.put.call_args.kwargs["json"] == {"comment": "Mantap", "rating": 4}

    def test_rating_keeps_requested_id(self):
        with patch("core.queries.review_api", return_value=_client(get={"averageRating": 4.2})):
            rating = queries.get_technician_rating("tok", "tech-9")

        assert rating.technicianId == "tech-9"
        assert rating.averageRating == 4.2
