# core/api_client.py
import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Raised for any failed call to a backend service.
    status_code is None when the service could not be reached at all.
    """

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def is_unauthorized(self):
        return self.status_code == 401

    def __str__(self):
        return self.message


class ApiClient:
    """Thin JSON client for one backend service (order, payment, review, auth)."""

    def __init__(self, base_url, timeout=None):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT_SECONDS

    def url_for(self, endpoint):
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def request(self, method, endpoint, token=None, json=None, expected=None):
        """
        Send a request and return (status_code, parsed JSON or None).
        Non-2xx responses raise ApiError unless the status is listed in `expected`.
        """
        url = self.url_for(endpoint)
        headers = {"Accept": "application/json"}
        if json is not None:
            headers["Content-Type"] = "application/json"
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = requests.request(method, url, headers=headers, json=json, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ApiError("Network error, please check your connection and try again.") from e

        logger.debug("%s %s -> %s", method, url, response.status_code)
        body = _parse_json(response)

        if response.ok or (expected and response.status_code in expected):
            return response.status_code, body

        message = _error_message(body) or f"HTTP error! status: {response.status_code}"
        logger.warning("%s %s returned %s: %s", method, url, response.status_code, message)
        raise ApiError(message, status_code=response.status_code, payload=body)

    def get(self, endpoint, token=None):
        return self.request("GET", endpoint, token=token)[1]

    def post(self, endpoint, token=None, json=None):
        return self.request("POST", endpoint, token=token, json=json)[1]

    def put(self, endpoint, token=None, json=None):
        return self.request("PUT", endpoint, token=token, json=json)[1]

    def patch(self, endpoint, token=None, json=None):
        return self.request("PATCH", endpoint, token=token, json=json)[1]

    def delete(self, endpoint, token=None):
        return self.request("DELETE", endpoint, token=token)[1]


def _parse_json(response):
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(body):
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return None


def unwrap(payload, key=None):
    """
    Strip the response envelopes used by the services:
    {"status", "message", "data"} from payment, {"orders"}/{"coupons"}/{"order"} from order.
    Anything else is returned as-is.
    """
    if isinstance(payload, dict):
        if key and key in payload:
            return payload[key]
        if "data" in payload and ("status" in payload or "message" in payload):
            return payload["data"]
    return payload


# -------------------------
# Per-service clients
# -------------------------
def order_api():
    return ApiClient(settings.ORDER_API_URL)


def payment_api():
    return ApiClient(settings.PAYMENT_API_URL)


def review_api():
    return ApiClient(settings.REVIEW_API_URL)


def auth_api():
    return ApiClient(settings.AUTH_API_URL)
