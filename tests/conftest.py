"""Shared fixtures for view and form tests."""

import pytest
from django.conf import settings as django_settings
from django.contrib.messages import get_messages

from core.core_models import UserProfile


@pytest.fixture(autouse=True)
def plain_static_storage(settings):
    """Templates use {% static %}; skip the manifest lookup in tests."""
    settings.STORAGES = {
        **settings.STORAGES,
        "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
    }
    settings.ORDER_API_URL = "http://orders.test"
    settings.PAYMENT_API_URL = "http://payments.test"
    settings.REVIEW_API_URL = "http://reviews.test"
    settings.AUTH_API_URL = "http://auth.test"


def make_profile(role="USER", **overrides):
    data = {
        "id": f"{role.lower()}-1",
        "fullName": f"Test {role.title()}",
        "email": f"{role.lower()}@example.com",
        "phoneNumber": "081234567890",
        "role": role,
    }
    data.update(overrides)
    return UserProfile.from_dict(data)


def _login(client, role, token="test-token"):
    profile = make_profile(role)
    session = client.session
    session["authenticated"] = True
    session["api_token"] = token
    session["user_role"] = role
    session["username"] = profile.fullName
    session["user_profile"] = profile.to_dict()
    session.save()
    # signed_cookies sessions carry their data in the key itself
    client.cookies[django_settings.SESSION_COOKIE_NAME] = session.session_key
    return profile


def flashed(response):
    """Messages queued during the request behind response."""
    return [str(m) for m in get_messages(response.wsgi_request)]


@pytest.fixture
def login_as(client):
    """login_as("ADMIN") puts an authenticated session on the test client."""
    def _do(role="USER", token="test-token"):
        return _login(client, role, token)
    return _do


@pytest.fixture
def as_user(client, login_as):
    login_as("USER")
    return client


@pytest.fixture
def as_technician(client, login_as):
    login_as("TECHNICIAN")
    return client


@pytest.fixture
def as_admin(client, login_as):
    login_as("ADMIN")
    return client
