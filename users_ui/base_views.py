# users_ui/base_views.py
import logging
from functools import wraps

from django.contrib import messages
from django.http import HttpResponse, JsonResponse
from django.shortcuts import render, redirect
from django.utils.http import url_has_allowed_host_and_scheme

from accounts.models import SessionUser, is_known_role
from core.api_client import ApiError

logger = logging.getLogger(__name__)


def end_session(request, message="Sesi Anda telah berakhir, silakan login kembali."):
    """Flush the session and send the browser to the login page."""
    request.session.flush()
    if message:
        messages.warning(request, message)
    return redirect("accounts:login")


def role_view(*roles, template_name=None):
    """
    Decorator for dashboard views that handles common functionality:
    - Ensures someone is logged in with one of `roles` (any role when empty)
    - Attaches request.session_user (token, role, profile)
    - Turns a 401 from any backend service into a logout
    - Renders a returned context dict or (template, context) tuple
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped_view(request, *args, **kwargs):
            session_user = SessionUser.from_session(request.session)

            if session_user is None:
                # Not logged in at all - redirect to login
                return redirect("accounts:login")

            if not is_known_role(session_user.role):
                # Unknown role - logout and redirect to login
                logger.warning("Unknown role %r in session, logging out", session_user.role)
                return end_session(request, message=None)

            if roles and session_user.role not in roles:
                # Logged in but wrong role - back to the role's own dashboard
                messages.error(request, "Access Denied: halaman ini tidak tersedia untuk peran Anda.")
                return redirect("dashboard")

            request.session_user = session_user

            try:
                response = view_func(request, *args, **kwargs)
            except ApiError as e:
                if e.is_unauthorized:
                    logger.info("Token rejected for %s, ending session", session_user.username)
                    return end_session(request)
                raise

            # If the response is already an HttpResponse, return it
            if isinstance(response, HttpResponse):
                return response

            # If the response is a tuple of (template, context)
            if isinstance(response, tuple) and len(response) == 2:
                template_override, context = response
                template_to_use = template_override or template_name
            else:
                # Response is just context
                template_to_use = template_name
                context = response if isinstance(response, dict) else {}

            # If no template specified, return context as JSON
            if not template_to_use:
                return JsonResponse(context)

            context.setdefault("session_user", session_user)
            return render(request, template_to_use, context)

        return _wrapped_view
    return decorator


def read_or_error(fetch, default=None):
    """
    Run a read-only service call for a page.
    Returns (value, error_message); 401 is re-raised so role_view can end the session.
    """
    try:
        return fetch(), None
    except ApiError as e:
        if e.is_unauthorized:
            raise
        logger.warning("Read failed: %s", e)
        return default, e.message


def safe_next(request, default):
    """POSTed `next` when it points back at this site, else default."""
    next_url = request.POST.get("next") or request.GET.get("next")
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return next_url
    return default


def flash_api_error(request, e, prefix):
    """Flash a failed write; a rejected token still ends the session."""
    if e.is_unauthorized:
        raise e
    logger.warning("%s: %s", prefix, e)
    messages.error(request, f"{prefix}: {e.message}")
