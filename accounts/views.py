# accounts/views.py
import logging

from django.contrib import messages
from django.shortcuts import render, redirect

from core import queries
from core.api_client import ApiError
from users_ui.base_views import role_view
from .forms import LoginForm, RegisterForm, ProfileForm, PasswordChangeForm
from .models import SESSION_TOKEN, store_session_user, refresh_session_profile

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Login view
# -------------------------------------------------------------------
def _sign_in(request, email, password):
    """Token from /auth/login, then the profile that carries the role."""
    token = queries.login(email, password)
    profile = queries.get_profile(token)
    store_session_user(request, token, profile)
    logger.info("User %s logged in as %s", profile.email, profile.role)
    return profile


def login_view(request):
    """
    Handle user login.
    Always start with a clean session when accessing /login/.
    """
    if request.method == "GET":
        request.session.flush()

    form = LoginForm(request.POST or None)

    if request.method == "POST" and form.is_valid():
        try:
            profile = _sign_in(request, form.cleaned_data["email"], form.cleaned_data["password"])
        except ApiError as e:
            logger.warning("Login failed for %s: %s", form.cleaned_data["email"], e)
            messages.error(request, f"❌ Login gagal: {e.message}")
        else:
            messages.success(request, f"✅ Login berhasil! Selamat datang, {profile.fullName}.")
            return redirect_role(profile.role)

    return render(request, "accounts/login.html", {"form": form})


# -------------------------------------------------------------------
# Register view
# -------------------------------------------------------------------
def register_view(request):
    """Create a customer account, then log in with the same credentials."""
    form = RegisterForm(request.POST or None)

    if request.method == "POST":
        if not form.is_valid():
            messages.error(request, "Please fix the errors in the form before submitting.")
        else:
            try:
                queries.register_user(form.payload())
            except ApiError as e:
                messages.error(request, f"❌ Registrasi gagal: {e.message}")
            else:
                try:
                    profile = _sign_in(request, form.cleaned_data["email"], form.cleaned_data["password"])
                except ApiError as e:
                    messages.warning(request, f"Akun dibuat, tetapi login otomatis gagal: {e.message}")
                    return redirect("accounts:login")
                messages.success(request, "✅ Registrasi berhasil!")
                return redirect_role(profile.role)

    return render(request, "accounts/register.html", {"form": form})


# -------------------------------------------------------------------
# Logout view
# -------------------------------------------------------------------
def logout_view(request):
    """Logout the current user and clear session."""
    token = request.session.get(SESSION_TOKEN)
    if not token:
        return redirect("accounts:login")

    try:
        queries.logout(token)
    except ApiError as e:
        # Session is cleared either way
        logger.info("Remote logout failed: %s", e)

    request.session.flush()
    messages.info(request, "ℹ️ Logout berhasil. Sampai jumpa!")
    return redirect("accounts:login")


# -------------------------------------------------------------------
# Profile view (all roles)
# -------------------------------------------------------------------
@role_view(template_name="accounts/profile.html")
def profile_view(request):
    session_user = request.session_user
    token = session_user.token
    action = request.POST.get("action")

    profile = queries.get_profile(token)
    refresh_session_profile(request, profile)

    profile_form = ProfileForm(initial={
        "fullName": profile.fullName,
        "phoneNumber": profile.phoneNumber,
        "address": profile.address or "",
        "experience": profile.experience,
    }, role=profile.role)
    password_form = PasswordChangeForm()

    if request.method == "POST" and action == "profile":
        profile_form = ProfileForm(request.POST, role=profile.role)
        if profile_form.is_valid():
            try:
                updated = queries.update_profile(token, profile_form.payload())
            except ApiError as e:
                if e.is_unauthorized:
                    raise
                messages.error(request, f"Failed to update profile: {e.message}")
            else:
                if updated.id:
                    refresh_session_profile(request, updated)
                messages.success(request, "Profile updated")
                return redirect("accounts:profile")

    elif request.method == "POST" and action == "password":
        password_form = PasswordChangeForm(request.POST)
        if password_form.is_valid():
            try:
                queries.update_profile(token, {"password": password_form.cleaned_data["newPassword"]})
            except ApiError as e:
                if e.is_unauthorized:
                    raise
                messages.error(request, f"Failed to change password: {e.message}")
            else:
                messages.success(request, "Password updated")
                return redirect("accounts:profile")

    return {
        "profile": profile,
        "profile_form": profile_form,
        "password_form": password_form,
    }


# -------------------------------------------------------------------
# Helper to redirect by role
# -------------------------------------------------------------------
def redirect_role(role):
    if role in ("ADMIN", "TECHNICIAN", "USER"):
        return redirect("dashboard")
    # Unknown role - back to login
    return redirect("accounts:login")
