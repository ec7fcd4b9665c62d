# perbaikiinaja/main_urls.py
from django.urls import path, include

from users_ui import dashboard_views

# --- URL patterns ---
urlpatterns = [
    # Landing page
    path("", dashboard_views.landing, name="landing"),
    path("theme/toggle/", dashboard_views.toggle_theme, name="toggle_theme"),

    # Role switchboard
    path("dashboard/", dashboard_views.dashboard_index, name="dashboard"),

    # Role sections
    path("dashboard/user/", include("users_ui.user.user_urls")),
    path("dashboard/technician/", include("users_ui.technician.technician_urls")),
    path("dashboard/admin/", include("users_ui.admin_panel.admin_urls")),

    # Authentication routes
    path("accounts/", include("accounts.auth_urls")),
]
