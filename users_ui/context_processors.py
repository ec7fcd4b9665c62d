# users_ui/context_processors.py
from django.urls import reverse

from accounts.models import SESSION_AUTHENTICATED, SESSION_ROLE, SESSION_USERNAME

THEME_COOKIE = "theme"
THEMES = ("light", "dark")

ROLE_TITLES = {
    "ADMIN": "Administrator",
    "TECHNICIAN": "Teknisi",
    "USER": "Pelanggan",
}


def _menu_for(role):
    """(name, url name, icon) per role; the first entry is the role's dashboard."""
    if role == "USER":
        return [
            ("Dashboard", "user:dashboard", "home"),
            ("Orders", "user:orders", "clipboard"),
            ("Reviews", "user:reviews", "star"),
            ("Notifications", "user:notifications", "bell"),
            ("Payment Methods", "user:payment_methods", "credit-card"),
            ("Profile", "accounts:profile", "user"),
        ]
    if role == "TECHNICIAN":
        return [
            ("Dashboard", "technician:dashboard", "home"),
            ("Reviews", "technician:reviews", "star"),
            ("Profile", "accounts:profile", "user"),
        ]
    if role == "ADMIN":
        return [
            ("Dashboard", "admin_panel:dashboard", "home"),
            ("Technicians", "admin_panel:technicians", "users"),
            ("Coupons", "admin_panel:coupons", "tag"),
            ("Payment Methods", "admin_panel:payment_methods", "credit-card"),
            ("Usage Statistics", "admin_panel:payment_usage", "bar-chart"),
            ("Profile", "accounts:profile", "user"),
        ]
    return []


def resolve_active(path, menu_items):
    """Key of the item whose url is the longest prefix of path."""
    current_path = path.rstrip("/") + "/"
    best_key, best_len = None, -1
    for item in menu_items:
        url = item["url"].rstrip("/") + "/"
        if current_path.startswith(url) and len(url) > best_len:
            best_key, best_len = item["key"], len(url)
    return best_key


def dashboard_menu(request):
    """Context processor to provide role-based sidebar items to dashboard pages."""
    if not request.session.get(SESSION_AUTHENTICATED):
        return {}

    role = request.session.get(SESSION_ROLE, "")
    menu_items = [
        {"name": name, "url": reverse(url_name), "icon": icon, "key": url_name}
        for name, url_name, icon in _menu_for(role)
    ]
    active_key = resolve_active(request.path, menu_items)
    active_label = next((item["name"] for item in menu_items if item["key"] == active_key), "Dashboard")

    return {
        "menu_items": menu_items,
        "active_menu": active_key,
        "active_menu_label": active_label,
        "role_title": ROLE_TITLES.get(role, role),
        "header_username": request.session.get(SESSION_USERNAME, ""),
    }


def theme(request):
    value = request.COOKIES.get(THEME_COOKIE)
    return {"theme": value if value in THEMES else "light"}
