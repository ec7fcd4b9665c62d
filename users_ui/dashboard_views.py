# users_ui/dashboard_views.py
from django.shortcuts import render, redirect
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from .base_views import role_view
from .context_processors import THEME_COOKIE

LANDING_FEATURES = [
    {"icon": "wrench", "title": "Teknisi Terverifikasi",
     "text": "Pilih teknisi berdasarkan pengalaman, spesialisasi dan rating dari pelanggan lain."},
    {"icon": "clipboard", "title": "Pantau Pesanan",
     "text": "Lihat status perbaikan dari menunggu persetujuan sampai selesai."},
    {"icon": "credit-card", "title": "Pembayaran Fleksibel",
     "text": "Transfer bank, e-wallet atau bayar di tempat."},
    {"icon": "tag", "title": "Kupon Diskon",
     "text": "Gunakan kupon yang berlaku untuk memotong biaya perbaikan."},
]

LANDING_FAQ = [
    ("Bagaimana cara memesan perbaikan?",
     "Daftar atau login, buka menu Orders lalu isi detail barang, pilih teknisi dan metode pembayaran."),
    ("Apakah saya bisa membatalkan pesanan?",
     "Bisa, selama pesanan masih berstatus Pending atau Waiting Approval."),
    ("Bagaimana teknisi dipilih?",
     "Anda memilih sendiri dari daftar teknisi beserta rating dan jumlah ulasannya."),
    ("Metode pembayaran apa saja yang tersedia?",
     "Metode yang aktif ditentukan admin dan dapat dilihat di halaman Payment Methods."),
]


def landing(request):
    return render(request, "landing.html", {
        "features": LANDING_FEATURES,
        "faq": LANDING_FAQ,
        "is_authenticated": bool(request.session.get("authenticated")),
    })


@require_POST
def toggle_theme(request):
    current = request.COOKIES.get(THEME_COOKIE, "light")
    next_url = request.POST.get("next") or request.META.get("HTTP_REFERER") or "/"
    if not url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        next_url = "/"
    response = redirect(next_url)
    response.set_cookie(
        THEME_COOKIE,
        "light" if current == "dark" else "dark",
        max_age=60 * 60 * 24 * 365,
        samesite="Lax",
    )
    return response


@role_view()
def dashboard_index(request):
    """Send each role to its own dashboard."""
    role = request.session_user.role
    if role == "ADMIN":
        return redirect("admin_panel:dashboard")
    if role == "TECHNICIAN":
        return redirect("technician:dashboard")
    return redirect("user:dashboard")
