# core/helpers.py
import math
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

import pandas as pd
import plotly.graph_objects as go
import plotly.io as pio

# ---------------------------
# Labels & badges
# ---------------------------
ORDER_STATUS_LABELS = {
    "PENDING": "Pending",
    "WAITING_APPROVAL": "Waiting Approval",
    "APPROVED": "Approved",
    "IN_PROGRESS": "In Progress",
    "COMPLETED": "Completed",
    "REJECTED": "Rejected",
    "CANCELLED": "Cancelled",
}

# css modifier used by .badge--<variant>
ORDER_STATUS_BADGES = {
    "PENDING": "outline",
    "WAITING_APPROVAL": "outline",
    "APPROVED": "outline",
    "IN_PROGRESS": "outline",
    "COMPLETED": "default",
    "REJECTED": "destructive",
    "CANCELLED": "secondary",
}

ORDER_STATUS_PROGRESS = {
    "PENDING": 10,
    "WAITING_APPROVAL": 25,
    "APPROVED": 40,
    "IN_PROGRESS": 70,
    "COMPLETED": 100,
    "REJECTED": 0,
    "CANCELLED": 0,
}

# url tab -> order status
ORDER_STATUS_TABS = {
    "pending": "PENDING",
    "waiting-approval": "WAITING_APPROVAL",
    "approved": "APPROVED",
    "in-progress": "IN_PROGRESS",
    "completed": "COMPLETED",
    "rejected": "REJECTED",
    "cancelled": "CANCELLED",
}

PAYMENT_TYPE_LABELS = {
    "BANK_TRANSFER": "Transfer Bank",
    "E_WALLET": "E-Wallet",
    "COD": "Bayar di Tempat",
}

# url tab -> payment method type
PAYMENT_TYPE_TABS = {
    "bank-transfer": "BANK_TRANSFER",
    "e-wallet": "E_WALLET",
    "cod": "COD",
}

COUPON_TYPE_LABELS = {
    "PERCENTAGE": "Percentage",
    "FIXED": "Fixed Amount",
    "RANDOM": "Random",
}

TECHNICIAN_TABS = ("all", "experienced", "top-rated", "new")

BULAN_ID = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]


def order_status_label(status):
    return ORDER_STATUS_LABELS.get(status, status or "")


def payment_type_label(method_type):
    return PAYMENT_TYPE_LABELS.get(method_type, method_type or "")


# ---------------------------
# Formatting
# ---------------------------
def format_rupiah(value) -> str:
    """
    Rupiah without decimals, "." as thousands separator.
    format_rupiah(200000) -> "Rp200.000"; non-numeric input -> "NaN".
    """
    if isinstance(value, bool) or value is None:
        return "NaN"
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return "NaN"
    if not amount.is_finite():
        return "NaN"
    rounded = int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if rounded < 0 else ""
    return f"{sign}Rp{abs(rounded):,}".replace(",", ".")


def parse_datetime(value):
    """Parse ISO strings (with or without 'Z') and dates; None when unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.strptime(text[:10], "%Y-%m-%d")
    except ValueError:
        return None


def format_date_id(value, with_time=False) -> str:
    """Long Indonesian date, e.g. "5 Mei 2025"."""
    dt = parse_datetime(value)
    if dt is None:
        return str(value) if value else "-"
    text = f"{dt.day} {BULAN_ID[dt.month - 1]} {dt.year}"
    if with_time:
        text += f" {dt:%H.%M}"
    return text


def format_date_short(value) -> str:
    dt = parse_datetime(value)
    if dt is None:
        return str(value) if value else "-"
    return f"{dt.day} {BULAN_ID[dt.month - 1][:3]} {dt.year}"


def format_discount(coupon) -> str:
    if coupon.couponType == "PERCENTAGE":
        amount = coupon.discount_amount
        return f"{int(amount) if float(amount).is_integer() else amount}%"
    return format_rupiah(coupon.discount_amount)


# ---------------------------
# List filters
# ---------------------------
def _contains(haystack, needle):
    return needle in str(haystack or "").lower()


def _sort_key_created(order):
    dt = parse_datetime(order.createdAt)
    if dt is None:
        return 0.0
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def filter_orders(orders, status_tab="all", search="", sort="newest"):
    """Status tab, case-insensitive search over id/item/details/technician, sort by createdAt."""
    result = list(orders)

    status = ORDER_STATUS_TABS.get(status_tab)
    if status:
        result = [o for o in result if o.status == status]

    query = (search or "").strip().lower()
    if query:
        result = [
            o for o in result
            if _contains(o.id, query)
            or _contains(o.itemName, query)
            or _contains(o.repairDetails, query)
            or _contains(o.technicianId, query)
        ]

    result.sort(key=_sort_key_created, reverse=(sort != "oldest"))
    return result


def filter_technicians(technicians, tab="all", search=""):
    """Experience/rating tabs, search over name/specialization, rating desc then name."""
    result = list(technicians)

    if tab == "experienced":
        result = [t for t in result if (t.experience or 0) >= 3]
    elif tab == "top-rated":
        result = [t for t in result if (t.averageRating or 0) >= 4.5]
    elif tab == "new":
        result = [t for t in result if (t.experience or 0) < 2]

    query = (search or "").strip().lower()
    if query:
        result = [t for t in result if _contains(t.fullName, query) or _contains(t.specialization, query)]

    result.sort(key=lambda t: (-(t.averageRating or 0), (t.fullName or "").lower()))
    return result


def filter_payment_methods(methods, tab="all", search=""):
    """All/active/inactive/per-type tabs, search, most used first."""
    result = list(methods)

    if tab == "active":
        result = [m for m in result if m.is_active]
    elif tab == "inactive":
        result = [m for m in result if not m.is_active]
    elif tab in PAYMENT_TYPE_TABS:
        result = [m for m in result if m.paymentMethod == PAYMENT_TYPE_TABS[tab]]

    query = (search or "").strip().lower()
    if query:
        result = [
            m for m in result
            if _contains(m.paymentMethod, query)
            or _contains(payment_type_label(m.paymentMethod), query)
            or _contains(m.name, query)
            or _contains(m.accountName, query)
            or _contains(m.bankName, query)
            or _contains(m.instructions, query)
        ]

    result.sort(key=lambda m: -(m.orderCount or 0))
    return result


# ---------------------------
# Aggregations (pandas)
# ---------------------------
def count_orders_by_status(orders) -> dict:
    """{status: count} for every known status, zero-filled."""
    counts = {status: 0 for status in ORDER_STATUS_LABELS}
    if not orders:
        return counts
    df = pd.DataFrame([{"status": o.status} for o in orders])
    for status, n in df["status"].value_counts().items():
        counts[status] = int(n)
    return counts


def summarize_payment_usage(methods) -> dict:
    """
    Usage statistics for the admin page.
    Returns total_orders, average_orders, most_used (PaymentMethod or None)
    and by_type: [{type, label, count, orders, percentage}] sorted by orders desc.
    """
    methods = list(methods)
    summary = {
        "total_methods": len(methods),
        "total_orders": 0,
        "average_orders": 0.0,
        "most_used": None,
        "by_type": [],
    }
    if not methods:
        return summary

    df = pd.DataFrame(
        [{"type": m.paymentMethod, "orders": int(m.orderCount or 0)} for m in methods]
    )
    total = int(df["orders"].sum())
    summary["total_orders"] = total
    summary["average_orders"] = round(total / len(methods), 1)
    summary["most_used"] = max(methods, key=lambda m: m.orderCount or 0)

    grouped = (
        df.groupby("type")
        .agg(count=("orders", "size"), orders=("orders", "sum"))
        .reset_index()
        .sort_values(["orders", "type"], ascending=[False, True])
    )
    for row in grouped.itertuples(index=False):
        orders = int(row.orders)
        summary["by_type"].append({
            "type": row.type,
            "label": payment_type_label(row.type),
            "count": int(row.count),
            "orders": orders,
            "percentage": round(orders / total * 100, 1) if total else 0.0,
        })
    return summary


def usage_chart_html(summary):
    """Bar chart of orders per payment type; None when there is nothing to plot."""
    rows = summary.get("by_type") or []
    if not rows:
        return None
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=[r["label"] for r in rows],
        y=[r["orders"] for r in rows],
        name="Pesanan",
        text=[f"{r['percentage']}%" for r in rows],
        textposition="auto",
    ))
    fig.update_layout(
        title="Penggunaan Metode Pembayaran",
        xaxis_title="Tipe",
        yaxis=dict(title="Jumlah Pesanan", showticklabels=True),
        margin=dict(l=40, r=20, t=60, b=40),
        template="plotly_white",
        height=400,
    )
    return pio.to_html(fig, full_html=False, include_plotlyjs="cdn")


def average_rating_display(value):
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "0.0"
    return f"{float(value):.1f}"
