# core/templatetags/display.py
from django import template

from core import helpers

register = template.Library()


@register.filter
def rupiah(value):
    return helpers.format_rupiah(value)


@register.filter
def tanggal(value):
    """{{ review.createdAt|tanggal }} -> 5 Mei 2025"""
    return helpers.format_date_id(value)


@register.filter
def tanggal_jam(value):
    return helpers.format_date_id(value, with_time=True)


@register.filter
def tanggal_pendek(value):
    return helpers.format_date_short(value)


@register.filter
def status_label(value):
    return helpers.order_status_label(value)


@register.filter
def status_badge(value):
    return helpers.ORDER_STATUS_BADGES.get(value, "outline")


@register.filter
def status_progress(value):
    return helpers.ORDER_STATUS_PROGRESS.get(value, 0)


@register.filter
def payment_type(value):
    return helpers.payment_type_label(value)


@register.filter
def coupon_type(value):
    return helpers.COUPON_TYPE_LABELS.get(value, value)


@register.filter
def discount(coupon):
    return helpers.format_discount(coupon)


@register.filter
def fee(value):
    """Processing fee, "Gratis" when zero."""
    try:
        if float(value) <= 0:
            return "Gratis"
    except (TypeError, ValueError):
        return "-"
    return helpers.format_rupiah(value)


@register.filter
def stars(value):
    try:
        rating = int(round(float(value)))
    except (TypeError, ValueError):
        rating = 0
    rating = max(0, min(5, rating))
    return "★" * rating + "☆" * (5 - rating)
