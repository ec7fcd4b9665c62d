# utils/validators.py
import re

from django import forms

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 15


# -----------------------------
# Plain predicates
# -----------------------------
def is_valid_email(value) -> bool:
    return bool(value) and bool(EMAIL_RE.match(str(value)))


def phone_digits(value) -> str:
    """Strip everything that is not a digit."""
    return re.sub(r"\D", "", str(value or ""))


def is_valid_phone(value) -> bool:
    """Valid when the digits alone number between 10 and 15."""
    return PHONE_MIN_DIGITS <= len(phone_digits(value)) <= PHONE_MAX_DIGITS


def is_non_empty(value) -> bool:
    return bool(value) and bool(str(value).strip())


# -----------------------------
# Django field validators
# -----------------------------
def validate_email_format(value):
    if not is_valid_email(value):
        raise forms.ValidationError("Please enter a valid email address")


def validate_phone_number(value):
    if not is_valid_phone(value):
        raise forms.ValidationError("Please enter a valid phone number (10-15 digits)")


def validate_non_negative(value):
    if value is not None and value < 0:
        raise forms.ValidationError("Value must be zero or greater")


def validate_not_blank(value):
    if not is_non_empty(value):
        raise forms.ValidationError("This field cannot be blank")
