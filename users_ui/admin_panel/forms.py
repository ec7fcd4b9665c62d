# users_ui/admin_panel/forms.py
import re

from django import forms

from accounts.forms import RegisterForm
from core.core_models import COUPON_TYPES, PAYMENT_METHOD_TYPES
from core.helpers import COUPON_TYPE_LABELS, PAYMENT_TYPE_LABELS
from utils.validators import is_valid_phone, is_non_empty


def to_snake_case(data):
    """camelCase keys -> snake_case, the shape the payment service expects."""
    return {re.sub(r"([A-Z])", r"_\1", key).lower(): value for key, value in data.items()}


# -----------------------------
# Coupons
# -----------------------------
class CouponForm(forms.Form):
    couponType = forms.ChoiceField(
        label="Coupon Type",
        choices=[(t, COUPON_TYPE_LABELS[t]) for t in COUPON_TYPES],
        error_messages={"required": "Coupon type is required", "invalid_choice": "Invalid coupon type"},
        widget=forms.Select(attrs={"class": "form-control"}),
    )
    discount_amount = forms.DecimalField(
        label="Discount Amount", required=False,
        error_messages={"invalid": "Discount amount must be a number"},
        widget=forms.NumberInput(attrs={"class": "form-control", "step": "any"}),
    )
    max_usage = forms.IntegerField(
        label="Max Usage", required=False,
        error_messages={"invalid": "Max usage must be a whole number"},
        widget=forms.NumberInput(attrs={"class": "form-control", "min": 1}),
    )
    start_date = forms.DateField(
        label="Start Date", required=False,
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}),
    )
    end_date = forms.DateField(
        label="End Date", required=False,
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}),
    )

    def clean_discount_amount(self):
        value = self.cleaned_data.get("discount_amount")
        if value is None:
            raise forms.ValidationError("Discount amount is required")
        if value <= 0:
            raise forms.ValidationError("Discount amount must be greater than 0")
        return value

    def clean_max_usage(self):
        value = self.cleaned_data.get("max_usage")
        if value is None:
            raise forms.ValidationError("Max usage is required")
        if value < 1:
            raise forms.ValidationError("Max usage must be at least 1")
        return value

    def clean_start_date(self):
        value = self.cleaned_data.get("start_date")
        if value is None:
            raise forms.ValidationError("Start date is required")
        return value

    def clean_end_date(self):
        value = self.cleaned_data.get("end_date")
        if value is None:
            raise forms.ValidationError("End date is required")
        return value

    def clean(self):
        cleaned_data = super().clean()
        coupon_type = cleaned_data.get("couponType")
        amount = cleaned_data.get("discount_amount")
        if coupon_type == "PERCENTAGE" and amount is not None and amount > 100:
            self.add_error("discount_amount", "Percentage discount cannot exceed 100")

        start, end = cleaned_data.get("start_date"), cleaned_data.get("end_date")
        if start and end and end < start:
            self.add_error("end_date", "End date must be on or after the start date")
        return cleaned_data

    def payload(self):
        data = self.cleaned_data
        amount = data["discount_amount"]
        return {
            "couponType": data["couponType"],
            "discount_amount": int(amount) if amount == amount.to_integral_value() else float(amount),
            "max_usage": data["max_usage"],
            "start_date": f"{data['start_date'].isoformat()}T00:00:00",
            "end_date": f"{data['end_date'].isoformat()}T23:59:59",
        }


# -----------------------------
# Technicians
# -----------------------------
class TechnicianForm(RegisterForm):
    """Admin-created technician account: registration rules plus experience."""

    experience = forms.IntegerField(
        label="Years of Experience", required=False, min_value=0,
        error_messages={"min_value": "Experience must be a valid number", "invalid": "Experience must be a valid number"},
        widget=forms.NumberInput(attrs={"class": "form-control", "min": 0}),
    )

    field_order = ["fullName", "email", "phoneNumber", "password", "confirmPassword", "experience", "address"]

    def payload(self):
        data = super().payload()
        if self.cleaned_data.get("experience") is not None:
            data["experience"] = self.cleaned_data["experience"]
        return data


# -----------------------------
# Payment methods
# -----------------------------
# Extra fields each type sends, in camelCase
PAYMENT_TYPE_FIELDS = {
    "BANK_TRANSFER": ("accountName", "accountNumber", "bankName"),
    "E_WALLET": ("accountName", "virtualAccountNumber", "instructions"),
    "COD": ("phoneNumber", "instructions"),
}

PAYMENT_FIELD_MESSAGES = {
    "accountName": "Account name is required",
    "accountNumber": "Account number is required",
    "bankName": "Bank name is required",
    "virtualAccountNumber": "Virtual account number is required",
    "phoneNumber": "Phone number is required",
    "instructions": "Instructions are required",
}


class PaymentMethodForm(forms.Form):
    name = forms.CharField(
        label="Nama", required=False,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "BCA Transfer"}),
    )
    paymentMethod = forms.ChoiceField(
        label="Tipe",
        choices=[(t, PAYMENT_TYPE_LABELS[t]) for t in PAYMENT_METHOD_TYPES],
        initial="BANK_TRANSFER",
        error_messages={"required": "Payment type is required", "invalid_choice": "Invalid payment type"},
        widget=forms.Select(attrs={"class": "form-control", "data-payment-type": "1"}),
    )
    description = forms.CharField(
        label="Deskripsi", required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )
    processingFee = forms.DecimalField(
        label="Biaya Proses", required=False, initial=0,
        error_messages={"invalid": "Processing fee must be a number"},
        widget=forms.NumberInput(attrs={"class": "form-control", "min": 0, "step": "any"}),
    )
    accountName = forms.CharField(label="Nama Akun", required=False,
                                  widget=forms.TextInput(attrs={"class": "form-control"}))
    accountNumber = forms.CharField(label="Nomor Rekening", required=False,
                                    widget=forms.TextInput(attrs={"class": "form-control"}))
    bankName = forms.CharField(label="Nama Bank", required=False,
                               widget=forms.TextInput(attrs={"class": "form-control"}))
    virtualAccountNumber = forms.CharField(label="Nomor Virtual Account", required=False,
                                           widget=forms.TextInput(attrs={"class": "form-control"}))
    phoneNumber = forms.CharField(label="Nomor Telepon", required=False,
                                  widget=forms.TextInput(attrs={"class": "form-control"}))
    instructions = forms.CharField(label="Instruksi", required=False,
                                   widget=forms.Textarea(attrs={"class": "form-control", "rows": 3}))

    def clean_name(self):
        value = (self.cleaned_data.get("name") or "").strip()
        if not value:
            raise forms.ValidationError("Name is required")
        return value

    def clean_description(self):
        value = (self.cleaned_data.get("description") or "").strip()
        if not value:
            raise forms.ValidationError("Description is required")
        return value

    def clean_processingFee(self):
        value = self.cleaned_data.get("processingFee")
        if value is None:
            return 0
        if value < 0:
            raise forms.ValidationError("Processing fee cannot be negative")
        return value

    def clean(self):
        cleaned_data = super().clean()
        method_type = cleaned_data.get("paymentMethod")
        for field in PAYMENT_TYPE_FIELDS.get(method_type, ()):
            value = (cleaned_data.get(field) or "").strip()
            if not is_non_empty(value):
                self.add_error(field, PAYMENT_FIELD_MESSAGES[field])
            elif field == "phoneNumber" and not is_valid_phone(value):
                self.add_error(field, "Please enter a valid phone number")
            else:
                cleaned_data[field] = value
        return cleaned_data

    def payload(self):
        """Common fields plus only the ones the chosen type uses, snake_cased."""
        data = self.cleaned_data
        fee = data.get("processingFee") or 0
        body = {
            "name": data["name"],
            "paymentMethod": data["paymentMethod"],
            "description": data["description"],
            "processingFee": int(fee) if fee == int(fee) else float(fee),
        }
        for field in PAYMENT_TYPE_FIELDS[data["paymentMethod"]]:
            body[field] = data[field]
        return to_snake_case(body)
