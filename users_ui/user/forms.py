# users_ui/user/forms.py
from django import forms

from utils.validators import is_non_empty

ITEM_NAME_MAX_LENGTH = 255
ITEM_CONDITION_MAX_LENGTH = 1000
REPAIR_DETAILS_MAX_LENGTH = 2000


def _required_text(form, field, message):
    value = (form.cleaned_data.get(field) or "").strip()
    if not value:
        raise forms.ValidationError(message)
    return value


# -----------------------------
# Order wizard
# -----------------------------
class OrderDetailsForm(forms.Form):
    """Step 1: what needs repairing and when."""

    itemName = forms.CharField(
        label="Item Name", required=False, max_length=ITEM_NAME_MAX_LENGTH,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "e.g. Samsung Galaxy S21"}),
    )
    itemCondition = forms.CharField(
        label="Item Condition", required=False, max_length=ITEM_CONDITION_MAX_LENGTH,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )
    repairDetails = forms.CharField(
        label="Repair Details", required=False, max_length=REPAIR_DETAILS_MAX_LENGTH,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 3}),
    )
    serviceDate = forms.CharField(
        label="Service Date", required=False,
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}),
    )

    def clean_itemName(self):
        return _required_text(self, "itemName", "Item name is required")

    def clean_itemCondition(self):
        return _required_text(self, "itemCondition", "Item condition must be described")

    def clean_repairDetails(self):
        return _required_text(self, "repairDetails", "Repair details are required")

    def clean_serviceDate(self):
        return _required_text(self, "serviceDate", "Service date must be selected")


class TechnicianChoiceForm(forms.Form):
    """Step 2: pick a technician from the ratings list."""

    technicianId = forms.ChoiceField(
        label="Technician", required=False, choices=(),
        widget=forms.RadioSelect,
    )

    def __init__(self, *args, technicians=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["technicianId"].choices = [(t.technicianId, t.fullName) for t in technicians]

    def clean_technicianId(self):
        value = self.cleaned_data.get("technicianId")
        if not value:
            raise forms.ValidationError("Please select a technician")
        return value


class PaymentChoiceForm(forms.Form):
    """Step 3: payment method (required) and coupon (optional)."""

    paymentMethodId = forms.ChoiceField(
        label="Payment Method", required=False, choices=(),
        widget=forms.RadioSelect,
    )
    couponId = forms.ChoiceField(
        label="Coupon", required=False, choices=(),
        widget=forms.RadioSelect,
    )

    def __init__(self, *args, payment_methods=(), coupons=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["paymentMethodId"].choices = [(m.id, m.name) for m in payment_methods]
        self.fields["couponId"].choices = [("", "No coupon")] + [(c.id, c.code) for c in coupons]

    def clean_paymentMethodId(self):
        value = self.cleaned_data.get("paymentMethodId")
        if not value:
            raise forms.ValidationError("Payment method is required")
        return value


# -----------------------------
# Order edit
# -----------------------------
class OrderEditForm(forms.Form):
    itemName = forms.CharField(
        label="Item Name", required=False, max_length=ITEM_NAME_MAX_LENGTH,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    itemCondition = forms.CharField(
        label="Item Condition", required=False, max_length=ITEM_CONDITION_MAX_LENGTH,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )
    repairDetails = forms.CharField(
        label="Repair Details", required=False, max_length=REPAIR_DETAILS_MAX_LENGTH,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 3}),
    )
    serviceDate = forms.DateField(
        label="Service Date", required=False,
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}, format="%Y-%m-%d"),
    )
    technicianId = forms.CharField(required=False, widget=forms.HiddenInput)

    def clean_itemName(self):
        return _required_text(self, "itemName", "Item name is required")

    def clean_itemCondition(self):
        return _required_text(self, "itemCondition", "Item condition must be described")

    def clean_repairDetails(self):
        return _required_text(self, "repairDetails", "Repair details are required")

    def payload(self):
        data = self.cleaned_data
        service_date = data.get("serviceDate")
        return {
            "itemName": data["itemName"],
            "itemCondition": data["itemCondition"],
            "repairDetails": data["repairDetails"],
            "technicianId": data.get("technicianId") or None,
            "serviceDate": f"{service_date.isoformat()}T00:00:00.000Z" if service_date else None,
        }


# -----------------------------
# Reviews
# -----------------------------
RATING_CHOICES = [(i, f"{i} ★") for i in range(1, 6)]


class ReviewForm(forms.Form):
    technicianId = forms.ChoiceField(label="Technician", required=False, choices=())
    rating = forms.TypedChoiceField(
        label="Rating", required=False, coerce=int, empty_value=None,
        choices=RATING_CHOICES, widget=forms.RadioSelect,
    )
    comment = forms.CharField(
        label="Comment", required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 4}),
    )

    def __init__(self, *args, technicians=None, **kwargs):
        super().__init__(*args, **kwargs)
        # Editing never changes the technician
        if technicians is None:
            del self.fields["technicianId"]
        else:
            self.fields["technicianId"].choices = [("", "Select a technician")] + [
                (t.technicianId, f"{t.fullName} ({t.specialization})") for t in technicians
            ]
            self.fields["technicianId"].widget.attrs["class"] = "form-control"

    def clean_technicianId(self):
        value = self.cleaned_data.get("technicianId")
        if not value:
            raise forms.ValidationError("Please select a technician.")
        return value

    def clean_rating(self):
        value = self.cleaned_data.get("rating")
        if value is None or not 1 <= value <= 5:
            raise forms.ValidationError("Please provide a rating.")
        return value

    def clean_comment(self):
        value = self.cleaned_data.get("comment") or ""
        if not is_non_empty(value):
            raise forms.ValidationError("Please write a comment.")
        return value.strip()
