# accounts/forms.py
from django import forms

from utils.validators import is_valid_email, is_valid_phone


class LoginForm(forms.Form):
    email = forms.CharField(
        label="Email",
        max_length=254,
        widget=forms.EmailInput(attrs={
            "placeholder": "nama@email.com",
            "class": "form-control"
        })
    )
    password = forms.CharField(
        label="Password",
        widget=forms.PasswordInput(attrs={
            "placeholder": "Masukkan Password",
            "class": "form-control"
        })
    )

    def clean(self):
        cleaned_data = super().clean()
        email = cleaned_data.get("email")
        password = cleaned_data.get("password")

        if not email or not password:
            raise forms.ValidationError("⚠️ Harap isi email dan password")

        return cleaned_data


class RegisterForm(forms.Form):
    """Customer sign-up; the same rules back the admin technician form."""

    fullName = forms.CharField(
        label="Full Name", required=False,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "John Doe"}),
    )
    email = forms.CharField(
        label="Email", required=False,
        widget=forms.EmailInput(attrs={"class": "form-control", "placeholder": "nama@email.com"}),
    )
    phoneNumber = forms.CharField(
        label="Phone Number", required=False,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "08123456789"}),
    )
    password = forms.CharField(
        label="Password", required=False, strip=False,
        widget=forms.PasswordInput(attrs={"class": "form-control"}),
    )
    confirmPassword = forms.CharField(
        label="Confirm Password", required=False, strip=False,
        widget=forms.PasswordInput(attrs={"class": "form-control"}),
    )
    address = forms.CharField(
        label="Address", required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 3}),
    )

    def clean_fullName(self):
        value = self.cleaned_data.get("fullName", "").strip()
        if not value:
            raise forms.ValidationError("Full name is required")
        if len(value) < 2:
            raise forms.ValidationError("Full name must be at least 2 characters")
        return value

    def clean_email(self):
        value = self.cleaned_data.get("email", "").strip()
        if not value:
            raise forms.ValidationError("Email is required")
        if not is_valid_email(value):
            raise forms.ValidationError("Please enter a valid email address")
        return value

    def clean_phoneNumber(self):
        value = self.cleaned_data.get("phoneNumber", "").strip()
        if not value:
            raise forms.ValidationError("Phone number is required")
        if not is_valid_phone(value):
            raise forms.ValidationError("Please enter a valid phone number")
        return value

    def clean_password(self):
        value = self.cleaned_data.get("password", "")
        if not value:
            raise forms.ValidationError("Password is required")
        if len(value) < 6:
            raise forms.ValidationError("Password must be at least 6 characters")
        return value

    def clean_address(self):
        value = self.cleaned_data.get("address", "").strip()
        if not value:
            raise forms.ValidationError("Address is required")
        if len(value) < 10:
            raise forms.ValidationError("Please provide a complete address")
        return value

    def clean(self):
        cleaned_data = super().clean()
        password = cleaned_data.get("password")
        confirm = cleaned_data.get("confirmPassword")
        if not confirm:
            self.add_error("confirmPassword", "Please confirm the password")
        elif password and password != confirm:
            self.add_error("confirmPassword", "Passwords do not match")
        return cleaned_data

    def payload(self):
        data = self.cleaned_data
        return {
            "fullName": data["fullName"],
            "email": data["email"],
            "password": data["password"],
            "phoneNumber": data["phoneNumber"],
            "address": data["address"],
        }


class ProfileForm(forms.Form):
    fullName = forms.CharField(
        label="Full Name", required=False,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    phoneNumber = forms.CharField(
        label="Phone Number", required=False,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    address = forms.CharField(
        label="Address", required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 3}),
    )
    experience = forms.IntegerField(
        label="Years of Experience", required=False, min_value=0,
        error_messages={"min_value": "Experience must be a valid number", "invalid": "Experience must be a valid number"},
        widget=forms.NumberInput(attrs={"class": "form-control", "min": 0}),
    )

    def __init__(self, *args, role=None, **kwargs):
        super().__init__(*args, **kwargs)
        if role != "TECHNICIAN":
            del self.fields["experience"]

    def clean_fullName(self):
        value = self.cleaned_data.get("fullName", "").strip()
        if not value:
            raise forms.ValidationError("Full name is required")
        return value

    def clean_phoneNumber(self):
        value = self.cleaned_data.get("phoneNumber", "").strip()
        if value and not is_valid_phone(value):
            raise forms.ValidationError("Please enter a valid phone number")
        return value

    def payload(self):
        data = {k: v for k, v in self.cleaned_data.items() if v not in (None, "")}
        data["fullName"] = self.cleaned_data["fullName"]
        return data


class PasswordChangeForm(forms.Form):
    currentPassword = forms.CharField(
        label="Current Password", required=False, strip=False,
        widget=forms.PasswordInput(attrs={"class": "form-control"}),
    )
    newPassword = forms.CharField(
        label="New Password", required=False, strip=False,
        widget=forms.PasswordInput(attrs={"class": "form-control"}),
    )
    confirmPassword = forms.CharField(
        label="Confirm New Password", required=False, strip=False,
        widget=forms.PasswordInput(attrs={"class": "form-control"}),
    )

    def clean_currentPassword(self):
        value = self.cleaned_data.get("currentPassword")
        if not value:
            raise forms.ValidationError("Current password is required")
        return value

    def clean_newPassword(self):
        value = self.cleaned_data.get("newPassword")
        if not value:
            raise forms.ValidationError("New password is required")
        if len(value) < 8:
            raise forms.ValidationError("Password must be at least 8 characters")
        return value

    def clean(self):
        cleaned_data = super().clean()
        confirm = cleaned_data.get("confirmPassword")
        if not confirm:
            self.add_error("confirmPassword", "Please confirm your new password")
        elif cleaned_data.get("newPassword") and confirm != cleaned_data["newPassword"]:
            self.add_error("confirmPassword", "Passwords do not match")
        return cleaned_data
