"""Input validation for account endpoints."""

from typing import Any, Final

from django import forms
from django.contrib.auth import get_user_model, password_validation

from server.apps.accounts.logic.account_operations import get_user_by_username

User = get_user_model()

_USERNAME_MAX_LENGTH: Final = 150
_FULL_NAME_MAX_LENGTH: Final = 255


class RegistrationForm(forms.Form):
    """Payload of account registration."""

    username = forms.CharField(max_length=_USERNAME_MAX_LENGTH)
    password = forms.CharField(strip=False)
    full_name = forms.CharField(
        max_length=_FULL_NAME_MAX_LENGTH,
        required=False,
    )

    def clean_username(self) -> str:
        username = self.cleaned_data['username']
        if get_user_by_username(username) is not None:
            raise forms.ValidationError('Username already exists')
        return username

    def clean(self) -> dict[str, Any]:
        cleaned_data = super().clean() or {}
        password = cleaned_data.get('password')
        if password:
            candidate = User(
                username=cleaned_data.get('username', ''),
                full_name=cleaned_data.get('full_name', ''),
            )
            try:
                password_validation.validate_password(password, candidate)
            except forms.ValidationError as error:
                self.add_error('password', error)
        return cleaned_data


class LoginForm(forms.Form):
    """Payload of login."""

    username = forms.CharField(max_length=_USERNAME_MAX_LENGTH)
    password = forms.CharField(strip=False)
