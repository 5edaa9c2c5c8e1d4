"""Django admin configuration for accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from server.apps.accounts.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for User model with the display name."""

    list_display = [
        'username',
        'full_name',
        'email',
        'is_staff',
        'date_joined',
    ]

    search_fields = ['username', 'full_name', 'email']

    fieldsets = (
        *BaseUserAdmin.fieldsets,
        ('Profile', {'fields': ('full_name',)}),
    )

    add_fieldsets = (
        *BaseUserAdmin.add_fieldsets,
        ('Profile', {'fields': ('full_name',)}),
    )
