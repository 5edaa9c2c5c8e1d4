"""Django admin configuration for files app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.files.infrastructure.metadata import format_bytes
from server.apps.files.models import File, Folder, UserQuota


@admin.register(Folder)
class FolderAdmin(admin.ModelAdmin[Folder]):
    """Admin interface for Folder model."""

    list_display = [
        'name',
        'user',
        'parent',
        'created_at',
    ]

    list_filter = ['user']

    search_fields = ['name']

    readonly_fields = ['created_at', 'updated_at']

    raw_id_fields = ['parent']

    def get_queryset(self, request: HttpRequest) -> QuerySet[Folder]:
        """Optimize queryset with select_related."""
        return super().get_queryset(request).select_related('user', 'parent')


@admin.register(File)
class FileAdmin(admin.ModelAdmin[File]):
    """Admin interface for File model.

    Blob metadata is read-only: files change only through uploads so
    quotas stay in sync.
    """

    list_display = [
        'name',
        'user',
        'folder',
        'size_display',
        'mime_type',
        'is_public',
        'created_at',
    ]

    list_filter = [
        'mime_type',
        'is_public',
        'created_at',
        'user',
    ]

    search_fields = [
        'name',
        'file',  # Searches the storage path
        'checksum_sha256',
    ]

    readonly_fields = [
        'file',
        'file_type',
        'size_bytes',
        'mime_type',
        'checksum_sha256',
        'created_at',
        'updated_at',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('name', 'user', 'folder', 'is_public'),
        }),
        ('Metadata', {
            'fields': (
                'file',
                'file_type',
                'size_bytes',
                'mime_type',
                'checksum_sha256',
            ),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
        }),
    )

    def size_display(self, obj: File) -> str:
        """Display file size in human-readable format.

        Args:
            obj: File instance.

        Returns:
            Formatted size string (e.g., '1.5 MB', '234 KB').
        """
        return format_bytes(obj.size_bytes, decimals=1)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Files are created by uploads only."""
        return False

    def has_delete_permission(
        self,
        request: HttpRequest,
        obj: File | None = None,
    ) -> bool:
        """Files are deleted through the API so quota and blob follow."""
        return False

    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related."""
        return super().get_queryset(request).select_related('user', 'folder')


@admin.register(UserQuota)
class UserQuotaAdmin(admin.ModelAdmin[UserQuota]):
    """Admin interface for UserQuota model."""

    list_display = [
        'user',
        'used_display',
        'quota_display',
        'usage_percent',
    ]

    search_fields = ['user__username']

    readonly_fields = ['used_bytes']

    def used_display(self, obj: UserQuota) -> str:
        """Display used storage in human-readable format."""
        return format_bytes(obj.used_bytes, decimals=1)
    used_display.short_description = 'Used'  # type: ignore[attr-defined]

    def quota_display(self, obj: UserQuota) -> str:
        """Display storage limit in human-readable format."""
        return format_bytes(obj.quota_bytes, decimals=1)
    quota_display.short_description = 'Quota'  # type: ignore[attr-defined]

    def usage_percent(self, obj: UserQuota) -> str:
        """Display how much of the quota is used."""
        if not obj.quota_bytes:
            return '-'
        return f'{obj.used_bytes / obj.quota_bytes:.0%}'
    usage_percent.short_description = 'Usage'  # type: ignore[attr-defined]
