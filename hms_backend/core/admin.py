from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import AuditLog, User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ('id', 'username', 'full_name', 'role', 'is_active', 'last_login')
    list_filter = ('role', 'is_active', 'is_staff')
    search_fields = ('username', 'full_name')
    ordering = ('username',)

    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Clinic', {'fields': ('role', 'full_name')}),
    )
    add_fieldsets = DjangoUserAdmin.add_fieldsets + (
        ('Clinic', {'fields': ('role', 'full_name')}),
    )


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Audit entries are append-only (read-only admin)."""

    list_display = ('id', 'action_timestamp', 'user_name', 'user_role', 'action_type', 'subject')
    list_filter = ('action_type', 'user_role', 'action_timestamp')
    search_fields = ('user_name', 'action_type', 'subject', 'details')
    ordering = ('-action_timestamp', '-id')
    list_per_page = 100
    date_hierarchy = 'action_timestamp'
    readonly_fields = (
        'id',
        'user',
        'user_name',
        'user_role',
        'action_type',
        'subject',
        'details',
        'action_timestamp',
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
