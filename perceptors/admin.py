"""
Django admin registrations for the perceptor models.

Superusers can inspect perceptors, managers, reference catalogs and the
transition log under ``/admin/``.  The transition log is read-only.
"""

from django.contrib import admin

from .models import (
    Catalog,
    CatalogEntry,
    Manager,
    Perceptor,
    PerceptorTransition,
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'is_staff', 'is_superuser')
    list_filter = ('role',)
    search_fields = ('username', 'first_name', 'last_name')


@admin.register(Manager)
class ManagerAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'user', 'active')
    list_filter = ('active',)
    search_fields = ('code', 'name', 'user__username')


class CatalogEntryInline(admin.TabularInline):
    model = CatalogEntry
    extra = 0


@admin.register(Catalog)
class CatalogAdmin(admin.ModelAdmin):
    list_display = ('key', 'description')
    search_fields = ('key',)
    inlines = [CatalogEntryInline]


@admin.register(Perceptor)
class PerceptorAdmin(admin.ModelAdmin):
    list_display = ('category', 'code', 'name', 'status', 'manager', 'priority', 'specialty', 'version')
    list_filter = ('category', 'status', 'priority')
    search_fields = ('code', 'name', 'manager__code')
    # status only changes through the lifecycle service; codes come from the sequence
    readonly_fields = ('category', 'code', 'status', 'version', 'created_at', 'updated_at')

    def has_add_permission(self, request):
        return False


@admin.register(PerceptorTransition)
class PerceptorTransitionAdmin(admin.ModelAdmin):
    list_display = ('perceptor', 'action', 'from_status', 'to_status', 'operator', 'timestamp')
    list_filter = ('action', 'to_status')
    search_fields = ('perceptor__code', 'operator')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
