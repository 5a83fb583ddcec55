from django.contrib import admin
from .models import StoreLocation
from core_backend.admin.mixins import TenantAdminMixin


@admin.register(StoreLocation)
class StoreLocationAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ('name', 'currency', 'tax_rate', 'low_stock_threshold', 'is_active')
    list_filter = ('is_active', 'currency')
    search_fields = ('name', 'email')
    fieldsets = (
        (None, {'fields': ('tenant', 'name', 'is_active')}),
        ('Contact', {'fields': ('phone', 'email')}),
        ('Sales', {'fields': ('currency', 'tax_rate', 'low_stock_threshold')}),
    )
