from django.contrib import admin
from core_backend.admin.mixins import TenantAdminMixin, TenantTabularInline
from .models import Product, ProductVariant


class ProductVariantInline(TenantTabularInline):
    model = ProductVariant
    extra = 1
    fields = ('name', 'sku', 'price', 'is_active')


@admin.register(Product)
class ProductAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ('name', 'sku', 'price', 'track_inventory', 'is_active')
    list_filter = ('track_inventory', 'is_active')
    search_fields = ('name', 'sku')
    inlines = [ProductVariantInline]
