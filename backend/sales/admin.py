from django.contrib import admin
from core_backend.admin.mixins import TenantAdminMixin, TenantTabularInline
from .models import Sale, SaleItem


class SaleItemInline(TenantTabularInline):
    model = SaleItem
    extra = 0
    can_delete = False
    fields = ("product_name", "quantity", "unit_price", "discount", "total")
    readonly_fields = fields


@admin.register(Sale)
class SaleAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = (
        "sale_number",
        "store_location",
        "cashier",
        "grand_total",
        "currency",
        "payment_method",
        "status",
        "created_at",
    )
    list_filter = ("status", "payment_method", "fulfillment_mode", "store_location")
    search_fields = ("sale_number", "idempotency_key")
    readonly_fields = ("id", "sale_number", "idempotency_key", "created_at", "updated_at")
    list_select_related = ("store_location", "cashier")
    inlines = [SaleItemInline]

    def has_add_permission(self, request):
        return False
