from django.contrib import admin
from core_backend.admin.mixins import TenantAdminMixin
from .models import InventoryStock, StockHistoryEntry


@admin.register(InventoryStock)
class InventoryStockAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("product", "store_location", "quantity", "low_stock_threshold", "updated_at")
    list_filter = ("store_location",)
    search_fields = ("product__name", "product__sku")
    list_select_related = ("product", "store_location")


@admin.register(StockHistoryEntry)
class StockHistoryEntryAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("timestamp", "operation_type", "product", "store_location", "quantity_change", "new_quantity", "reference_id")
    list_filter = ("operation_type", "store_location")
    search_fields = ("product__name", "reference_id")
    readonly_fields = [f for f in ("tenant", "product", "store_location", "user", "operation_type",
                                   "quantity_change", "new_quantity", "reference_id", "timestamp")]

    def has_add_permission(self, request):
        return False
