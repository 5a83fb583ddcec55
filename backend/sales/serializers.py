from rest_framework import serializers
from core_backend.base import BaseModelSerializer
from payments import money
from .models import Sale, SaleItem


class CurrencyAmountsMixin:
    """
    Renders stored amounts at the precision of the sale's currency.

    Amounts are stored with three decimals so fils and millimes survive;
    a USD sale still reads "10.50", a KWD sale "1.225".
    """

    money_fields = ()

    def get_currency(self, instance):
        return instance.currency

    def to_representation(self, instance):
        data = super().to_representation(instance)
        currency = self.get_currency(instance)
        for name in self.money_fields:
            if data.get(name) is not None:
                data[name] = str(money.quantize(currency, data[name]))
        return data


class SaleItemSerializer(CurrencyAmountsMixin, BaseModelSerializer):
    money_fields = ("unit_price", "discount", "total")

    class Meta:
        model = SaleItem
        fields = [
            "id",
            "product",
            "variant",
            "product_name",
            "quantity",
            "unit_price",
            "discount",
            "total",
        ]

    def get_currency(self, instance):
        return instance.sale.currency


class SaleListSerializer(CurrencyAmountsMixin, BaseModelSerializer):
    money_fields = ("grand_total",)

    cashier_name = serializers.SerializerMethodField()
    customer_name = serializers.CharField(source="customer.name", read_only=True, default=None)
    store_location_name = serializers.CharField(source="store_location.name", read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "sale_number",
            "status",
            "payment_method",
            "payment_status",
            "fulfillment_mode",
            "currency",
            "grand_total",
            "item_count",
            "store_location",
            "store_location_name",
            "cashier_name",
            "customer_name",
            "created_at",
        ]
        select_related_fields = ["store_location", "cashier", "customer"]

    def get_cashier_name(self, obj):
        if obj.cashier is None:
            return None
        return obj.cashier.get_full_name() or obj.cashier.username


class SaleSerializer(SaleListSerializer):
    money_fields = ("subtotal", "discount_total", "tax_total", "grand_total")

    items = SaleItemSerializer(many=True, read_only=True)

    class Meta(SaleListSerializer.Meta):
        fields = SaleListSerializer.Meta.fields + [
            "idempotency_key",
            "subtotal",
            "discount_total",
            "tax_total",
            "notes",
            "customer",
            "cashier",
            "updated_at",
            "items",
        ]
        prefetch_related_fields = ["items"]
