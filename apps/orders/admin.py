# ==========================================
# apps/orders/admin.py
# ==========================================

from django.contrib import admin
from .models import Order, LineItem, Shipment, UnitCancel


class LineItemInline(admin.TabularInline):
    """Inline admin for line items."""
    model = LineItem
    extra = 0
    fields = ['variant_name', 'sku', 'price', 'quantity', 'promo_total', 'adjustment_total']
    readonly_fields = ['promo_total', 'adjustment_total']


class ShipmentInline(admin.TabularInline):
    """Inline admin for shipments."""
    model = Shipment
    extra = 0
    fields = ['number', 'cost', 'adjustment_total']
    readonly_fields = ['adjustment_total']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin interface for orders."""

    list_display = [
        'number',
        'email',
        'currency',
        'item_total',
        'adjustment_total',
        'total',
        'created_at',
    ]
    list_filter = ['currency', 'created_at']
    search_fields = ['number', 'email']
    readonly_fields = [
        'number',
        'item_total',
        'ship_total',
        'promo_total',
        'included_tax_total',
        'additional_tax_total',
        'adjustment_total',
        'total',
        'created_at',
        'updated_at',
    ]
    inlines = [LineItemInline, ShipmentInline]


@admin.register(UnitCancel)
class UnitCancelAdmin(admin.ModelAdmin):
    """Admin interface for unit cancellations."""

    list_display = ['line_item', 'quantity', 'reason', 'created_at']
    list_filter = ['reason']
