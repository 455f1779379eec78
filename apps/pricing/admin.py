# ==========================================
# apps/pricing/admin.py
# ==========================================

from django.contrib import admin
from .models import TaxRate, Promotion, PromotionCode, PromotionAction


@admin.register(TaxRate)
class TaxRateAdmin(admin.ModelAdmin):
    """Admin interface for tax rates."""

    list_display = ['name', 'amount', 'included_in_price', 'show_rate_in_label']
    list_filter = ['included_in_price']
    search_fields = ['name']


class PromotionCodeInline(admin.TabularInline):
    """Inline admin for promotion codes."""
    model = PromotionCode
    extra = 1
    fields = ['value']


class PromotionActionInline(admin.TabularInline):
    """Inline admin for promotion actions."""
    model = PromotionAction
    extra = 1
    fields = ['action_type', 'calculator', 'preferred_amount']


@admin.register(Promotion)
class PromotionAdmin(admin.ModelAdmin):
    """Admin interface for promotions."""

    list_display = ['name', 'starts_at', 'expires_at', 'usage_limit', 'created_at']
    list_filter = ['starts_at', 'expires_at']
    search_fields = ['name', 'codes__value']
    inlines = [PromotionActionInline, PromotionCodeInline]
