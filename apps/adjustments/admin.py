# ==========================================
# apps/adjustments/admin.py
# ==========================================

from django.contrib import admin, messages
from django.utils.html import format_html
from .models import Adjustment, AdjustmentReason, AdjustmentState
from .exceptions import InvalidStateTransitionError


@admin.register(AdjustmentReason)
class AdjustmentReasonAdmin(admin.ModelAdmin):
    """Admin interface for adjustment reasons."""

    list_display = ['name', 'code', 'active']
    list_filter = ['active']
    search_fields = ['name', 'code']


@admin.register(Adjustment)
class AdjustmentAdmin(admin.ModelAdmin):
    """
    Admin interface for adjustments.

    Amounts of open adjustments follow their source; closing locks them.
    """

    list_display = [
        'label',
        'order',
        'adjustable_content_type',
        'amount',
        'eligible',
        'state_badge',
        'created_at',
    ]
    list_filter = [
        'state',
        'eligible',
        'mandatory',
        'included',
        'adjustable_content_type',
        'source_content_type',
    ]
    search_fields = ['label', 'order__number']
    readonly_fields = [
        'adjustable_content_type',
        'adjustable_object_id',
        'source_content_type',
        'source_object_id',
        'created_at',
        'updated_at',
    ]
    actions = ['close_adjustments', 'open_adjustments']

    def state_badge(self, obj):
        """Display state as colored badge."""
        colors = {
            AdjustmentState.OPEN: ('#6B8E5E', 'white'),
            AdjustmentState.CLOSED: ('#A47449', 'white'),
        }
        bg, fg = colors.get(obj.state, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_state_display()
        )
    state_badge.short_description = 'State'

    @admin.action(description='Close selected adjustments')
    def close_adjustments(self, request, queryset):
        self._transition(request, queryset, 'close')

    @admin.action(description='Open selected adjustments')
    def open_adjustments(self, request, queryset):
        self._transition(request, queryset, 'open')

    def _transition(self, request, queryset, event):
        changed = 0
        for adjustment in queryset:
            try:
                getattr(adjustment, event)()
                changed += 1
            except InvalidStateTransitionError:
                continue
        self.message_user(request, f"{changed} adjustment(s) updated.", messages.SUCCESS)
