# ==========================================
# apps/pricing/models.py
# ==========================================

from django.contrib.contenttypes.fields import GenericRelation
from django.contrib.contenttypes.models import ContentType
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from decimal import Decimal
import uuid

from .money import round_money


class TaxRate(models.Model):
    """Tax charged on line items and shipments."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    amount = models.DecimalField(max_digits=8, decimal_places=5, validators=[MinValueValidator(Decimal('0'))])
    included_in_price = models.BooleanField(default=False)
    show_rate_in_label = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    adjustments = GenericRelation(
        'adjustments.Adjustment',
        content_type_field='source_content_type',
        object_id_field='source_object_id',
    )

    class Meta:
        db_table = 'tax_rates'
        ordering = ['name']

    def __str__(self):
        return self.adjustment_label()

    def compute_amount(self, item):
        """
        Tax owed on an item's discounted amount.

        Included taxes are carved out of the price; additional taxes are
        charged on top of it.
        """
        base = item.discounted_amount
        if self.included_in_price:
            return round_money(base - base / (1 + self.amount))
        return round_money(base * self.amount)

    def adjust(self, order):
        """
        Create this rate's tax adjustment on every line item and shipment.

        Items that already carry a closed adjustment from this rate keep it
        and get no new one.

        Returns:
            List of created adjustments
        """
        from apps.adjustments.models import Adjustment

        items = list(order.line_items.all()) + list(order.shipments.all())
        created = []
        for item in items:
            if item.adjustments.tax().closed().filter(source_object_id=self.id).exists():
                continue
            created.append(Adjustment.objects.create(
                order=order,
                adjustable=item,
                source=self,
                label=self.adjustment_label(),
                amount=self.compute_amount(item),
                included=self.included_in_price,
            ))
        return created

    def adjustment_label(self):
        label = self.name
        if self.show_rate_in_label:
            percent = format((self.amount * 100).normalize(), 'f')
            label = f"{label} {percent}%"
        if self.included_in_price:
            label = f"{label} (Included in Price)"
        return label


class Promotion(models.Model):
    """Discount campaign; its actions create the promotion adjustments."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    starts_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    minimum_item_total = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    usage_limit = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'promotions'
        indexes = [
            models.Index(fields=['starts_at', 'expires_at'], name='promotions_window_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def is_active(self, at=None):
        at = at or timezone.now()
        if self.starts_at and self.starts_at > at:
            return False
        if self.expires_at and self.expires_at < at:
            return False
        return True

    def usage_count(self, excluded_order=None):
        """Number of orders currently receiving an eligible discount from this promotion."""
        from apps.adjustments.models import Adjustment

        queryset = Adjustment.objects.filter(
            source_content_type=ContentType.objects.get_for_model(PromotionAction),
            source_object_id__in=self.actions.values('id'),
            eligible=True,
        )
        if excluded_order is not None:
            queryset = queryset.exclude(order=excluded_order)
        return queryset.values('order').distinct().count()

    def is_eligible(self, adjustable, promotion_code=None):
        """Whether the promotion may discount the given order, line item or shipment."""
        from apps.orders.models import Order

        if not self.is_active():
            return False

        if self.codes.exists():
            if promotion_code is None or promotion_code.promotion_id != self.id:
                return False

        order = adjustable if isinstance(adjustable, Order) else adjustable.order

        if self.usage_limit is not None and self.usage_count(excluded_order=order) >= self.usage_limit:
            return False

        if self.minimum_item_total is not None and order.item_total < self.minimum_item_total:
            return False

        return True

    def activate(self, order, promotion_code=None):
        """
        Apply every action of the promotion to the order.

        Returns:
            True if at least one action created an adjustment
        """
        if not self.is_eligible(order, promotion_code=promotion_code):
            return False

        results = [
            action.perform(order, promotion_code=promotion_code)
            for action in self.actions.all()
        ]
        return any(results)


class PromotionCode(models.Model):
    """Coupon code that unlocks a promotion."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    promotion = models.ForeignKey(Promotion, on_delete=models.CASCADE, related_name='codes')
    value = models.CharField(max_length=64, unique=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'promotion_codes'
        ordering = ['value']

    def __str__(self):
        return self.value

    def save(self, *args, **kwargs):
        self.value = self.value.strip().lower()
        super().save(*args, **kwargs)


class ActionType(models.TextChoices):
    ORDER_ADJUSTMENT = 'order_adjustment', 'Order Adjustment'
    LINE_ITEM_ADJUSTMENT = 'line_item_adjustment', 'Line Item Adjustment'


class Calculator(models.TextChoices):
    FLAT_RATE = 'flat_rate', 'Flat Rate'
    PERCENT = 'percent', 'Percent'


class PromotionAction(models.Model):
    """Discount rule of a promotion; the source of promotion adjustments."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    promotion = models.ForeignKey(Promotion, on_delete=models.CASCADE, related_name='actions')
    action_type = models.CharField(max_length=32, choices=ActionType.choices, default=ActionType.ORDER_ADJUSTMENT)
    calculator = models.CharField(max_length=32, choices=Calculator.choices, default=Calculator.FLAT_RATE)
    preferred_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    created_at = models.DateTimeField(auto_now_add=True)

    adjustments = GenericRelation(
        'adjustments.Adjustment',
        content_type_field='source_content_type',
        object_id_field='source_object_id',
    )

    class Meta:
        db_table = 'promotion_actions'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.promotion.name}: {self.get_calculator_display()} {self.preferred_amount}"

    def compute_amount(self, adjustable):
        """Discount for the adjustable, as a credit never larger than its amount."""
        base = adjustable.amount
        if self.calculator == Calculator.PERCENT:
            computed = round_money(base * self.preferred_amount / 100)
        else:
            computed = round_money(self.preferred_amount)
        return -min(computed, base)

    def adjustment_label(self):
        return f"Promotion ({self.promotion.name})"

    def perform(self, order, promotion_code=None):
        """
        Create this action's adjustments on the order or on its line items.

        Targets already discounted by this action, and targets whose discount
        would be zero, are skipped.

        Returns:
            True if any adjustment was created
        """
        from apps.adjustments.models import Adjustment

        if self.action_type == ActionType.ORDER_ADJUSTMENT:
            targets = [order]
        else:
            targets = list(order.line_items.all())

        source_type = ContentType.objects.get_for_model(PromotionAction)
        created = False
        for target in targets:
            already_applied = target.adjustments.filter(
                source_content_type=source_type,
                source_object_id=self.id,
            ).exists()
            if already_applied:
                continue

            amount = self.compute_amount(target)
            if amount == 0:
                continue

            Adjustment.objects.create(
                order=order,
                adjustable=target,
                source=self,
                label=self.adjustment_label(),
                amount=amount,
                promotion_code=promotion_code,
            )
            created = True
        return created
