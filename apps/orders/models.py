# ==========================================
# apps/orders/models.py
# ==========================================

from django.conf import settings
from django.contrib.contenttypes.fields import GenericRelation
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import secrets
import string
import uuid

from apps.pricing.money import round_money


def default_currency():
    return settings.STORE_CURRENCY


class AdjustableMixin(models.Model):
    """
    Columns shared by everything an adjustment can be attached to.

    The totals are denormalized from the adjustments and rewritten by
    ItemAdjustments whenever those adjustments change.
    """

    promo_total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    included_tax_total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    additional_tax_total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    adjustment_total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    adjustments = GenericRelation(
        'adjustments.Adjustment',
        content_type_field='adjustable_content_type',
        object_id_field='adjustable_object_id',
    )

    class Meta:
        abstract = True

    @property
    def discounted_amount(self):
        return self.amount + self.promo_total


class Order(AdjustableMixin):
    """Customer order; owns every adjustment made against it."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    number = models.CharField(max_length=32, unique=True, db_index=True, editable=False)
    email = models.EmailField(blank=True)
    currency = models.CharField(max_length=3, default=default_currency)

    item_total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    ship_total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        indexes = [
            models.Index(fields=['created_at'], name='orders_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.number

    def save(self, *args, **kwargs):
        if not self.number:
            self.number = self._generate_number()
        super().save(*args, **kwargs)

    @staticmethod
    def _generate_number():
        return 'R' + ''.join(secrets.choice(string.digits) for _ in range(9))

    @property
    def amount(self):
        return self.item_total


class LineItem(AdjustableMixin):
    """A purchased variant and its quantity."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='line_items')
    variant_name = models.CharField(max_length=200)
    sku = models.CharField(max_length=64, blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))])
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'order_line_items'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.variant_name} x{self.quantity}"

    @property
    def amount(self):
        return self.price * self.quantity

    @property
    def currency(self):
        return self.order.currency


class Shipment(AdjustableMixin):
    """A package shipped to the customer; its cost is the shipping charge."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='shipments')
    number = models.CharField(max_length=32, blank=True)
    cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'order_shipments'
        ordering = ['created_at']

    def __str__(self):
        return self.number or f"Shipment for {self.order.number}"

    @property
    def amount(self):
        return self.cost

    @property
    def currency(self):
        return self.order.currency


class CancelReason(models.TextChoices):
    CANCEL = 'Cancel', 'Cancel'
    SHORT_SHIP = 'Short Ship', 'Short Ship'


class UnitCancel(models.Model):
    """Cancellation of some units of a line item; source of cancellation adjustments."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    line_item = models.ForeignKey(LineItem, on_delete=models.CASCADE, related_name='unit_cancels')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    reason = models.CharField(max_length=32, choices=CancelReason.choices, default=CancelReason.CANCEL)
    created_at = models.DateTimeField(auto_now_add=True)

    adjustments = GenericRelation(
        'adjustments.Adjustment',
        content_type_field='source_content_type',
        object_id_field='source_object_id',
    )

    class Meta:
        db_table = 'order_unit_cancels'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.reason}: {self.quantity} of {self.line_item}"

    def compute_amount(self, line_item):
        """Credit for the cancelled share of the line item."""
        share = line_item.amount * self.quantity / line_item.quantity
        return -round_money(share)
