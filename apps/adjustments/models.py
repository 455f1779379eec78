# ==========================================
# apps/adjustments/models.py
# ==========================================

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Sum
from django.utils import timezone
from decimal import Decimal
import uuid
import warnings

from apps.orders.models import LineItem, Shipment, UnitCancel
from apps.pricing.models import PromotionAction, TaxRate
from apps.pricing.money import display_money
from .exceptions import InvalidStateTransitionError


class AdjustmentState(models.TextChoices):
    OPEN = 'open', 'Open'
    CLOSED = 'closed', 'Closed'


def _content_type(model):
    return ContentType.objects.get_for_model(model)


class AdjustmentQuerySet(models.QuerySet):
    """Named filters over adjustments."""

    def open(self):
        return self.filter(state=AdjustmentState.OPEN)

    def closed(self):
        return self.filter(state=AdjustmentState.CLOSED)

    def cancellation(self):
        return self.filter(source_content_type=_content_type(UnitCancel))

    def tax(self):
        return self.filter(source_content_type=_content_type(TaxRate))

    def non_tax(self):
        # exclude() keeps rows without a source
        return self.exclude(source_content_type=_content_type(TaxRate))

    def price(self):
        return self.filter(adjustable_content_type=_content_type(LineItem))

    def shipping(self):
        return self.filter(adjustable_content_type=_content_type(Shipment))

    def optional(self):
        return self.filter(mandatory=False)

    def eligible(self):
        return self.filter(eligible=True)

    def charge(self):
        return self.filter(amount__gte=0)

    def credit(self):
        return self.filter(amount__lt=0)

    def nonzero(self):
        return self.exclude(amount=0)

    def promotion(self):
        return self.filter(source_content_type=_content_type(PromotionAction))

    def non_promotion(self):
        return self.exclude(source_content_type=_content_type(PromotionAction))

    def is_included(self):
        return self.filter(included=True)

    def additional(self):
        return self.filter(included=False)

    def total_amount(self):
        return self.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')


class AdjustmentReason(models.Model):
    """Why an adjustment was entered by hand."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    code = models.CharField(max_length=50, unique=True)
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'adjustment_reasons'
        ordering = ['name']

    def __str__(self):
        return self.name


class Adjustment(models.Model):
    """
    A change to the total of an order, line item or shipment.

    The amount is signed: charges are positive, credits negative. Open
    adjustments are recalculated from their source; closed ones keep
    their amount until reopened.

    mandatory: the charge stays on the order even when it is zero, so that
        e.g. free shipping or zero tax is shown explicitly.
    eligible: only eligible adjustments count towards the adjustable's
        total. An ineligible adjustment is kept so it can be reinstated.
    included: the amount is already part of the item price (included tax).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey('orders.Order', on_delete=models.CASCADE, related_name='all_adjustments')

    adjustable_content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE, related_name='+')
    adjustable_object_id = models.UUIDField()
    adjustable = GenericForeignKey('adjustable_content_type', 'adjustable_object_id')

    source_content_type = models.ForeignKey(
        ContentType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    source_object_id = models.UUIDField(null=True, blank=True)
    source = GenericForeignKey('source_content_type', 'source_object_id')

    promotion_code = models.ForeignKey(
        'pricing.PromotionCode',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='adjustments'
    )
    adjustment_reason = models.ForeignKey(
        AdjustmentReason,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='adjustments'
    )

    label = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    eligible = models.BooleanField(default=True)
    mandatory = models.BooleanField(default=False)
    included = models.BooleanField(default=False)
    state = models.CharField(max_length=10, choices=AdjustmentState.choices, default=AdjustmentState.OPEN)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AdjustmentQuerySet.as_manager()

    class Meta:
        db_table = 'adjustments'
        indexes = [
            models.Index(fields=['adjustable_content_type', 'adjustable_object_id'], name='adjustments_adjustable_idx'),
            models.Index(fields=['source_content_type', 'source_object_id'], name='adjustments_source_idx'),
            models.Index(fields=['order', 'state'], name='adjustments_order_state_idx'),
            models.Index(fields=['eligible'], name='adjustments_eligible_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return f"{self.label}: {self.display_amount}"

    # -- validation ---------------------------------------------------------

    def clean(self):
        errors = {}

        if self.adjustable_content_type_id is None or self.adjustable_object_id is None:
            errors['adjustable'] = 'This field cannot be blank.'

        if self.promotion_code_id is None and self._requires_promotion_code():
            errors['promotion_code'] = 'This field cannot be blank.'

        if errors:
            raise ValidationError(errors)

    def _requires_promotion_code(self):
        return self.is_promotion and self.source is not None and self.source.promotion.codes.exists()

    # -- persistence hooks --------------------------------------------------

    def save(self, *args, **kwargs):
        is_new = self._state.adding
        super().save(*args, **kwargs)
        self._touch_adjustable()
        if is_new:
            self._update_adjustable_adjustment_total()

    def delete(self, *args, **kwargs):
        result = super().delete(*args, **kwargs)
        self._touch_adjustable()
        self._update_adjustable_adjustment_total()
        return result

    def _touch_adjustable(self):
        adjustable = self.adjustable
        if adjustable is None:
            return
        now = timezone.now()
        type(adjustable).objects.filter(pk=adjustable.pk).update(updated_at=now)
        adjustable.updated_at = now

    def _update_adjustable_adjustment_total(self):
        from .services.item_adjustments import ItemAdjustments

        adjustable = self.adjustable
        if adjustable is not None:
            ItemAdjustments(adjustable).update()

    # -- state machine ------------------------------------------------------

    @property
    def is_closed(self):
        return self.state == AdjustmentState.CLOSED

    @property
    def is_open(self):
        return self.state == AdjustmentState.OPEN

    def close(self):
        if not self.is_open:
            raise InvalidStateTransitionError(f"Cannot close a {self.state} adjustment.")
        self.state = AdjustmentState.CLOSED
        self.save(update_fields=['state', 'updated_at'])

    def open(self):
        if not self.is_closed:
            raise InvalidStateTransitionError(f"Cannot open an {self.state} adjustment.")
        self.state = AdjustmentState.OPEN
        self.save(update_fields=['state', 'updated_at'])

    # -- source type --------------------------------------------------------

    def _source_is(self, model):
        return self.source_content_type_id is not None and self.source_content_type_id == _content_type(model).id

    @property
    def is_promotion(self):
        return self._source_is(PromotionAction)

    @property
    def is_tax(self):
        return self._source_is(TaxRate)

    @property
    def is_cancellation(self):
        return self._source_is(UnitCancel)

    # -- money --------------------------------------------------------------

    @property
    def currency(self):
        adjustable = self.adjustable
        return adjustable.currency if adjustable is not None else settings.STORE_CURRENCY

    @property
    def display_amount(self):
        return display_money(self.amount, self.currency)

    # -- recalculation ------------------------------------------------------

    def recalculate(self, target=None):
        """
        Recalculate and persist the amount from the adjustment's source.

        Closed adjustments and adjustments without a source (entered by hand)
        are left untouched. Promotion adjustments also get their eligibility
        refreshed. Changed values are written with a plain UPDATE: no
        validation, no touch.

        Args:
            target: Deprecated. When given, the amount is computed for it;
                eligibility is still checked against the adjustable.

        Returns:
            The adjustment's amount after recalculation
        """
        if target is not None:
            warnings.warn(
                "Passing a target to Adjustment.recalculate() is deprecated. "
                "The adjustment uses its adjustable.",
                DeprecationWarning,
                stacklevel=2,
            )

        if self.is_closed:
            return self.amount

        source = self.source
        if source is None:
            return self.amount

        amount = source.compute_amount(target or self.adjustable)
        eligible = self.eligible
        if self.is_promotion:
            eligible = source.promotion.is_eligible(self.adjustable, promotion_code=self.promotion_code)

        if amount != self.amount or eligible != self.eligible:
            self.amount = amount
            self.eligible = eligible
            self.updated_at = timezone.now()
            Adjustment.objects.filter(pk=self.pk).update(
                amount=self.amount,
                eligible=self.eligible,
                updated_at=self.updated_at,
            )
        return self.amount
