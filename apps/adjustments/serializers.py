from rest_framework import serializers
from .models import Adjustment, AdjustmentReason, AdjustmentState
from apps.orders.models import LineItem, Shipment


# =============================================================================
# Input Serializers
# =============================================================================

class AdjustmentFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for adjustment filtering.

    Query Parameters:
        order (UUID): Order whose adjustments to list (required)
        state (str): 'open' or 'closed'
        kind (str): tax, promotion, cancellation, shipping or price
    """

    order = serializers.UUIDField()
    state = serializers.ChoiceField(choices=AdjustmentState.choices, required=False)
    kind = serializers.ChoiceField(
        choices=['tax', 'promotion', 'cancellation', 'shipping', 'price'],
        required=False
    )


class AdjustmentCreateSerializer(serializers.Serializer):
    """
    Validate input for a manual adjustment.

    The adjustment goes on the order unless a line item or shipment of that
    order is given.
    """

    order = serializers.UUIDField()
    label = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    line_item = serializers.UUIDField(required=False)
    shipment = serializers.UUIDField(required=False)
    mandatory = serializers.BooleanField(required=False, default=False)
    adjustment_reason = serializers.PrimaryKeyRelatedField(
        queryset=AdjustmentReason.objects.filter(active=True),
        required=False,
        allow_null=True
    )

    def validate(self, attrs):
        """Resolve the adjustable and check it belongs to the order."""
        if attrs.get('line_item') and attrs.get('shipment'):
            raise serializers.ValidationError('Give either line_item or shipment, not both')

        adjustable = None
        if attrs.get('line_item'):
            adjustable = LineItem.objects.filter(
                id=attrs.pop('line_item'), order_id=attrs['order']
            ).first()
            if adjustable is None:
                raise serializers.ValidationError({'line_item': 'Line item not found on this order'})
        elif attrs.get('shipment'):
            adjustable = Shipment.objects.filter(
                id=attrs.pop('shipment'), order_id=attrs['order']
            ).first()
            if adjustable is None:
                raise serializers.ValidationError({'shipment': 'Shipment not found on this order'})

        attrs['adjustable'] = adjustable
        return attrs


# =============================================================================
# Output Serializers
# =============================================================================

class AdjustmentReasonSerializer(serializers.ModelSerializer):
    """Serializer for adjustment reasons."""

    class Meta:
        model = AdjustmentReason
        fields = ['id', 'name', 'code', 'active']
        read_only_fields = ['id']


class AdjustmentSerializer(serializers.ModelSerializer):
    """Main serializer for adjustments."""

    adjustable_type = serializers.CharField(source='adjustable_content_type.model', read_only=True)
    source_type = serializers.CharField(source='source_content_type.model', read_only=True, default=None)
    promotion_code = serializers.CharField(source='promotion_code.value', read_only=True, default=None)
    currency = serializers.CharField(read_only=True)
    display_amount = serializers.CharField(read_only=True)
    adjustment_reason = AdjustmentReasonSerializer(read_only=True)

    class Meta:
        model = Adjustment
        fields = [
            'id',
            'order',
            'adjustable_type',
            'adjustable_object_id',
            'source_type',
            'source_object_id',
            'label',
            'amount',
            'display_amount',
            'currency',
            'eligible',
            'mandatory',
            'included',
            'state',
            'promotion_code',
            'adjustment_reason',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
