from rest_framework import serializers
from .models import Order, LineItem, Shipment, CancelReason


# =============================================================================
# Input Serializers
# =============================================================================

class ApplyPromotionInputSerializer(serializers.Serializer):
    """
    Validate input for applying a promotion.

    Fields:
        promotion (UUID): Promotion to apply
        code (str): Coupon code; used when no promotion is given
    """

    promotion = serializers.UUIDField(required=False)
    code = serializers.CharField(max_length=64, required=False)

    def validate(self, attrs):
        if not attrs.get('promotion') and not attrs.get('code'):
            raise serializers.ValidationError('Either promotion or code is required')
        return attrs


class ApplyTaxesInputSerializer(serializers.Serializer):
    """Rates to apply; all rates when omitted."""

    rates = serializers.ListField(child=serializers.UUIDField(), required=False)


class CancelUnitsInputSerializer(serializers.Serializer):
    """Validate input for cancelling line item units."""

    line_item = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    reason = serializers.ChoiceField(choices=CancelReason.choices, required=False, default=CancelReason.CANCEL)


# =============================================================================
# Output Serializers
# =============================================================================

class LineItemSerializer(serializers.ModelSerializer):

    class Meta:
        model = LineItem
        fields = [
            'id',
            'variant_name',
            'sku',
            'price',
            'quantity',
            'amount',
            'promo_total',
            'included_tax_total',
            'additional_tax_total',
            'adjustment_total',
        ]
        read_only_fields = fields


class ShipmentSerializer(serializers.ModelSerializer):

    class Meta:
        model = Shipment
        fields = [
            'id',
            'number',
            'cost',
            'promo_total',
            'included_tax_total',
            'additional_tax_total',
            'adjustment_total',
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Order with its items and totals."""

    line_items = LineItemSerializer(many=True, read_only=True)
    shipments = ShipmentSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id',
            'number',
            'email',
            'currency',
            'item_total',
            'ship_total',
            'promo_total',
            'included_tax_total',
            'additional_tax_total',
            'adjustment_total',
            'total',
            'line_items',
            'shipments',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    class Meta:
        model = Order
        fields = ['id', 'number', 'email', 'currency', 'total', 'created_at']
        read_only_fields = fields
