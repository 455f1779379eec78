from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema
from .models import Order
from .serializers import (
    OrderSerializer,
    OrderListSerializer,
    ApplyPromotionInputSerializer,
    ApplyTaxesInputSerializer,
    CancelUnitsInputSerializer,
)
from .services import (
    recalculate_order,
    get_order_by_id,
    cancel_units as cancel_line_item_units,
    OrderNotFoundError,
    LineItemNotFoundError,
    InvalidCancellationError,
)
from apps.pricing.services import (
    apply_tax_rates,
    activate_promotion,
    PromotionNotFoundError,
    PromotionCodeNotFoundError,
    PromotionNotEligibleError,
)


class OrderPagination(PageNumberPagination):
    """Custom pagination for orders."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class OrderViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for orders and their pricing operations.

    list: Get all orders
    retrieve: Get an order with items and totals
    recalculate: Recompute every adjustment and total
    apply_taxes: Replace the tax adjustments
    apply_promotion: Apply a promotion by id or code
    cancel_units: Cancel units of a line item
    """

    queryset = Order.objects.prefetch_related('line_items', 'shipments')
    serializer_class = OrderSerializer
    permission_classes = [IsAdminUser]
    lookup_value_regex = r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'
    pagination_class = OrderPagination

    def get_serializer_class(self):
        if self.action == 'list':
            return OrderListSerializer
        return OrderSerializer

    def _order_response(self, order_id):
        order = get_order_by_id(order_id=order_id)
        return Response(OrderSerializer(order).data)

    @extend_schema(request=None, responses=OrderSerializer)
    @action(detail=True, methods=['post'])
    def recalculate(self, request, pk=None):
        """Recalculate all adjustments and totals."""
        try:
            recalculate_order(order_id=pk)
        except OrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return self._order_response(pk)

    @extend_schema(request=ApplyTaxesInputSerializer, responses=OrderSerializer)
    @action(detail=True, methods=['post'], url_path='apply-taxes')
    def apply_taxes(self, request, pk=None):
        """Replace the order's tax adjustments."""
        serializer = ApplyTaxesInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self.get_object()
        apply_tax_rates(order_id=order.id, rate_ids=serializer.validated_data.get('rates'))
        return self._order_response(order.id)

    @extend_schema(request=ApplyPromotionInputSerializer, responses=OrderSerializer)
    @action(detail=True, methods=['post'], url_path='apply-promotion')
    def apply_promotion(self, request, pk=None):
        """Apply a promotion to the order."""
        serializer = ApplyPromotionInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = self.get_object()
        try:
            activate_promotion(
                order_id=order.id,
                promotion_id=data.get('promotion'),
                code=data.get('code'),
            )
        except (PromotionNotFoundError, PromotionCodeNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except PromotionNotEligibleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._order_response(order.id)

    @extend_schema(request=CancelUnitsInputSerializer, responses=OrderSerializer)
    @action(detail=True, methods=['post'], url_path='cancel-units')
    def cancel_units(self, request, pk=None):
        """Cancel units of one of the order's line items."""
        serializer = CancelUnitsInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = self.get_object()
        if not order.line_items.filter(id=data['line_item']).exists():
            return Response(
                {'error': f"Line item {data['line_item']} not found on this order"},
                status=status.HTTP_404_NOT_FOUND
            )

        try:
            cancel_line_item_units(
                line_item_id=data['line_item'],
                quantity=data['quantity'],
                reason=data['reason'],
            )
        except LineItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidCancellationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._order_response(order.id)
