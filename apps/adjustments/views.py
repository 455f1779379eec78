from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from .models import Adjustment
from .serializers import (
    AdjustmentSerializer,
    AdjustmentCreateSerializer,
    AdjustmentFilterSerializer,
)
from .services import (
    create_adjustment,
    list_order_adjustments,
    close_adjustment,
    open_adjustment,
    recalculate_adjustment,
    delete_adjustment,
)
from .exceptions import (
    AdjustmentValidationError,
    OrderNotFoundError,
)


class AdjustmentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for order adjustments.

    list: Adjustments of one order (?order=<id>, optional state and kind)
    create: Add a manual adjustment
    retrieve: Get a specific adjustment
    destroy: Remove an adjustment
    close/open: Lock or unlock the amount
    recalculate: Recompute the amount from the source
    """

    queryset = Adjustment.objects.select_related(
        'adjustable_content_type',
        'source_content_type',
        'promotion_code',
        'adjustment_reason',
    )
    serializer_class = AdjustmentSerializer
    permission_classes = [IsAdminUser]
    lookup_value_regex = r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'

    def get_serializer_class(self):
        if self.action == 'create':
            return AdjustmentCreateSerializer
        return AdjustmentSerializer

    @extend_schema(parameters=[AdjustmentFilterSerializer])
    def list(self, request, *args, **kwargs):
        """List adjustments of an order."""
        filter_serializer = AdjustmentFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        try:
            queryset = list_order_adjustments(
                order_id=params['order'],
                state=params.get('state'),
                kind=params.get('kind'),
            )
        except OrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        queryset = queryset.select_related(
            'adjustable_content_type', 'source_content_type', 'promotion_code', 'adjustment_reason'
        )
        serializer = AdjustmentSerializer(queryset, many=True)
        return Response(serializer.data)

    @extend_schema(request=AdjustmentCreateSerializer, responses=AdjustmentSerializer)
    def create(self, request, *args, **kwargs):
        """Create a manual adjustment."""
        serializer = AdjustmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            adjustment = create_adjustment(
                order_id=data['order'],
                adjustable=data['adjustable'],
                label=data['label'],
                amount=data['amount'],
                mandatory=data['mandatory'],
                adjustment_reason=data.get('adjustment_reason'),
            )
        except OrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except AdjustmentValidationError as e:
            return Response({'error': e.errors}, status=status.HTTP_400_BAD_REQUEST)

        return Response(AdjustmentSerializer(adjustment).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        """Delete an adjustment and refresh the totals."""
        delete_adjustment(adjustment_id=kwargs.get('pk'))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses=AdjustmentSerializer)
    @action(detail=True, methods=['post'])
    def close(self, request, pk=None):
        """Close an adjustment."""
        adjustment = close_adjustment(adjustment_id=pk)
        return Response(AdjustmentSerializer(adjustment).data)

    @extend_schema(request=None, responses=AdjustmentSerializer)
    @action(detail=True, methods=['post'])
    def open(self, request, pk=None):
        """Reopen a closed adjustment."""
        adjustment = open_adjustment(adjustment_id=pk)
        return Response(AdjustmentSerializer(adjustment).data)

    @extend_schema(request=None, responses=AdjustmentSerializer)
    @action(detail=True, methods=['post'])
    def recalculate(self, request, pk=None):
        """Recompute an adjustment from its source."""
        adjustment = recalculate_adjustment(adjustment_id=pk)
        return Response(AdjustmentSerializer(adjustment).data)
