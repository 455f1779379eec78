from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'orders'

router = DefaultRouter()
router.register(r'', views.OrderViewSet, basename='order')

urlpatterns = [
    # GET    /api/orders/                          - List orders
    # GET    /api/orders/{id}/                     - Order with items and totals
    # POST   /api/orders/{id}/recalculate/         - Recalculate adjustments
    # POST   /api/orders/{id}/apply-taxes/         - Replace tax adjustments
    # POST   /api/orders/{id}/apply-promotion/     - Apply promotion by id or code
    # POST   /api/orders/{id}/cancel-units/        - Cancel line item units
    path('', include(router.urls)),
]
