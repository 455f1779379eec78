from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'adjustments'

router = DefaultRouter()
router.register(r'', views.AdjustmentViewSet, basename='adjustment')

urlpatterns = [
    # GET    /api/adjustments/?order=<id>           - List adjustments of an order
    # POST   /api/adjustments/                      - Create manual adjustment
    # GET    /api/adjustments/{id}/                 - Get adjustment
    # DELETE /api/adjustments/{id}/                 - Delete adjustment
    # POST   /api/adjustments/{id}/close/           - Close adjustment
    # POST   /api/adjustments/{id}/open/            - Reopen adjustment
    # POST   /api/adjustments/{id}/recalculate/     - Recalculate from source
    path('', include(router.urls)),
]
