from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ProductViewSet, TaxonViewSet, TaxonomyViewSet

app_name = 'catalog'

router = DefaultRouter()
router.register(r'taxonomies', TaxonomyViewSet, basename='taxonomy')
router.register(r'taxons', TaxonViewSet, basename='taxon')
router.register(r'products', ProductViewSet, basename='product')

urlpatterns = [
    path('', include(router.urls)),
]
