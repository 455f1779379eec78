from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from mptt.utils import get_cached_trees
from .models import Product, Taxon, Taxonomy
from .permissions import IsStaffOrReadOnly
from .product_filters import apply_brands, apply_price_ranges
from .serializers import (
    ClassificationInputSerializer,
    ProductFilterSerializer,
    ProductSerializer,
    TaxonCreateSerializer,
    TaxonFilterSerializer,
    TaxonMoveSerializer,
    TaxonSerializer,
    TaxonTreeSerializer,
    TaxonUpdateSerializer,
    TaxonomyInputSerializer,
    TaxonomySerializer,
)
from .services import (
    create_taxonomy,
    update_taxonomy,
    delete_taxonomy,
    create_taxon,
    update_taxon,
    move_taxon,
    delete_taxon,
    get_taxon_by_permalink,
    classify_product,
    declassify_product,
)
from .services.exceptions import (
    DuplicateClassificationError,
    InvalidTaxonError,
    InvalidTaxonMoveError,
    ProductNotFoundError,
    RootTaxonDeletionError,
    TaxonNotFoundError,
    TaxonomyNotFoundError,
)


# Catalog ids are UUIDs; anything else 404s at the router
UUID_LOOKUP = r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'


class CatalogPagination(PageNumberPagination):
    """Custom pagination for catalog listings."""
    page_size = 24
    page_size_query_param = 'page_size'
    max_page_size = 100


def _filter_products(queryset, params):
    if params.get('price_range'):
        queryset = apply_price_ranges(queryset, params['price_range'])
    if params.get('brand'):
        queryset = apply_brands(queryset, params['brand'])
    return queryset


class TaxonomyViewSet(viewsets.ModelViewSet):
    """
    ViewSet for taxonomies.

    list: All taxonomies by position
    create: Create a taxonomy and its root taxon
    retrieve: Get a specific taxonomy
    update/partial_update: Rename or reposition; renames the root too
    destroy: Delete the taxonomy with its tree
    tree: Nested taxon tree of the taxonomy
    """

    queryset = Taxonomy.objects.all()
    serializer_class = TaxonomySerializer
    permission_classes = [IsStaffOrReadOnly]
    lookup_value_regex = UUID_LOOKUP

    @extend_schema(request=TaxonomyInputSerializer, responses=TaxonomySerializer)
    def create(self, request, *args, **kwargs):
        serializer = TaxonomyInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        taxonomy = create_taxonomy(**serializer.validated_data)
        return Response(TaxonomySerializer(taxonomy).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=TaxonomyInputSerializer, responses=TaxonomySerializer)
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = TaxonomyInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            taxonomy = update_taxonomy(taxonomy_id=kwargs.get('pk'), **serializer.validated_data)
        except TaxonomyNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(TaxonomySerializer(taxonomy).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_taxonomy(taxonomy_id=kwargs.get('pk'))
        except TaxonomyNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses=TaxonTreeSerializer)
    @action(detail=True, methods=['get'])
    def tree(self, request, pk=None):
        """Get the taxon tree of a taxonomy, nested from the root."""
        taxonomy = self.get_object()
        roots = get_cached_trees(taxonomy.taxons.order_by('tree_id', 'lft'))
        if not roots:
            return Response({'error': 'Taxonomy has no root taxon'}, status=status.HTTP_404_NOT_FOUND)
        return Response(TaxonTreeSerializer(roots[0]).data)


class TaxonViewSet(viewsets.ModelViewSet):
    """
    ViewSet for taxons.

    list: Taxons in tree order (?taxonomy=<id> to narrow)
    create: Add a taxon under a parent
    retrieve: Get a specific taxon
    update/partial_update: Change name, description and meta tags
    destroy: Delete the taxon and its subtree
    move: Move under another parent at a position
    products: Products in the taxon and below it, filterable
    filters: Product filters offered on the taxon page
    by_permalink: Look up a taxon by permalink
    """

    queryset = Taxon.objects.select_related('taxonomy', 'parent')
    serializer_class = TaxonSerializer
    permission_classes = [IsStaffOrReadOnly]
    lookup_value_regex = UUID_LOOKUP
    pagination_class = CatalogPagination

    def get_queryset(self):
        filter_serializer = TaxonFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        queryset = super().get_queryset()
        taxonomy_id = filter_serializer.validated_data.get('taxonomy')
        if taxonomy_id:
            queryset = queryset.filter(taxonomy_id=taxonomy_id)
        return queryset

    @extend_schema(request=TaxonCreateSerializer, responses=TaxonSerializer)
    def create(self, request, *args, **kwargs):
        serializer = TaxonCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            taxon = create_taxon(
                taxonomy_id=data['taxonomy'],
                parent_id=data.get('parent'),
                name=data['name'],
                permalink=data['permalink'],
                description=data['description'],
                meta_title=data['meta_title'],
                meta_description=data['meta_description'],
                meta_keywords=data['meta_keywords'],
            )
        except (TaxonomyNotFoundError, TaxonNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidTaxonError as e:
            return Response({'error': e.errors}, status=status.HTTP_400_BAD_REQUEST)

        return Response(TaxonSerializer(taxon).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=TaxonUpdateSerializer, responses=TaxonSerializer)
    def update(self, request, *args, **kwargs):
        kwargs.pop('partial', False)
        serializer = TaxonUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            taxon = update_taxon(taxon_id=kwargs.get('pk'), **serializer.validated_data)
        except TaxonNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidTaxonError as e:
            return Response({'error': e.errors}, status=status.HTTP_400_BAD_REQUEST)

        return Response(TaxonSerializer(taxon).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_taxon(taxon_id=kwargs.get('pk'))
        except TaxonNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except RootTaxonDeletionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=TaxonMoveSerializer, responses=TaxonSerializer)
    @action(detail=True, methods=['post'])
    def move(self, request, pk=None):
        """Move a taxon under a new parent at a 0-based index."""
        serializer = TaxonMoveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            taxon = move_taxon(
                taxon_id=pk,
                parent_id=serializer.validated_data['parent'],
                index=serializer.validated_data['index'],
            )
        except TaxonNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidTaxonMoveError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(TaxonSerializer(taxon).data)

    @extend_schema(parameters=[ProductFilterSerializer], responses=ProductSerializer(many=True))
    @action(detail=True, methods=['get'])
    def products(self, request, pk=None):
        """Active products in the taxon or its descendants."""
        taxon = self.get_object()
        filter_serializer = ProductFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        queryset = Product.objects.active().in_taxon(taxon)
        queryset = _filter_products(queryset, filter_serializer.validated_data)

        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(ProductSerializer(page, many=True).data)
        return Response(ProductSerializer(queryset, many=True).data)

    @action(detail=True, methods=['get'])
    def filters(self, request, pk=None):
        """Product filters for the taxon page, as name/scope/labels."""
        taxon = self.get_object()
        data = [
            {
                'name': product_filter['name'],
                'scope': product_filter['scope'],
                'labels': [label for label, _ in product_filter['labels']],
            }
            for product_filter in taxon.applicable_filters()
        ]
        return Response(data)

    @extend_schema(request=ClassificationInputSerializer, responses=TaxonSerializer)
    @action(detail=True, methods=['post'])
    def classify(self, request, pk=None):
        """Put a product into the taxon."""
        serializer = ClassificationInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            classify_product(
                product_id=serializer.validated_data['product'],
                taxon_id=pk,
                position=serializer.validated_data.get('position'),
            )
        except (ProductNotFoundError, TaxonNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DuplicateClassificationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({'message': 'Product classified'}, status=status.HTTP_201_CREATED)

    @extend_schema(request=ClassificationInputSerializer)
    @action(detail=True, methods=['post'])
    def declassify(self, request, pk=None):
        """Remove a product from the taxon."""
        serializer = ClassificationInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            declassify_product(product_id=serializer.validated_data['product'], taxon_id=pk)
        except (ProductNotFoundError, TaxonNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        parameters=[
            OpenApiParameter(name='permalink', type=str, required=True),
            OpenApiParameter(name='taxonomy', type=str, required=False),
        ],
        responses=TaxonSerializer
    )
    @action(detail=False, methods=['get'], url_path='by-permalink')
    def by_permalink(self, request):
        """Find a taxon by permalink, e.g. ?permalink=categories/shirts."""
        filter_serializer = TaxonFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data
        if not params.get('permalink'):
            return Response({'error': 'permalink parameter required'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            taxon = get_taxon_by_permalink(
                permalink=params['permalink'],
                taxonomy_id=params.get('taxonomy'),
            )
        except TaxonNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(TaxonSerializer(taxon).data)


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only product listing.

    Filters: taxon, price_range (repeatable), brand (repeatable)
    """

    queryset = Product.objects.prefetch_related('taxons')
    serializer_class = ProductSerializer
    permission_classes = [IsStaffOrReadOnly]
    lookup_value_regex = UUID_LOOKUP
    pagination_class = CatalogPagination

    def get_queryset(self):
        filter_serializer = ProductFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = super().get_queryset().active()
        if params.get('taxon'):
            taxon = Taxon.objects.filter(id=params['taxon']).first()
            if taxon is None:
                return queryset.none()
            queryset = queryset.in_taxon(taxon)
        return _filter_products(queryset, params)

    @extend_schema(parameters=[ProductFilterSerializer])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)
