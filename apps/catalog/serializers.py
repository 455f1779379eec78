from rest_framework import serializers
from .models import Product, Taxon, Taxonomy


# =============================================================================
# Input Serializers
# =============================================================================

class TaxonomyInputSerializer(serializers.Serializer):
    """Validate input for creating or updating a taxonomy."""

    name = serializers.CharField(max_length=255)
    position = serializers.IntegerField(required=False, min_value=0)


class TaxonCreateSerializer(serializers.Serializer):
    """
    Validate input for a new taxon.

    Without a parent the taxon goes directly under the taxonomy root.
    """

    taxonomy = serializers.UUIDField()
    parent = serializers.UUIDField(required=False, allow_null=True)
    name = serializers.CharField(max_length=255)
    permalink = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    description = serializers.CharField(required=False, allow_blank=True, default='')
    meta_title = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    meta_description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    meta_keywords = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class TaxonUpdateSerializer(serializers.Serializer):
    """Descriptive fields of a taxon; the permalink cannot be changed."""

    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    meta_title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    meta_description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    meta_keywords = serializers.CharField(max_length=255, required=False, allow_blank=True)


class TaxonMoveSerializer(serializers.Serializer):
    """Target of a taxon move."""

    parent = serializers.UUIDField()
    index = serializers.IntegerField(min_value=0, default=0)


class ClassificationInputSerializer(serializers.Serializer):
    product = serializers.UUIDField()
    position = serializers.IntegerField(min_value=1, required=False)


class TaxonFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for taxon listing and lookup.

    Query Parameters:
        taxonomy (UUID): Only taxons of this taxonomy
        permalink (str): Permalink to look up
    """

    taxonomy = serializers.UUIDField(required=False)
    permalink = serializers.CharField(required=False)


class ProductFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for product listing.

    Query Parameters:
        taxon (UUID): Products in this taxon or below it
        price_range (str, repeatable): Price range labels, e.g. 'Under $10.00'
        brand (str, repeatable): Brand names
    """

    taxon = serializers.UUIDField(required=False)
    price_range = serializers.ListField(child=serializers.CharField(), required=False)
    brand = serializers.ListField(child=serializers.CharField(), required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class TaxonSerializer(serializers.ModelSerializer):
    """Main serializer for taxons."""

    seo_title = serializers.CharField(read_only=True)
    pretty_name = serializers.CharField(read_only=True)

    class Meta:
        model = Taxon
        fields = [
            'id',
            'taxonomy',
            'parent',
            'name',
            'pretty_name',
            'permalink',
            'level',
            'description',
            'meta_title',
            'meta_description',
            'meta_keywords',
            'seo_title',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class TaxonTreeSerializer(serializers.ModelSerializer):
    """Taxon with its children, recursively."""

    children = serializers.SerializerMethodField()

    class Meta:
        model = Taxon
        fields = ['id', 'name', 'permalink', 'level', 'children']

    def get_children(self, obj):
        # Children come from mptt's cached tree, no extra queries
        return TaxonTreeSerializer(obj.get_children(), many=True).data


class TaxonomySerializer(serializers.ModelSerializer):
    """Main serializer for taxonomies."""

    root = serializers.SerializerMethodField()

    class Meta:
        model = Taxonomy
        fields = ['id', 'name', 'position', 'root', 'created_at', 'updated_at']
        read_only_fields = fields

    def get_root(self, obj):
        root = obj.root
        return str(root.id) if root else None


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for products."""

    taxons = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            'id',
            'name',
            'slug',
            'description',
            'price',
            'brand',
            'available_on',
            'taxons',
        ]
        read_only_fields = fields
