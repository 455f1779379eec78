# ==========================================
# apps/catalog/admin.py
# ==========================================

from django.contrib import admin
from mptt.admin import DraggableMPTTAdmin
from .models import Classification, Product, Prototype, Taxon, Taxonomy


@admin.register(Taxonomy)
class TaxonomyAdmin(admin.ModelAdmin):
    """Admin interface for taxonomies; the root taxon follows the name."""

    list_display = ['name', 'position', 'updated_at']
    list_editable = ['position']
    search_fields = ['name']


class ClassificationInline(admin.TabularInline):
    """Products of a taxon, in listing order."""
    model = Classification
    extra = 0
    autocomplete_fields = ['product']
    fields = ['product', 'position']


@admin.register(Taxon)
class TaxonAdmin(DraggableMPTTAdmin):
    """
    Tree admin for taxons.

    Dragging in the changelist moves taxons; their permalinks stay as they were.
    """

    list_display = ['tree_actions', 'indented_title', 'permalink', 'taxonomy', 'updated_at']
    list_display_links = ['indented_title']
    list_filter = ['taxonomy']
    search_fields = ['name', 'permalink']
    readonly_fields = ['permalink', 'created_at', 'updated_at']
    inlines = [ClassificationInline]

    fieldsets = (
        ('Tree', {
            'fields': ('taxonomy', 'parent', 'name', 'permalink')
        }),
        ('Content', {
            'fields': ('description',)
        }),
        ('SEO', {
            'fields': ('meta_title', 'meta_description', 'meta_keywords'),
            'classes': ('collapse',)
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for products."""

    list_display = ['name', 'brand', 'price', 'available_on', 'deleted_at']
    list_filter = ['brand', 'available_on']
    search_fields = ['name', 'slug', 'brand']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [ClassificationInline]


@admin.register(Prototype)
class PrototypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    filter_horizontal = ['taxons']
