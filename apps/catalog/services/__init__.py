"""Services for catalog business logic."""

from .taxonomy_management import (
    create_taxonomy,
    get_taxonomy_by_id,
    update_taxonomy,
    delete_taxonomy,
)
from .taxon_management import (
    create_taxon,
    get_taxon_by_id,
    get_taxon_by_permalink,
    update_taxon,
    move_taxon,
    delete_taxon,
)
from .classification_management import (
    classify_product,
    declassify_product,
)

__all__ = [
    # Taxonomy Management
    'create_taxonomy',
    'get_taxonomy_by_id',
    'update_taxonomy',
    'delete_taxonomy',
    # Taxon Management
    'create_taxon',
    'get_taxon_by_id',
    'get_taxon_by_permalink',
    'update_taxon',
    'move_taxon',
    'delete_taxon',
    # Classification Management
    'classify_product',
    'declassify_product',
]
