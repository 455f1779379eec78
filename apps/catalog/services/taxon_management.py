"""Taxon tree operations service."""

import logging
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from mptt.exceptions import InvalidMove

from ..models import Taxon, Taxonomy
from .exceptions import (
    InvalidTaxonError,
    InvalidTaxonMoveError,
    RootTaxonDeletionError,
    TaxonNotFoundError,
    TaxonomyNotFoundError,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ['name', 'description', 'meta_title', 'meta_description', 'meta_keywords']


def get_taxon_by_id(*, taxon_id: UUID) -> Taxon:
    """
    Get taxon by ID.

    Raises:
        TaxonNotFoundError: If taxon doesn't exist
    """
    try:
        return Taxon.objects.select_related('taxonomy', 'parent').get(id=taxon_id)
    except Taxon.DoesNotExist:
        raise TaxonNotFoundError(f"Taxon {taxon_id} not found")


def get_taxon_by_permalink(*, permalink: str, taxonomy_id: Optional[UUID] = None) -> Taxon:
    """
    Find a taxon by its permalink, e.g. 'categories/clothing/shirts'.

    Permalinks are unique within a taxonomy only; without a taxonomy the
    first match in tree order is returned.

    Raises:
        TaxonNotFoundError: If no taxon has the permalink
    """
    queryset = Taxon.objects.select_related('taxonomy').filter(permalink=permalink.strip('/'))
    if taxonomy_id is not None:
        queryset = queryset.filter(taxonomy_id=taxonomy_id)

    taxon = queryset.first()
    if taxon is None:
        raise TaxonNotFoundError(f"Taxon with permalink '{permalink}' not found")
    return taxon


@transaction.atomic
def create_taxon(
    *,
    taxonomy_id: UUID,
    name: str,
    parent_id: Optional[UUID] = None,
    permalink: str = '',
    description: str = '',
    meta_title: str = '',
    meta_description: str = '',
    meta_keywords: str = ''
) -> Taxon:
    """
    Create a taxon as the last child of its parent.

    Args:
        taxonomy_id: Taxonomy UUID
        name: Taxon name
        parent_id: Parent taxon UUID; defaults to the taxonomy root
        permalink: Custom last permalink segment; defaults to the slugified name

    Returns:
        Created Taxon instance

    Raises:
        TaxonomyNotFoundError: If taxonomy doesn't exist
        TaxonNotFoundError: If parent doesn't exist in the taxonomy
        InvalidTaxonError: If the taxon is invalid, e.g. duplicate permalink
    """
    try:
        taxonomy = Taxonomy.objects.get(id=taxonomy_id)
    except Taxonomy.DoesNotExist:
        raise TaxonomyNotFoundError(f"Taxonomy {taxonomy_id} not found")

    if parent_id is None:
        parent = taxonomy.root
    else:
        try:
            parent = Taxon.objects.get(id=parent_id, taxonomy=taxonomy)
        except Taxon.DoesNotExist:
            raise TaxonNotFoundError(f"Taxon {parent_id} not found in taxonomy {taxonomy.name}")

    taxon = Taxon(
        taxonomy=taxonomy,
        parent=parent,
        name=name,
        permalink=permalink,
        description=description,
        meta_title=meta_title,
        meta_description=meta_description,
        meta_keywords=meta_keywords,
    )
    # Validation needs the final permalink for the uniqueness check
    taxon.set_permalink()

    try:
        taxon.full_clean()
    except ValidationError as e:
        raise InvalidTaxonError(e.message_dict)

    taxon.save()
    logger.info("Created taxon %s (%s)", taxon.id, taxon.permalink)
    return taxon


@transaction.atomic
def update_taxon(*, taxon_id: UUID, **data) -> Taxon:
    """
    Update descriptive fields of a taxon.

    The permalink and the position in the tree are not changed here; use
    move_taxon to move a taxon.

    Raises:
        TaxonNotFoundError: If taxon doesn't exist
        InvalidTaxonError: If the taxon is invalid
    """
    try:
        taxon = Taxon.objects.select_for_update().get(id=taxon_id)
    except Taxon.DoesNotExist:
        raise TaxonNotFoundError(f"Taxon {taxon_id} not found")

    for field in UPDATABLE_FIELDS:
        if field in data:
            setattr(taxon, field, data[field])

    try:
        taxon.full_clean()
    except ValidationError as e:
        raise InvalidTaxonError(e.message_dict)

    taxon.save()
    logger.info("Updated taxon %s", taxon.id)
    return taxon


@transaction.atomic
def move_taxon(*, taxon_id: UUID, parent_id: UUID, index: int = 0) -> Taxon:
    """
    Move a taxon under a new parent at a 0-based position.

    The taxon keeps its permalink.

    Args:
        taxon_id: Taxon to move
        parent_id: New parent, in the same taxonomy
        index: Position among the new siblings

    Returns:
        Moved Taxon instance

    Raises:
        TaxonNotFoundError: If taxon or parent doesn't exist
        InvalidTaxonMoveError: If the move would break the tree
    """
    try:
        taxon = Taxon.objects.get(id=taxon_id)
        parent = Taxon.objects.get(id=parent_id)
    except Taxon.DoesNotExist:
        raise TaxonNotFoundError("Taxon or parent not found")

    if taxon.is_root_node():
        raise InvalidTaxonMoveError("A root taxon cannot be moved")

    if parent.taxonomy_id != taxon.taxonomy_id:
        raise InvalidTaxonMoveError("A taxon cannot be moved to another taxonomy")

    if parent.pk == taxon.pk or parent.is_descendant_of(taxon):
        raise InvalidTaxonMoveError("A taxon cannot be moved under itself")

    if index < 0:
        raise InvalidTaxonMoveError("Index must not be negative")

    try:
        taxon.move_to_child_with_index(parent, index)
    except InvalidMove as e:
        raise InvalidTaxonMoveError(str(e))

    taxon.touch()
    logger.info("Moved taxon %s under %s at index %s", taxon.id, parent.id, index)
    return taxon


@transaction.atomic
def delete_taxon(*, taxon_id: UUID) -> None:
    """
    Delete a taxon with all its descendants.

    Raises:
        TaxonNotFoundError: If taxon doesn't exist
        RootTaxonDeletionError: If taxon is the root of its taxonomy
    """
    try:
        taxon = Taxon.objects.get(id=taxon_id)
    except Taxon.DoesNotExist:
        raise TaxonNotFoundError(f"Taxon {taxon_id} not found")

    if taxon.is_root_node():
        raise RootTaxonDeletionError("Root taxon is removed together with its taxonomy")

    parent = taxon.parent
    taxon.delete()
    parent.refresh_from_db()
    parent.touch()
    logger.info("Deleted taxon %s", taxon_id)
