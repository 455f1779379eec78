"""Taxonomy CRUD operations service."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction

from ..models import Taxonomy
from .exceptions import TaxonomyNotFoundError

logger = logging.getLogger(__name__)


@transaction.atomic
def create_taxonomy(*, name: str, position: Optional[int] = None) -> Taxonomy:
    """
    Create a taxonomy together with its root taxon.

    Args:
        name: Taxonomy name, also used for the root taxon
        position: Sort position; defaults to after the last taxonomy

    Returns:
        Created Taxonomy instance
    """
    if position is None:
        last = Taxonomy.objects.order_by('-position').values_list('position', flat=True).first()
        position = (last + 1) if last is not None else 0

    taxonomy = Taxonomy.objects.create(name=name, position=position)
    logger.info("Created taxonomy %s (%s)", taxonomy.id, taxonomy.name)
    return taxonomy


def get_taxonomy_by_id(*, taxonomy_id: UUID) -> Taxonomy:
    """
    Get taxonomy by ID.

    Raises:
        TaxonomyNotFoundError: If taxonomy doesn't exist
    """
    try:
        return Taxonomy.objects.get(id=taxonomy_id)
    except Taxonomy.DoesNotExist:
        raise TaxonomyNotFoundError(f"Taxonomy {taxonomy_id} not found")


@transaction.atomic
def update_taxonomy(
    *,
    taxonomy_id: UUID,
    name: Optional[str] = None,
    position: Optional[int] = None
) -> Taxonomy:
    """
    Rename or reposition a taxonomy. Renaming also renames its root taxon.

    Raises:
        TaxonomyNotFoundError: If taxonomy doesn't exist
    """
    try:
        taxonomy = Taxonomy.objects.select_for_update().get(id=taxonomy_id)
    except Taxonomy.DoesNotExist:
        raise TaxonomyNotFoundError(f"Taxonomy {taxonomy_id} not found")

    if name is not None:
        taxonomy.name = name
    if position is not None:
        taxonomy.position = position
    taxonomy.save()

    logger.info("Updated taxonomy %s", taxonomy.id)
    return taxonomy


@transaction.atomic
def delete_taxonomy(*, taxonomy_id: UUID) -> None:
    """
    Delete a taxonomy and its whole taxon tree.

    Raises:
        TaxonomyNotFoundError: If taxonomy doesn't exist
    """
    deleted, _ = Taxonomy.objects.filter(id=taxonomy_id).delete()
    if not deleted:
        raise TaxonomyNotFoundError(f"Taxonomy {taxonomy_id} not found")
    logger.info("Deleted taxonomy %s", taxonomy_id)
