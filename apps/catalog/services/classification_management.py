"""Product classification service."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import F

from ..models import Classification, Product, Taxon
from .exceptions import (
    DuplicateClassificationError,
    ProductNotFoundError,
    TaxonNotFoundError,
)

logger = logging.getLogger(__name__)


def _get_product_and_taxon(product_id, taxon_id):
    try:
        product = Product.objects.get(id=product_id, deleted_at__isnull=True)
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product {product_id} not found")

    try:
        taxon = Taxon.objects.get(id=taxon_id)
    except Taxon.DoesNotExist:
        raise TaxonNotFoundError(f"Taxon {taxon_id} not found")

    return product, taxon


@transaction.atomic
def classify_product(
    *,
    product_id: UUID,
    taxon_id: UUID,
    position: Optional[int] = None
) -> Classification:
    """
    Put a product into a taxon.

    Args:
        product_id: Product UUID
        taxon_id: Taxon UUID
        position: Place in the taxon's listing; defaults to last

    Returns:
        Created Classification instance

    Raises:
        ProductNotFoundError: If product doesn't exist
        TaxonNotFoundError: If taxon doesn't exist
        DuplicateClassificationError: If product is already in the taxon
    """
    product, taxon = _get_product_and_taxon(product_id, taxon_id)

    if Classification.objects.filter(product=product, taxon=taxon).exists():
        raise DuplicateClassificationError(
            f"Product '{product.name}' is already classified under '{taxon.name}'"
        )

    if position is not None:
        # Make room so positions stay unique within the taxon
        Classification.objects.filter(
            taxon=taxon, position__gte=position
        ).update(position=F('position') + 1)

    classification = Classification.objects.create(
        product=product,
        taxon=taxon,
        position=position or 0,
    )
    logger.info(
        "Classified product %s under taxon %s at position %s",
        product.id, taxon.id, classification.position
    )
    return classification


@transaction.atomic
def declassify_product(*, product_id: UUID, taxon_id: UUID) -> None:
    """
    Remove a product from a taxon.

    Raises:
        ProductNotFoundError: If product doesn't exist
        TaxonNotFoundError: If taxon doesn't exist or product is not in it
    """
    product, taxon = _get_product_and_taxon(product_id, taxon_id)

    classification = Classification.objects.filter(product=product, taxon=taxon).first()
    if classification is None:
        raise TaxonNotFoundError(
            f"Product '{product.name}' is not classified under '{taxon.name}'"
        )

    classification.delete()
    logger.info("Removed product %s from taxon %s", product.id, taxon.id)
