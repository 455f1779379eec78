"""Domain-specific exceptions for catalog services."""


class CatalogServiceError(Exception):
    """Base exception for catalog services."""
    pass


class TaxonomyNotFoundError(CatalogServiceError):
    """Raised when taxonomy does not exist."""
    pass


class TaxonNotFoundError(CatalogServiceError):
    """Raised when taxon does not exist."""
    pass


class ProductNotFoundError(CatalogServiceError):
    """Raised when product does not exist."""
    pass


class InvalidTaxonError(CatalogServiceError):
    """Raised when a taxon fails model validation."""

    def __init__(self, errors):
        self.errors = errors
        super().__init__(f"Invalid taxon: {errors}")


class InvalidTaxonMoveError(CatalogServiceError):
    """Raised when a taxon cannot be moved to the requested place."""
    pass


class DuplicateClassificationError(CatalogServiceError):
    """Raised when product is already classified under the taxon."""
    pass


class RootTaxonDeletionError(CatalogServiceError):
    """Raised when deleting a root taxon outside of its taxonomy."""
    pass
