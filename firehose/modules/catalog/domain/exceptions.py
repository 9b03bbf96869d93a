"""Catalog domain exceptions."""

from firehose.core.domain.exceptions import DomainException


class CatalogParseError(DomainException):
    """Raised when the catalog document is not well-formed hierarchical data."""

    error_code = "CATALOG_PARSE_ERROR"

    def __init__(self, message: str):
        super().__init__(f"Failed to parse catalog: {message}")


class CatalogFetchError(DomainException):
    """Raised when the catalog cannot be retrieved from any location."""

    error_code = "CATALOG_FETCH_ERROR"

    def __init__(self, message: str):
        super().__init__(f"Failed to fetch catalog: {message}")
