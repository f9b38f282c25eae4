"""
Error Taxonomy

Exceptions raised by the read-model layer and the account mutation path.
Each carries a stable ``code`` that the GraphQL layer exposes in the
error ``extensions``.
"""

from typing import Any


class MarketplaceError(Exception):
    """Base class for all marketplace API errors"""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(MarketplaceError):
    """Singular lookup on a key that does not exist"""

    code = "NOT_FOUND"

    def __init__(self, entity: str, key: Any):
        super().__init__(f"{entity} with id {key} not found")
        self.entity = entity
        self.key = key


class InvalidArgument(MarketplaceError):
    """Malformed scalar, enum, or range argument"""

    code = "INVALID_ARGUMENT"


class DataAccessError(MarketplaceError):
    """Failure reaching or executing against the data store"""

    code = "DATA_ACCESS_ERROR"


class PolicyViolation(MarketplaceError):
    """Request rejected by an account policy (e.g. invalid elevation phrase)"""

    code = "POLICY_VIOLATION"
