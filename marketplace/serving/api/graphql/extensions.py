"""
GraphQL Schema Extensions
"""

from typing import Iterator, Optional

import structlog
from graphql import GraphQLError
from strawberry.extensions import SchemaExtension

from marketplace.errors import MarketplaceError

logger = structlog.get_logger(__name__)


def _marketplace_cause(error: GraphQLError) -> Optional[MarketplaceError]:
    # Variable coercion wraps the scalar's exception in one or more GraphQLErrors.
    original = error.original_error
    while isinstance(original, GraphQLError):
        original = original.original_error
    return original if isinstance(original, MarketplaceError) else None


class ErrorCodeExtension(SchemaExtension):
    """
    Copy the ``code`` of marketplace errors into GraphQL error extensions.

    Errors that did not originate from ``MarketplaceError`` are logged and
    left untouched.
    """

    def on_operation(self) -> Iterator[None]:
        yield

        result = self.execution_context.result
        errors = getattr(result, "errors", None)
        if not errors:
            return

        for error in errors:
            cause = _marketplace_cause(error)
            if cause is not None:
                error.extensions = {**(error.extensions or {}), "code": cause.code}
                logger.info("GraphQL request rejected", code=cause.code, message=cause.message)
            else:
                logger.error("GraphQL request failed", error=error.message, path=error.path)
