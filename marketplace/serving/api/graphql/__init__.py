"""
GraphQL API
"""
from .context import GraphQLContext, get_context
from .schema import create_graphql_router, schema

__all__ = [
    "GraphQLContext",
    "create_graphql_router",
    "get_context",
    "schema",
]
