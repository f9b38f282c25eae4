"""
Query Resolver Set

One explicit async function per named read query. Every function takes an
``AsyncSession`` first and returns ORM rows, scalars, or small result
dataclasses; none of them writes.
"""
from . import flags, products, raffles, reviews, sales, users
from .base import SortOrder

__all__ = [
    "flags",
    "products",
    "raffles",
    "reviews",
    "sales",
    "users",
    "SortOrder",
]
