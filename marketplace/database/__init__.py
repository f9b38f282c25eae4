"""
Database Module
"""
from .connection import Database, create_database
from .models import Base

__all__ = [
    "Database",
    "create_database",
    "Base",
]
