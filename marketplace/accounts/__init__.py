"""
Accounts Module
"""
from .service import create_user, hash_password, resolve_role

__all__ = ["create_user", "hash_password", "resolve_role"]
