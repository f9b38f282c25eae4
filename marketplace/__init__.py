"""
Marketplace GraphQL Read API
"""
__version__ = "1.0.0"
