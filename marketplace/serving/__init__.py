"""
Serving Module

HTTP and GraphQL surfaces of the marketplace read model.
"""
