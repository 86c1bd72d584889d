"""
Schemas module - Request/Response schemas for API endpoints.

Every schema uses camelCase aliases on the wire and accepts snake_case too.
"""
