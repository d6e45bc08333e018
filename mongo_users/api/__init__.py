"""
API layer for the user service.

Exposes HTTP endpoints under /api/v1/users (CRUD, search, department
counts and statistics, connection check).
"""
