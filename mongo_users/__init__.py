"""
mongo_users — root package.

User management over MongoDB with two interchangeable implementations of
one UserService contract: a native PyMongo one and a repository-based one.
Contains the FastAPI app entry point (main.py), API routes, domain model,
and infrastructure (DB access, mapping, query building).
"""
