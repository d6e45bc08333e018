"""
Shared helpers: MongoDB client/collection access and timestamp handling.
"""
