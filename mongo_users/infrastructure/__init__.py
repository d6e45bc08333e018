"""
Infrastructure layer: MongoDB access (PyMongo) for the user services.
"""
