"""
Umbraco Core: the versionable content repository layer as a Django app.
"""
__version__ = "0.1.0"
