"""Bug tracker: REST CRUD service over a SQLAlchemy record store, plus client."""
__version__ = "0.1.0"
