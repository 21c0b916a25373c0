class PersistenceError(Exception):
    """Raised when the warranty store cannot read or write a record."""
