class RepositoryError(Exception):
    """Base class for store-level failures raised by the CRUD layer."""
    pass


class RecordNotFound(RepositoryError):
    """The row targeted by an update or delete does not exist."""
    pass


class ForeignKeyViolation(RepositoryError):
    """A write was refused because of a foreign-key constraint."""
    pass
