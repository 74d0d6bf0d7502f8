class StorageError(Exception):
    """Base class for everything the storage layer raises."""


class RecordNotFoundError(StorageError):
    def __init__(self, kind, record_id):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind.value} {record_id} not found")


class UnknownFieldError(StorageError):
    pass


class IntegrityViolationError(StorageError):
    """A write was rejected by a schema constraint."""


class UniqueConstraintError(IntegrityViolationError):
    pass


class ForeignKeyError(IntegrityViolationError):
    pass
