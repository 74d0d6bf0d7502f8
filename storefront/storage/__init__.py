from .base import Storage
from .dependencies import get_storage
from .errors import (
    ForeignKeyError,
    IntegrityViolationError,
    RecordNotFoundError,
    StorageError,
    UniqueConstraintError,
    UnknownFieldError,
)
from .memory import InMemoryStorage
from .registry import DELETION_ORDER, EntityKind
from .sqlalchemy_storage import SqlAlchemyStorage, open_storage

__all__ = [
    "Storage",
    "get_storage",
    "EntityKind",
    "DELETION_ORDER",
    "InMemoryStorage",
    "SqlAlchemyStorage",
    "open_storage",
    "StorageError",
    "RecordNotFoundError",
    "UnknownFieldError",
    "IntegrityViolationError",
    "UniqueConstraintError",
    "ForeignKeyError",
]
