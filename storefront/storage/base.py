from abc import ABC, abstractmethod
from typing import Any, Mapping

from .registry import EntityKind


class Storage(ABC):
    """
    The persistence capability the HTTP layer, fixtures and invariant checker
    depend on. Implementations return mapped model instances (Category,
    Product, Order with its order_items loaded, OrderItem).

    Every call is atomic on its own. Nothing spans calls.
    """

    @abstractmethod
    async def create(self, kind: EntityKind, fields: Mapping[str, Any]):
        """Inserts one entity (an Order together with ``order_items``) and returns it."""

    @abstractmethod
    async def find_many(
        self,
        kind: EntityKind,
        where: Mapping[str, Any] | None = None,
        order_by: str | None = None,
    ) -> list:
        ...

    @abstractmethod
    async def find_unique(self, kind: EntityKind, record_id: str):
        """Returns the entity with this primary key, or None."""

    @abstractmethod
    async def update(self, kind: EntityKind, record_id: str, fields: Mapping[str, Any]):
        ...

    @abstractmethod
    async def delete(self, kind: EntityKind, record_id: str) -> None:
        ...

    @abstractmethod
    async def delete_many(self, kind: EntityKind) -> int:
        """Clears a whole collection and returns how many rows went away."""

    @abstractmethod
    async def disconnect(self) -> None:
        ...
