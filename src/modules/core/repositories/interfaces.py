"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
domain-specific repository interfaces extend.  Callers depend on this
abstraction, never on the Django ORM directly.

Every method is a coroutine: implementations suspend only while waiting
on the database.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the entity managed by the
    repository (e.g. ``Order``).  Mutations report the number of rows
    affected; ``0`` means the target did not exist and is not an error.
    """

    @abstractmethod
    async def get_all(self) -> List[T]:
        """Return every entity."""

    @abstractmethod
    async def get_by_id(self, id: int) -> Optional[T]:
        """Retrieve an entity by its primary key, or ``None``."""

    @abstractmethod
    async def insert(self, entity: T) -> int:
        """Persist a new entity and return its assigned primary key."""

    @abstractmethod
    async def update(self, entity: T) -> int:
        """Replace the stored entity with the same primary key."""

    @abstractmethod
    async def delete(self, entity: T) -> int:
        """Remove the stored entity with the same primary key."""

    @abstractmethod
    async def delete_by_id(self, id: int) -> int:
        """Remove an entity by primary key."""

    @abstractmethod
    async def delete_all(self) -> int:
        """Remove every entity and return how many were removed."""
