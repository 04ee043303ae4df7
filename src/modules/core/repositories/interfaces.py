"""Generic repository interface.

Services depend on these abstractions and receive concrete repositories
through their constructors, so tests can swap in mocks or stubs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Iterable, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base contract: look-up by primary key and persistence of ``T``."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by primary key, ``None`` when missing."""

    @abstractmethod
    def save(self, entity: T, update_fields: Optional[Iterable[str]] = None) -> T:
        """Persist (create or update) an entity.

        With *update_fields* only those columns are written, leaving
        concurrent writes to the others intact.
        """
