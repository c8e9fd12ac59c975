"""
Data Layer Base Classes.

The data layer provides the Repository pattern for data access.
This abstracts away the specific data store (in-memory, Cosmos DB, etc.)
and provides a clean interface for the domain layer.

Key principles:
- Repositories handle storage only
- No business logic in repositories
- Return domain objects, not raw dicts
- Support for different backends via dependency injection
"""

import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, Generic, List, Optional, TypeVar

# Type variable for entity types
T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """
    Abstract base class for repositories.

    A Repository provides data access methods for a specific entity type.
    It abstracts the underlying data store and provides a consistent interface.
    Entities are never deleted, and listing preserves insertion order.

    Type parameter T represents the entity type this repository manages.

    Example:
        class PatientRepository(Repository[Patient]):
            def get_by_id(self, id: str) -> Optional[Patient]:
                doc = self._container.read_item(id, id)
                return Patient.from_dict(doc) if doc else None
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """
        Get an entity by its ID.

        Args:
            id: The entity's unique identifier

        Returns:
            The entity if found, None otherwise
        """
        pass

    @abstractmethod
    def list_all(self) -> List[T]:
        """
        Get all entities in the order they were first saved.
        """
        pass

    @abstractmethod
    def save(self, entity: T) -> T:
        """
        Save an entity (create or update).

        An update keeps the entity's original position in list_all().

        Args:
            entity: The entity to save

        Returns:
            The saved entity
        """
        pass

    def exists(self, predicate: Callable[[T], bool]) -> bool:
        """Check whether any stored entity satisfies the predicate."""
        return any(predicate(entity) for entity in self.list_all())

    def find(self, predicate: Callable[[T], bool]) -> List[T]:
        """Return every stored entity satisfying the predicate, in insertion order."""
        return [entity for entity in self.list_all() if predicate(entity)]


class InMemoryRepository(Repository[T]):
    """
    Dictionary-backed repository.

    Entities live for the lifetime of the process. Python dicts keep
    insertion order, and re-saving an existing id keeps its slot.
    """

    def __init__(self, id_attr: str = "id"):
        self._id_attr = id_attr
        self._items: Dict[str, T] = {}

    def get_by_id(self, id: str) -> Optional[T]:
        return self._items.get(id)

    def list_all(self) -> List[T]:
        return list(self._items.values())

    def save(self, entity: T) -> T:
        self._items[getattr(entity, self._id_attr)] = entity
        return entity

    def __len__(self) -> int:
        return len(self._items)


# =============================================================================
# UNIT OF WORK PATTERN
# =============================================================================

class UnitOfWork(ABC):
    """
    Abstract base class for Unit of Work pattern.

    Groups the reads and writes of one workflow operation so they
    succeed or fail together.
    """

    @abstractmethod
    def __enter__(self):
        """Begin the unit of work."""
        pass

    @abstractmethod
    def __exit__(self, exc_type, exc_val, exc_tb):
        """End the unit of work."""
        pass


class LockingUnitOfWork(UnitOfWork):
    """
    Unit of work backed by a single re-entrant writer lock.

    Workflow rules validate everything before writing, so there is nothing
    to roll back; the lock only guarantees that a check and the write that
    depends on it are never interleaved with another operation.
    """

    def __init__(self):
        self._lock = threading.RLock()

    def __enter__(self):
        self._lock.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._lock.release()
        return False
