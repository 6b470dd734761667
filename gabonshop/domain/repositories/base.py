"""
Base Repository Interface.
Defines the standard contract for document-style data access.
"""

from typing import Any, Dict, List, Optional, Protocol, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic CRUD operations on one collection."""

    def get_by_id(self, id: str) -> Optional[T]:
        """Get a single entity by ID."""
        ...

    def list(self, order_by: Optional[str] = None, descending: bool = False) -> List[T]:
        """List every entity, optionally ordered by one column."""
        ...

    def create(self, obj_in: Dict[str, Any]) -> T:
        """Create a new entity; an id is issued when none is given."""
        ...

    def upsert(self, id: str, obj_in: Dict[str, Any]) -> T:
        """Write the entity under a caller-chosen id, replacing any previous one."""
        ...

    def update(self, db_obj: T, obj_in: Dict[str, Any]) -> T:
        """Apply a partial patch to an existing entity."""
        ...

    def delete(self, id: str) -> Optional[T]:
        """Delete an entity by ID."""
        ...
