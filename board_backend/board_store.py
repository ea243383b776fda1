"""
Board Store - In-memory object store for a single board.

This module implements:
- O(1) object lookups via index dictionaries
- Type index and connector-by-endpoint index
- Cascading delete of connectors attached to a deleted object
- Change callbacks for observers

The tool executor never caches objects: every read goes through
get_objects(), which returns a deep snapshot keyed by id.
"""

import logging
from typing import Any, Callable, Optional

from board_core.models import BoardObject, ObjectType

logger = logging.getLogger("board.store")

ChangeCallback = Callable[[str, str], None]


class BoardStore:
    """
    Holds every object on one board.

    Features:
    - O(1) object lookups via index dictionaries
    - Connector cleanup when an endpoint is deleted
    - Change callbacks receiving (action, object_id)

    Mutations are coroutines so callers can issue several at once and
    gather them; reads are synchronous snapshots.
    """

    def __init__(self):
        self._object_index: dict[str, BoardObject] = {}       # object_id -> BoardObject
        self._type_index: dict[str, set[str]] = {}            # type -> set of object_ids
        self._connectors_by_object: dict[str, set[str]] = {}  # object_id -> set of connector ids
        self._on_change_callbacks: list[ChangeCallback] = []

    # --- Index Management ---

    def _index_object(self, obj: BoardObject):
        """Add an object to the indexes."""
        self._object_index[obj.id] = obj
        self._type_index.setdefault(obj.type, set()).add(obj.id)
        if obj.type == ObjectType.CONNECTOR.value:
            for endpoint in (obj.from_id, obj.to_id):
                if endpoint:
                    self._connectors_by_object.setdefault(endpoint, set()).add(obj.id)

    def _unindex_object(self, obj: BoardObject):
        """Remove an object from the indexes."""
        self._object_index.pop(obj.id, None)
        if obj.type in self._type_index:
            self._type_index[obj.type].discard(obj.id)
        if obj.type == ObjectType.CONNECTOR.value:
            for endpoint in (obj.from_id, obj.to_id):
                if endpoint in self._connectors_by_object:
                    self._connectors_by_object[endpoint].discard(obj.id)

    # --- Change Callbacks ---

    def on_change(self, callback: ChangeCallback):
        """Register a callback for board changes."""
        self._on_change_callbacks.append(callback)

    def _notify_change(self, action: str, object_id: str):
        """Notify all registered callbacks of a change."""
        for callback in self._on_change_callbacks:
            callback(action, object_id)

    # --- Object Operations ---

    async def create_object(self, spec: dict[str, Any]) -> dict[str, Any]:
        """Add a new object to the board and return it as stored."""
        obj = BoardObject(**spec)
        if obj.id in self._object_index:
            raise ValueError(f"Object already exists: {obj.id}")
        self._index_object(obj)
        logger.debug("Created %s %s", obj.type, obj.id)
        self._notify_change("create", obj.id)
        return obj.to_json_dict()

    async def update_object(self, object_id: str, fields: dict[str, Any]) -> None:
        """Update fields of an existing object."""
        obj = self._object_index.get(object_id)
        if obj is None:
            raise ValueError(f"Object not found: {object_id}")

        data = obj.model_dump()
        data.update({k: v for k, v in fields.items() if k != "id"})
        updated = BoardObject(**data)

        self._unindex_object(obj)
        self._index_object(updated)

        self._notify_change("update", object_id)

    async def delete_object(self, object_id: str) -> None:
        """Delete an object and every connector attached to it."""
        obj = self._object_index.get(object_id)
        if obj is None:
            raise ValueError(f"Object not found: {object_id}")

        attached = self._connectors_by_object.pop(object_id, set())
        self._unindex_object(obj)
        for connector_id in attached:
            connector = self._object_index.get(connector_id)
            if connector:
                self._unindex_object(connector)
                self._notify_change("delete", connector_id)

        logger.debug("Deleted %s %s (+%d connectors)", obj.type, object_id, len(attached))
        self._notify_change("delete", object_id)

    # --- Queries ---

    def get_objects(self) -> dict[str, dict[str, Any]]:
        """Snapshot of every object keyed by id. Mutating it does not touch the store."""
        return {obj_id: obj.to_json_dict() for obj_id, obj in self._object_index.items()}

    def get_object(self, object_id: str) -> Optional[dict[str, Any]]:
        """Get a single object by id (O(1) lookup)."""
        obj = self._object_index.get(object_id)
        return obj.to_json_dict() if obj else None

    def type_counts(self) -> dict[str, int]:
        """Number of objects of each type."""
        return {t: len(ids) for t, ids in self._type_index.items() if ids}

    @property
    def count(self) -> int:
        """Number of objects on the board."""
        return len(self._object_index)

    def clear(self):
        """Remove every object."""
        self._object_index.clear()
        self._type_index.clear()
        self._connectors_by_object.clear()
        self._notify_change("clear", "")

    def get_state(self) -> dict[str, Any]:
        """Get the full current state for API responses."""
        return {
            "objects": list(self.get_objects().values()),
            "count": len(self._object_index),
            "types": self.type_counts(),
        }


# Global instance for the application
board_store = BoardStore()
