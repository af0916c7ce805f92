"""
Item Store abstraction.

Document store holding one document per catalog item:
{ id, type, stargazers_ids: [user id], comments: [comment doc] }.
Implementations: in-memory (local dev, tests), Firestore (production).
Swap via config for local vs cloud.
"""

import copy
import threading
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from ..errors import DuplicateItem, NotFound


class UpdateOp(str, Enum):
    """Single-field atomic modifications supported by every store."""

    ADD_TO_SET = "add_to_set"
    REMOVE_FROM_SET = "remove_from_set"
    PUSH = "push"
    PULL = "pull"


class ItemStore(Protocol):
    """Protocol for item document persistence. Implement for in-memory or Firestore."""

    def find_by_key(self, item_id: str) -> Optional[Dict]:
        """Return the item document, or None if no item has this id."""
        ...

    def find_all(self) -> List[Dict]:
        """Return every item document."""
        ...

    def insert(self, document: Dict) -> None:
        """Create a new item document. Raises DuplicateItem if the id already exists."""
        ...

    def atomic_update_by_key(self, item_id: str, op: UpdateOp, field: str, value: Any) -> None:
        """
        Apply one atomic array modification to one field of one document.
        Raises NotFound if the document does not exist.
        """
        ...

    def ping(self) -> bool:
        """True if the backend is reachable."""
        ...


class MemoryItemStore:
    """
    Item store backed by a process-local dict.
    Each call holds the lock for its whole read or write, which gives the
    per-document atomicity a real document store provides.
    """

    def __init__(self, documents: Optional[List[Dict]] = None):
        self._lock = threading.Lock()
        self._items: Dict[str, Dict] = {}
        for doc in documents or []:
            self.insert(doc)

    def find_by_key(self, item_id: str) -> Optional[Dict]:
        with self._lock:
            doc = self._items.get(item_id)
            return copy.deepcopy(doc) if doc is not None else None

    def find_all(self) -> List[Dict]:
        with self._lock:
            return [copy.deepcopy(d) for d in self._items.values()]

    def insert(self, document: Dict) -> None:
        item_id = document["id"]
        with self._lock:
            if item_id in self._items:
                raise DuplicateItem(f"item {item_id!r} already exists")
            self._items[item_id] = copy.deepcopy(document)

    def atomic_update_by_key(self, item_id: str, op: UpdateOp, field: str, value: Any) -> None:
        with self._lock:
            doc = self._items.get(item_id)
            if doc is None:
                raise NotFound(f"item {item_id!r} not found")
            values = doc.setdefault(field, [])
            if op in (UpdateOp.ADD_TO_SET, UpdateOp.PUSH):
                if op is UpdateOp.PUSH or value not in values:
                    values.append(copy.deepcopy(value))
            elif op in (UpdateOp.REMOVE_FROM_SET, UpdateOp.PULL):
                doc[field] = [v for v in values if v != value]
            else:
                raise ValueError(f"unsupported update op: {op}")

    def ping(self) -> bool:
        return True
