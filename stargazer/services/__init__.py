"""Backing logic: identity, item stores, engagement operations."""

from .engagement import (
    Comment,
    EngagementService,
    Item,
    ItemView,
    StarResult,
    StarStatus,
)
from .firestore_item_store import FirestoreItemStore
from .identity import IdentityResolver, UserIdentity
from .item_store import ItemStore, MemoryItemStore, UpdateOp

__all__ = [
    "Comment",
    "EngagementService",
    "Item",
    "ItemView",
    "StarResult",
    "StarStatus",
    "FirestoreItemStore",
    "IdentityResolver",
    "UserIdentity",
    "ItemStore",
    "MemoryItemStore",
    "UpdateOp",
]
