"""
Engagement operations on catalog items: stars and comments.

Every operation loads the item document, decides, and issues at most one
write. Writes are single-field atomic modifications (set add/remove, array
push/pull) so concurrent requests on the same item never lose each other's
updates. Items are created on the first star or comment.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..errors import DuplicateItem, NotFound, Unauthenticated, Unauthorized, ValidationError
from .identity import UserIdentity
from .item_store import ItemStore, UpdateOp

logger = logging.getLogger(__name__)

STARGAZERS_FIELD = "stargazers_ids"
COMMENTS_FIELD = "comments"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_comment_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Comment:
    id: str
    text: str
    created_at: datetime
    # Snapshot of the author at creation time: {id, name, email}
    author: Dict[str, str]

    @property
    def author_id(self) -> str:
        return self.author.get("id", "")

    @classmethod
    def from_document(cls, doc: Dict) -> "Comment":
        created_at = doc.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
        return cls(
            id=str(doc.get("id", "")),
            text=doc.get("text", ""),
            created_at=created_at,
            author=dict(doc.get("author") or {}),
        )

    def to_document(self) -> Dict:
        return {
            "id": self.id,
            "text": self.text,
            "created_at": self.created_at.isoformat(),
            "author": dict(self.author),
        }


@dataclass
class Item:
    id: str
    type: str
    stargazers_ids: List[str] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)

    @property
    def stargazers_count(self) -> int:
        return len(self.stargazers_ids)

    def has_starred(self, user_id: str) -> bool:
        return user_id in self.stargazers_ids

    @classmethod
    def from_document(cls, doc: Dict, default_type: str = "chart") -> "Item":
        return cls(
            id=doc["id"],
            type=doc.get("type") or default_type,
            stargazers_ids=list(dict.fromkeys(doc.get(STARGAZERS_FIELD) or [])),
            comments=[Comment.from_document(c) for c in doc.get(COMMENTS_FIELD) or []],
        )

    def to_document(self) -> Dict:
        return {
            "id": self.id,
            "type": self.type,
            STARGAZERS_FIELD: list(self.stargazers_ids),
            COMMENTS_FIELD: [c.to_document() for c in self.comments],
        }


@dataclass
class ItemView:
    """Item as seen by one caller: aggregate count plus the caller's own star."""

    id: str
    type: str
    stargazers_count: int
    has_starred: bool


class StarStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    ALREADY_SATISFIED = "already-satisfied"


@dataclass
class StarResult:
    item: ItemView
    status: StarStatus

    @property
    def changed(self) -> bool:
        return self.status is not StarStatus.ALREADY_SATISFIED


def _require_caller(caller: Optional[UserIdentity]) -> UserIdentity:
    if caller is None:
        raise Unauthenticated("unauthorized")
    return caller


class EngagementService:
    """
    Reads and mutates the item + comment aggregate.

    The store, clock and comment id generator are injected so tests can pin
    ids and timestamps without touching shared state.
    """

    def __init__(
        self,
        store: ItemStore,
        clock: Callable[[], datetime] = utc_now,
        id_generator: Callable[[], str] = new_comment_id,
        default_item_type: str = "chart",
    ):
        self.store = store
        self._clock = clock
        self._new_id = id_generator
        self.default_item_type = default_item_type

    def _load(self, item_id: str) -> Optional[Item]:
        doc = self.store.find_by_key(item_id)
        if doc is None:
            return None
        return Item.from_document(doc, self.default_item_type)

    # ------------------------------------------------------------------
    # Stars
    # ------------------------------------------------------------------

    def list_items(self, caller: Optional[UserIdentity] = None) -> List[ItemView]:
        """All items with star counts; has_starred is False for anonymous callers."""
        views = []
        for doc in self.store.find_all():
            it = Item.from_document(doc, self.default_item_type)
            views.append(ItemView(
                id=it.id,
                type=it.type,
                stargazers_count=it.stargazers_count,
                has_starred=caller is not None and it.has_starred(caller.id),
            ))
        return views

    def set_star(
        self,
        item_id: str,
        has_starred: bool,
        caller: Optional[UserIdentity],
        item_type: Optional[str] = None,
    ) -> StarResult:
        """
        Star or unstar item_id for caller.
        Creates the item if it does not exist; starring an item the caller
        already starred is a no-op reported as ALREADY_SATISFIED.
        """
        caller = _require_caller(caller)
        item_id = (item_id or "").strip()
        if not item_id:
            raise ValidationError("id missing in request body")

        it = self._load(item_id)
        if it is None:
            it = Item(
                id=item_id,
                type=item_type or self.default_item_type,
                stargazers_ids=[caller.id] if has_starred else [],
            )
            try:
                self.store.insert(it.to_document())
            except DuplicateItem:
                # Lost the creation race: the item exists now, so apply the star as an update
                logger.info("item %r created concurrently, applying star as update", item_id)
                return self._update_star(item_id, has_starred, caller)
            logger.info("created item %r (starred=%s) for user %s", item_id, has_starred, caller.id)
            return StarResult(self._view(it, caller), StarStatus.CREATED)

        if has_starred and it.has_starred(caller.id):
            return StarResult(self._view(it, caller), StarStatus.ALREADY_SATISFIED)

        op = UpdateOp.ADD_TO_SET if has_starred else UpdateOp.REMOVE_FROM_SET
        self.store.atomic_update_by_key(it.id, op, STARGAZERS_FIELD, caller.id)
        if has_starred:
            it.stargazers_ids.append(caller.id)
        else:
            it.stargazers_ids = [uid for uid in it.stargazers_ids if uid != caller.id]
        logger.debug("%s star on %r for user %s", op.value, it.id, caller.id)
        return StarResult(self._view(it, caller), StarStatus.UPDATED)

    def _update_star(self, item_id: str, has_starred: bool, caller: UserIdentity) -> StarResult:
        op = UpdateOp.ADD_TO_SET if has_starred else UpdateOp.REMOVE_FROM_SET
        self.store.atomic_update_by_key(item_id, op, STARGAZERS_FIELD, caller.id)
        it = self._load(item_id)
        if it is None:
            raise NotFound(f"item {item_id!r} not found")
        return StarResult(self._view(it, caller), StarStatus.UPDATED)

    @staticmethod
    def _view(it: Item, caller: UserIdentity) -> ItemView:
        return ItemView(
            id=it.id,
            type=it.type,
            stargazers_count=it.stargazers_count,
            has_starred=it.has_starred(caller.id),
        )

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def list_comments(self, item_id: str) -> List[Comment]:
        """Comments in creation order; an unknown item has no comments."""
        it = self._load(item_id)
        if it is None:
            return []
        return it.comments

    def add_comment(self, item_id: str, text: Optional[str], caller: Optional[UserIdentity]) -> Comment:
        caller = _require_caller(caller)
        if not text or not text.strip():
            raise ValidationError("text missing in request body")

        cm = Comment(
            id=self._new_id(),
            text=text,
            created_at=self._clock(),
            author=caller.to_author(),
        )

        if self.store.find_by_key(item_id) is None:
            it = Item(id=item_id, type=self.default_item_type, comments=[cm])
            try:
                self.store.insert(it.to_document())
                logger.info("created item %r with first comment %s", item_id, cm.id)
                return cm
            except DuplicateItem:
                logger.info("item %r created concurrently, appending comment", item_id)

        self.store.atomic_update_by_key(item_id, UpdateOp.PUSH, COMMENTS_FIELD, cm.to_document())
        return cm

    def delete_comment(self, item_id: str, comment_id: str, caller: Optional[UserIdentity]) -> Comment:
        """Remove a comment. Only its author may delete it."""
        caller = _require_caller(caller)

        doc = self.store.find_by_key(item_id)
        if doc is None:
            raise NotFound("comment not found")

        stored = next(
            (c for c in doc.get(COMMENTS_FIELD) or [] if str(c.get("id")) == comment_id),
            None,
        )
        if stored is None:
            raise NotFound("comment not found")

        cm = Comment.from_document(stored)
        if cm.author_id != caller.id:
            raise Unauthorized("not authorized to delete this comment")

        # Pull the exact stored document so the store can match it element-for-element
        self.store.atomic_update_by_key(item_id, UpdateOp.PULL, COMMENTS_FIELD, stored)
        logger.info("user %s deleted comment %s on %r", caller.id, comment_id, item_id)
        return cm
