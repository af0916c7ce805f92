"""
Firestore item store: one document per catalog item in the items collection.

Used when DATA_SOURCE=firebase. Firestore document ids cannot contain "/",
so the item id ("stable/wordpress") is URL-quoted for the document id and
also kept verbatim in the "id" field.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore import ArrayRemove, ArrayUnion

from ..errors import DuplicateItem, NotFound, StoreUnavailable
from .item_store import UpdateOp

logger = logging.getLogger(__name__)

_TRANSFORMS = {
    UpdateOp.ADD_TO_SET: ArrayUnion,
    UpdateOp.PUSH: ArrayUnion,
    UpdateOp.REMOVE_FROM_SET: ArrayRemove,
    UpdateOp.PULL: ArrayRemove,
}


def document_id(item_id: str) -> str:
    """Firestore-safe document id for an item id."""
    return quote(item_id, safe="")


class FirestoreItemStore:
    """
    Item store backed by a Firestore collection (default "items").
    Set add/remove and array push/pull map to ArrayUnion / ArrayRemove,
    which Firestore applies atomically on the server.
    """

    def __init__(
        self,
        project_id: Optional[str] = None,
        credentials_path: Optional[Union[Path, str]] = None,
        collection: str = "items",
        client: Any = None,
    ):
        if client is None:
            try:
                import firebase_admin
                from firebase_admin import credentials, firestore
            except ImportError:
                raise ImportError(
                    "firebase-admin is required for FirestoreItemStore. pip install firebase-admin"
                )
            if not firebase_admin._apps:
                if credentials_path:
                    cred = credentials.Certificate(str(Path(credentials_path).resolve()))
                    opts = {"projectId": project_id} if project_id else None
                    firebase_admin.initialize_app(cred, opts)
                else:
                    firebase_admin.initialize_app(options={"projectId": project_id} if project_id else None)
            client = firestore.client()
        self._db = client
        self._coll = self._db.collection(collection)

    def _doc_ref(self, item_id: str):
        return self._coll.document(document_id(item_id))

    @staticmethod
    def _doc_to_item(doc) -> Dict:
        d = doc.to_dict() or {}
        d.setdefault("stargazers_ids", [])
        d.setdefault("comments", [])
        return d

    def find_by_key(self, item_id: str) -> Optional[Dict]:
        try:
            doc = self._doc_ref(item_id).get()
        except google_exceptions.GoogleAPICallError as exc:
            logger.error("could not fetch item %r: %s", item_id, exc)
            raise StoreUnavailable("could not fetch item") from exc
        if not doc.exists:
            return None
        return self._doc_to_item(doc)

    def find_all(self) -> List[Dict]:
        try:
            return [self._doc_to_item(doc) for doc in self._coll.stream()]
        except google_exceptions.GoogleAPICallError as exc:
            logger.error("could not fetch all items: %s", exc)
            raise StoreUnavailable("could not fetch all items") from exc

    def insert(self, document: Dict) -> None:
        item_id = document["id"]
        try:
            self._doc_ref(item_id).create(document)
        except google_exceptions.Conflict as exc:
            raise DuplicateItem(f"item {item_id!r} already exists") from exc
        except google_exceptions.GoogleAPICallError as exc:
            logger.error("could not insert item %r: %s", item_id, exc)
            raise StoreUnavailable("could not insert item") from exc

    def atomic_update_by_key(self, item_id: str, op: UpdateOp, field: str, value: Any) -> None:
        transform = _TRANSFORMS.get(op)
        if transform is None:
            raise ValueError(f"unsupported update op: {op}")
        try:
            self._doc_ref(item_id).update({field: transform([value])})
        except google_exceptions.NotFound as exc:
            raise NotFound(f"item {item_id!r} not found") from exc
        except google_exceptions.GoogleAPICallError as exc:
            logger.error("could not update item %r (%s %s): %s", item_id, op.value, field, exc)
            raise StoreUnavailable("could not update item") from exc

    def ping(self) -> bool:
        try:
            list(self._coll.limit(1).stream())
            return True
        except google_exceptions.GoogleAPICallError as exc:
            logger.warning("firestore not reachable: %s", exc)
            return False
