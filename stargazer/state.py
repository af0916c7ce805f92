"""Application state: item store, identity resolver and engagement service."""

import logging
from datetime import datetime
from typing import Callable, Optional

from .config import ServerConfig, get_config
from .services import (
    EngagementService,
    FirestoreItemStore,
    IdentityResolver,
    ItemStore,
    MemoryItemStore,
)
from .services.engagement import new_comment_id, utc_now

logger = logging.getLogger(__name__)


class AppState:
    """Wires config into the store, resolver and service used by the routes."""

    def __init__(
        self,
        config: ServerConfig,
        item_store: Optional[ItemStore] = None,
        clock: Callable[[], datetime] = utc_now,
        id_generator: Callable[[], str] = new_comment_id,
    ):
        self.config = config

        _, errors = config.validate()
        for err in errors:
            logger.warning("config: %s", err)

        # Item store: Firestore when configured, else in-memory
        self.item_store = item_store if item_store is not None else self._create_item_store(config)
        logger.info("Item store: %s", type(self.item_store).__name__)

        self.identity = IdentityResolver(
            key=config.jwt_key,
            cookie_name=config.auth_cookie_name,
            algorithms=config.jwt_algorithms,
        )
        self.engagement = EngagementService(
            self.item_store,
            clock=clock,
            id_generator=id_generator,
            default_item_type=config.default_item_type,
        )

    @staticmethod
    def _create_item_store(config: ServerConfig) -> ItemStore:
        """Create item store from config (Firestore or in-memory)."""
        if config.data_source == "firebase":
            return FirestoreItemStore(
                project_id=config.firebase_project_id,
                credentials_path=config.firebase_credentials_path,
                collection=config.items_collection,
            )
        return MemoryItemStore()


_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        _state = AppState(get_config())
    return _state
