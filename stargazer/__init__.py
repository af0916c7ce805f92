"""
Stargazer: stars and comments on catalog items.

Usage: python -m stargazer.server
"""

from .app import create_app
from .config import ServerConfig, get_config, reload_config
from .services import EngagementService, IdentityResolver, MemoryItemStore, UserIdentity
from .state import AppState, get_state

__all__ = [
    "create_app",
    "ServerConfig",
    "get_config",
    "reload_config",
    "AppState",
    "get_state",
    "EngagementService",
    "IdentityResolver",
    "MemoryItemStore",
    "UserIdentity",
]
