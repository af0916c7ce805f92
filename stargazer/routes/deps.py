"""Request-scoped dependencies: app state, engagement service, caller identity."""

import logging
from typing import Optional

from fastapi import Depends, Request

from ..errors import Unauthenticated
from ..services import EngagementService, UserIdentity
from ..state import AppState

logger = logging.getLogger(__name__)


def get_app_state(request: Request) -> AppState:
    return request.app.state.stargazer


def get_engagement(state: AppState = Depends(get_app_state)) -> EngagementService:
    return state.engagement


def current_user(request: Request, state: AppState = Depends(get_app_state)) -> UserIdentity:
    """Caller identity for write operations; raises Unauthenticated (401)."""
    try:
        return state.identity.resolve_cookies(request.cookies)
    except Unauthenticated as exc:
        logger.info("rejected %s %s: %s", request.method, request.url.path, exc)
        raise


def optional_user(request: Request, state: AppState = Depends(get_app_state)) -> Optional[UserIdentity]:
    """Caller identity for reads; anonymous (None) when missing or invalid."""
    try:
        return state.identity.resolve_cookies(request.cookies)
    except Unauthenticated as exc:
        logger.debug("anonymous read on %s: %s", request.url.path, exc)
        return None
