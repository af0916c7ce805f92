"""Root and health endpoints."""

from fastapi import APIRouter, Depends

from ..state import AppState
from ..utils import error_response
from .deps import get_app_state

router = APIRouter()

VERSION = "1.0.0"


@router.get("/")
def root(state: AppState = Depends(get_app_state)):
    return {
        "name": "Stargazer Engagement API",
        "version": VERSION,
        "store": type(state.item_store).__name__,
        "endpoints": {
            "stars": ["/v1/stars"],
            "comments": ["/v1/comments/{repo}/{chart_name}", "/v1/comments/{repo}/{chart_name}/{comment_id}"],
            "health": ["/live", "/ready"],
        },
    }


@router.get("/live")
def live():
    return {"status": "ok"}


@router.get("/ready")
def ready(state: AppState = Depends(get_app_state)):
    """Ready once the item store answers."""
    if not state.item_store.ping():
        return error_response(503, "item store not reachable")
    return {"status": "ok"}
