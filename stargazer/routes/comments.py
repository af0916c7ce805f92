"""Comment endpoints for an item addressed as {repo}/{chart_name}."""

from fastapi import APIRouter, Depends

from ..models import CreateCommentRequest
from ..services import EngagementService, UserIdentity
from ..state import AppState
from ..utils import data_response, to_comment_response
from .deps import current_user, get_app_state, get_engagement

router = APIRouter()


def _item_id(repo: str, chart_name: str) -> str:
    return f"{repo}/{chart_name}"


@router.get("/{repo}/{chart_name}")
def list_comments(
    repo: str,
    chart_name: str,
    state: AppState = Depends(get_app_state),
    engagement: EngagementService = Depends(get_engagement),
):
    """Comments on an item in creation order. Unknown items have none."""
    comments = engagement.list_comments(_item_id(repo, chart_name))
    base = state.config.avatar_base_url
    return data_response([to_comment_response(cm, base) for cm in comments])


@router.post("/{repo}/{chart_name}")
def create_comment(
    repo: str,
    chart_name: str,
    request: CreateCommentRequest,
    user: UserIdentity = Depends(current_user),
    state: AppState = Depends(get_app_state),
    engagement: EngagementService = Depends(get_engagement),
):
    cm = engagement.add_comment(_item_id(repo, chart_name), request.text, user)
    return data_response(to_comment_response(cm, state.config.avatar_base_url), status_code=201)


@router.delete("/{repo}/{chart_name}/{comment_id}")
def delete_comment(
    repo: str,
    chart_name: str,
    comment_id: str,
    user: UserIdentity = Depends(current_user),
    state: AppState = Depends(get_app_state),
    engagement: EngagementService = Depends(get_engagement),
):
    """Delete one of the caller's own comments; returns the removed comment."""
    cm = engagement.delete_comment(_item_id(repo, chart_name), comment_id, user)
    return data_response(to_comment_response(cm, state.config.avatar_base_url), status_code=202)
