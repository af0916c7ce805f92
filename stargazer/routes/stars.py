"""Star endpoints: list items with star counts, star/unstar an item."""

from typing import Optional

from fastapi import APIRouter, Depends

from ..models import UpdateStarRequest
from ..services import EngagementService, StarStatus, UserIdentity
from ..utils import data_response, to_item_response
from .deps import current_user, get_engagement, optional_user

router = APIRouter()


@router.get("")
def list_stars(
    engagement: EngagementService = Depends(get_engagement),
    user: Optional[UserIdentity] = Depends(optional_user),
):
    """List all items with stargazer counts. Signing in only adds has_starred."""
    items = engagement.list_items(user)
    return data_response([to_item_response(v) for v in items])


@router.put("")
def update_star(
    request: UpdateStarRequest,
    user: UserIdentity = Depends(current_user),
    engagement: EngagementService = Depends(get_engagement),
):
    """
    Star or unstar an item, creating it if needed.
    201 when the item was created or updated, 200 when the caller had already starred it.
    """
    result = engagement.set_star(request.id, request.has_starred, user, item_type=request.type)
    status_code = 200 if result.status is StarStatus.ALREADY_SATISFIED else 201
    return data_response(to_item_response(result.item), status_code=status_code)
