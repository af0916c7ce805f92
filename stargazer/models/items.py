"""Request/response models for item stars."""

from typing import Optional

from pydantic import BaseModel


class ItemResponse(BaseModel):
    id: str
    type: str
    stargazers_count: int = 0
    has_starred: bool = False


class UpdateStarRequest(BaseModel):
    """Body of PUT /v1/stars. id is checked by the service so a blank id is a 400, not a 422."""

    id: str = ""
    type: Optional[str] = None
    has_starred: bool = False
