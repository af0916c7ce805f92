"""Pydantic request/response models for the API."""

from .comments import CommentAuthor, CommentResponse, CreateCommentRequest
from .common import ErrorResponse
from .items import ItemResponse, UpdateStarRequest

__all__ = [
    "CommentAuthor",
    "CommentResponse",
    "CreateCommentRequest",
    "ErrorResponse",
    "ItemResponse",
    "UpdateStarRequest",
]
