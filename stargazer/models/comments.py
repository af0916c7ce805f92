"""Comment-related Pydantic models."""

from datetime import datetime

from pydantic import BaseModel


class CommentAuthor(BaseModel):
    id: str
    name: str = ""
    avatar_url: str = ""


class CommentResponse(BaseModel):
    id: str
    text: str
    created_at: datetime
    author: CommentAuthor


class CreateCommentRequest(BaseModel):
    text: str = ""
