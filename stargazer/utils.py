"""Pure helpers: avatar derivation, response formatting."""

import hashlib
from typing import Any, Dict

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .models import CommentAuthor, CommentResponse, ErrorResponse, ItemResponse
from .services import Comment, ItemView

DEFAULT_AVATAR_BASE_URL = "https://s.gravatar.com/avatar/"


def avatar_url(email: str, base_url: str = DEFAULT_AVATAR_BASE_URL) -> str:
    """Gravatar-style avatar URL: md5 of the trimmed, lower-cased email."""
    digest = hashlib.md5((email or "").strip().lower().encode("utf-8")).hexdigest()
    return f"{base_url}{digest}"


def to_item_response(view: ItemView) -> ItemResponse:
    return ItemResponse(
        id=view.id,
        type=view.type,
        stargazers_count=view.stargazers_count,
        has_starred=view.has_starred,
    )


def to_comment_response(cm: Comment, avatar_base_url: str = DEFAULT_AVATAR_BASE_URL) -> CommentResponse:
    """Wire form of a comment. The author's email never leaves the server, only its avatar hash."""
    author: Dict[str, Any] = cm.author
    return CommentResponse(
        id=cm.id,
        text=cm.text,
        created_at=cm.created_at,
        author=CommentAuthor(
            id=author.get("id", ""),
            name=author.get("name", ""),
            avatar_url=avatar_url(author.get("email", ""), avatar_base_url),
        ),
    )


def data_response(data: Any, status_code: int = 200) -> JSONResponse:
    """Wrap a payload in the {"data": ...} envelope."""
    return JSONResponse(status_code=status_code, content=jsonable_encoder({"data": data}))


def error_response(status_code: int, message: str) -> JSONResponse:
    body = ErrorResponse(code=status_code, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())
