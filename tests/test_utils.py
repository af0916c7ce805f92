"""Response formatting helpers."""

import hashlib
import json
from datetime import datetime, timezone

from stargazer.services import Comment, ItemView
from stargazer.utils import avatar_url, data_response, error_response, to_comment_response, to_item_response


def test_avatar_url_is_md5_of_normalized_email():
    expected = hashlib.md5(b"rick@sanchez.com").hexdigest()
    assert avatar_url("rick@sanchez.com") == f"https://s.gravatar.com/avatar/{expected}"
    assert avatar_url("  Rick@Sanchez.com ") == avatar_url("rick@sanchez.com")


def test_avatar_url_custom_base():
    assert avatar_url("a@b.c", "https://avatars.example/").startswith("https://avatars.example/")


def test_comment_response_hides_email():
    cm = Comment(
        id="c1",
        text="Hello",
        created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        author={"id": "u1", "name": "Rick", "email": "rick@sanchez.com"},
    )
    body = to_comment_response(cm).model_dump()
    assert body["author"] == {"id": "u1", "name": "Rick", "avatar_url": avatar_url("rick@sanchez.com")}


def test_item_response():
    view = ItemView(id="stable/wordpress", type="chart", stargazers_count=3, has_starred=True)
    assert to_item_response(view).model_dump() == {
        "id": "stable/wordpress", "type": "chart", "stargazers_count": 3, "has_starred": True,
    }


def test_envelopes():
    ok = data_response([{"id": "one"}, {"id": "two"}])
    assert ok.status_code == 200
    assert json.loads(ok.body) == {"data": [{"id": "one"}, {"id": "two"}]}

    err = error_response(404, "not found")
    assert err.status_code == 404
    assert json.loads(err.body) == {"code": 404, "message": "not found"}
