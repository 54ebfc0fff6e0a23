from __future__ import annotations

from typing import Any

import pytest

from feedbot import api
from feedbot.domain import Request
from feedbot.errors import TransportError


class _FakeDo:
    def __init__(self, response: Any = None) -> None:
        self.response = response if response is not None else {"json": {"errors": []}}
        self.requests: list[Request] = []

    def __call__(self, request: Request) -> Any:
        self.requests.append(request)
        return self.response


def _listing(*children: tuple[str, dict[str, Any]]) -> dict[str, Any]:
    return {"kind": "Listing", "data": {"children": [{"kind": k, "data": d} for k, d in children]}}


def test_reply_builds_comment_request():
    do = _FakeDo()
    api.reply(do, "t3_abc", "hello")

    assert do.requests == [Request(method="POST", path="/api/comment", params={"parent": "t3_abc", "text": "hello"})]


def test_submit_uses_text_or_url_by_kind():
    do = _FakeDo()
    api.submit(do, "bots", "self", "t", "body")
    api.submit(do, "bots", "link", "t", "https://example.com")

    assert do.requests[0].params["text"] == "body"
    assert do.requests[1].params["url"] == "https://example.com"
    with pytest.raises(ValueError):
        api.submit(do, "bots", "video", "t", "x")


def test_write_errors_raise_transport_error():
    do = _FakeDo({"json": {"errors": [["RATELIMIT", "slow down", "ratelimit"]]}})

    with pytest.raises(TransportError, match="RATELIMIT slow down"):
        api.compose(do, "bob", "s", "t")


def test_scrape_splits_kinds_oldest_first():
    do = _FakeDo(
        _listing(
            ("t4", {"name": "t4_m", "subject": "hi"}),
            ("t1", {"name": "t1_c", "body": "c", "replies": ""}),
            ("t3", {"name": "t3_l", "title": "l"}),
            ("more", {"count": 3}),
        )
    )

    harvest = api.scrape(do, "/user/alice/", "t3_tip", 25)

    assert do.requests[0].path == "/user/alice.json"
    assert do.requests[0].params == {"limit": 25, "before": "t3_tip"}
    assert harvest.newest == "t4_m"
    assert [l.name for l in harvest.links] == ["t3_l"]
    assert [c.name for c in harvest.comments] == ["t1_c"]
    assert [m.subject for m in harvest.messages] == ["hi"]
    assert len(harvest) == 3


def test_scrape_without_tip_omits_before():
    do = _FakeDo(_listing())
    harvest = api.scrape(do, "/user/alice", "", 10)

    assert do.requests[0].params == {"limit": 10}
    assert len(harvest) == 0
    assert harvest.newest == ""


def test_is_there_thing():
    assert api.is_there_thing(_FakeDo(_listing(("t3", {"name": "t3_a"}))), "t3_a") is True
    assert api.is_there_thing(_FakeDo(_listing()), "t3_a") is False


def test_thread_rejects_unexpected_shape():
    with pytest.raises(TransportError):
        api.thread(_FakeDo({"kind": "Listing"}), "/r/bots/comments/a/")
