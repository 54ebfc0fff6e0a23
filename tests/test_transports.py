from __future__ import annotations

from typing import Any

import pytest
import requests

from feedbot.config import Settings
from feedbot.domain import Request
from feedbot.errors import TransportError
from feedbot.transports import HttpTransport, MockTransport


class _Resp:
    def __init__(self, status: int = 200, body: Any = None, reason: str = "OK") -> None:
        self.status_code = status
        self.ok = 200 <= status < 300
        self.reason = reason
        self._body = body

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("no json")
        return self._body


class _Session:
    def __init__(self, resp: _Resp | Exception) -> None:
        self.headers: dict[str, str] = {}
        self.resp = resp
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def _answer(self) -> _Resp:
        if isinstance(self.resp, Exception):
            raise self.resp
        return self.resp

    def get(self, url, params=None, timeout=None):
        self.calls.append(("GET", url, dict(params or {})))
        return self._answer()

    def post(self, url, data=None, timeout=None):
        self.calls.append(("POST", url, dict(data or {})))
        return self._answer()


def _settings(**overrides) -> Settings:
    return Settings(BASE_URL="https://api.test/", USER_AGENT="ua/1", **overrides)


def test_http_get_and_headers():
    session = _Session(_Resp(body={"ok": 1}))
    transport = HttpTransport(_settings(ACCESS_TOKEN="tok"), session=session)

    assert transport.do(Request(path="/api/info.json", params={"id": "t3_a"})) == {"ok": 1}
    assert session.calls == [("GET", "https://api.test/api/info.json", {"id": "t3_a"})]
    assert session.headers == {"User-Agent": "ua/1", "Authorization": "bearer tok"}


def test_http_post_sends_form_with_api_type():
    session = _Session(_Resp(body={"json": {"errors": []}}))
    transport = HttpTransport(_settings(), session=session)

    transport.do(Request(method="POST", path="/api/comment", params={"parent": "t3_a", "text": "x"}))

    assert session.calls[0][2] == {"api_type": "json", "parent": "t3_a", "text": "x"}
    assert "Authorization" not in session.headers


def test_http_status_error_carries_status():
    transport = HttpTransport(_settings(), session=_Session(_Resp(status=503, reason="Unavailable")))

    with pytest.raises(TransportError) as excinfo:
        transport.do(Request(path="/user/alice.json"))
    assert excinfo.value.status == 503


@pytest.mark.parametrize("resp", [requests.ConnectionError("down"), _Resp(body=None)])
def test_http_network_and_decode_errors(resp):
    transport = HttpTransport(_settings(), session=_Session(resp))

    with pytest.raises(TransportError):
        transport.do(Request(path="/user/alice.json"))


def test_mock_feed_pages_from_tip():
    transport = MockTransport()
    names = [transport.publish_post("alice", f"p{i}") for i in range(5)]

    resp = transport.do(Request(path="/user/alice.json", params={"before": names[1], "limit": 2}))
    got = [c["data"]["name"] for c in resp["data"]["children"]]

    assert got == [names[3], names[2]]


def test_mock_deleted_things_disappear():
    transport = MockTransport()
    name = transport.publish_post("alice", "gone soon")
    transport.delete(name)

    info = transport.do(Request(path="/api/info.json", params={"id": name}))
    assert info["data"]["children"] == []


def test_mock_queued_failures_raise_in_order():
    transport = MockTransport()
    first, second = TransportError("one"), TransportError("two")
    transport.fail_next(first, second)

    for expected in (first, second):
        with pytest.raises(TransportError) as excinfo:
            transport.do(Request(path="/user/alice.json"))
        assert excinfo.value is expected
    transport.do(Request(path="/user/alice.json"))
