from __future__ import annotations

import itertools
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from feedbot.domain import Request
from feedbot.errors import TransportError
from feedbot.logging_setup import get_logger
from feedbot.transports.base import Transport


@dataclass
class _Thing:
    kind: str
    data: dict[str, Any]
    deleted: bool = False


@dataclass
class _Feed:
    # fullnames, oldest first
    names: list[str] = field(default_factory=list)


class MockTransport(Transport):
    """In-memory platform that answers the requests built by ``feedbot.api``.

    - Users publish posts and comments through ``publish_post``/``publish_comment``
    - User feeds honour ``before`` and ``limit`` the way listings do
    - Writes (replies, messages, submissions) are recorded for inspection
    - ``fail_next`` queues errors raised by the next calls to ``do``
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._last_ts = 0.0
        self._things: dict[str, _Thing] = {}
        self._feeds: dict[str, _Feed] = {}
        self._failures: deque[Exception] = deque()
        self._logger = get_logger(self.__class__.__name__)

        self.requests: list[Request] = []
        self.replies: list[dict[str, Any]] = []
        self.messages: list[dict[str, Any]] = []
        self.submissions: list[dict[str, Any]] = []

    # Public API -----------------------------------------------------------------
    def do(self, request: Request) -> Any:
        with self._lock:
            self.requests.append(request)
            if self._failures:
                raise self._failures.popleft()

            path, params = request.path, request.params
            if request.method == "POST":
                return self._write(path, params)
            if path == "/api/info.json":
                return self._info(str(params.get("id", "")))
            if path.startswith("/user/") and path.endswith(".json"):
                user = path[len("/user/") : -len(".json")]
                return self._user_feed(user, str(params.get("before", "")), int(params.get("limit", 25)))
            if path.startswith("/r/") and "/comments/" in path:
                return self._thread(path)
            raise TransportError(f"GET {path}: not found", status=404)

    # Seeding helpers ------------------------------------------------------------
    def publish_post(self, user: str, title: str, subreddit: str = "test", selftext: str = "") -> str:
        with self._lock:
            ident = self._next_id()
            data = {
                "id": ident,
                "name": f"t3_{ident}",
                "author": user,
                "title": title,
                "subreddit": subreddit,
                "selftext": selftext,
                "is_self": True,
                "permalink": f"/r/{subreddit}/comments/{ident}/",
                "created_utc": self._stamp(),
            }
            return self._store(user, _Thing("t3", data))

    def publish_comment(self, user: str, body: str, parent: str) -> str:
        with self._lock:
            ident = self._next_id()
            parent_thing = self._things.get(parent)
            link_id = parent if parent.startswith("t3_") else (parent_thing.data.get("link_id", "") if parent_thing else "")
            data = {
                "id": ident,
                "name": f"t1_{ident}",
                "author": user,
                "body": body,
                "parent_id": parent,
                "link_id": link_id,
                "subreddit": parent_thing.data.get("subreddit", "") if parent_thing else "",
                "created_utc": self._stamp(),
            }
            return self._store(user, _Thing("t1", data))

    def delete(self, name: str) -> None:
        with self._lock:
            if name in self._things:
                self._things[name].deleted = True

    def fail_next(self, *errors: Exception) -> None:
        with self._lock:
            self._failures.extend(errors)

    # Internals ------------------------------------------------------------------
    def _next_id(self) -> str:
        return format(next(self._ids), "x")

    def _stamp(self) -> float:
        # strictly increasing so ordering by creation time is total
        self._last_ts = max(time.time(), self._last_ts + 0.001)
        return self._last_ts

    def _store(self, user: str, thing: _Thing) -> str:
        name = thing.data["name"]
        self._things[name] = thing
        self._feeds.setdefault(user.lower(), _Feed()).names.append(name)
        return name

    def _live(self, names: list[str]) -> list[_Thing]:
        return [self._things[n] for n in names if not self._things[n].deleted]

    def _user_feed(self, user: str, before: str, limit: int) -> dict[str, Any]:
        feed = self._feeds.get(user.lower(), _Feed())
        names = feed.names
        if before:
            if before not in names or self._things[before].deleted:
                # listings answer an unknown anchor with nothing
                return _listing([])
            names = names[names.index(before) + 1 :]
            things = self._live(names)[:limit]
        else:
            things = self._live(names)[-limit:] if limit > 0 else []
        # listings are newest first
        return _listing(list(reversed(things)))

    def _info(self, name: str) -> dict[str, Any]:
        thing = self._things.get(name)
        if thing is None or thing.deleted:
            return _listing([])
        return _listing([thing])

    def _thread(self, path: str) -> list[dict[str, Any]]:
        ident = path.split("/comments/", 1)[1].split("/", 1)[0].removesuffix(".json")
        link = self._things.get(f"t3_{ident}")
        if link is None or link.deleted:
            raise TransportError(f"GET {path}: not found", status=404)
        return [_listing([link]), _listing(self._children_of(link.data["name"]))]

    def _children_of(self, parent: str) -> list[_Thing]:
        out = []
        for thing in self._things.values():
            if thing.kind == "t1" and not thing.deleted and thing.data["parent_id"] == parent:
                replies = self._children_of(thing.data["name"])
                data = {**thing.data, "replies": _listing(replies) if replies else ""}
                out.append(_Thing("t1", data))
        return out

    def _write(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        if path == "/api/comment":
            if params.get("parent") not in self._things:
                return _errors("INVALID_PARENT", "parent does not exist")
            self.replies.append(dict(params))
        elif path == "/api/compose":
            self.messages.append(dict(params))
        elif path == "/api/submit":
            self.submissions.append(dict(params))
        else:
            raise TransportError(f"POST {path}: not found", status=404)
        self._logger.debug("Recorded write to %s", path)
        return {"json": {"errors": []}}


def _listing(things: list[_Thing]) -> dict[str, Any]:
    return {
        "kind": "Listing",
        "data": {"children": [{"kind": t.kind, "data": t.data} for t in things]},
    }


def _errors(code: str, message: str) -> dict[str, Any]:
    return {"json": {"errors": [[code, message, ""]]}}
