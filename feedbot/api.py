"""Request builders and response readers for individual platform calls.

Every function takes ``do``, the ``Transport.do`` of the caller, so the same
helpers serve the polling loop and the one-shot actions.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

from feedbot.domain import Comment, Harvest, Link, Message, Request
from feedbot.errors import TransportError

Do = Callable[[Request], Any]


def reply(do: Do, parent_name: str, text: str) -> None:
    _check(do(Request(method="POST", path="/api/comment", params={"parent": parent_name, "text": text})))


def compose(do: Do, user: str, subject: str, text: str) -> None:
    _check(
        do(
            Request(
                method="POST",
                path="/api/compose",
                params={"to": user, "subject": subject, "text": text},
            )
        )
    )


def submit(do: Do, subreddit: str, kind: str, title: str, content: str) -> None:
    if kind not in ("self", "link"):
        raise ValueError(f"unknown submission kind {kind!r}")
    params: dict[str, str | int] = {"sr": subreddit, "kind": kind, "title": title}
    params["text" if kind == "self" else "url"] = content
    _check(do(Request(method="POST", path="/api/submit", params=params)))


def thread(do: Do, permalink: str) -> Link:
    """Fetch a link with its full comment tree."""
    path = permalink.rstrip("/") + ".json"
    resp = do(Request(path=path))
    if not isinstance(resp, list) or len(resp) != 2:
        raise TransportError(f"GET {path}: unexpected thread shape")

    links = [c["data"] for c in _children(resp[0]) if c.get("kind") == "t3"]
    if not links:
        raise TransportError(f"GET {path}: thread has no link")
    link = Link.model_validate(links[0])
    link.comments = _comment_tree(resp[1])
    return link


def scrape(do: Do, path: str, tip: str, limit: int) -> Harvest:
    """Return items newer than ``tip`` at ``path``, oldest first."""
    params: dict[str, str | int] = {"limit": limit}
    if tip:
        params["before"] = tip
    resp = do(Request(path=path.rstrip("/") + ".json", params=params))

    children = _children(resp)
    harvest = Harvest(newest=children[0].get("data", {}).get("name", "") if children else "")
    # listings are newest first
    for child in reversed(children):
        kind, data = child.get("kind"), child.get("data", {})
        if kind == "t3":
            harvest.links.append(Link.model_validate(data))
        elif kind == "t1":
            harvest.comments.append(Comment.model_validate(_without_replies(data)))
        elif kind == "t4":
            harvest.messages.append(Message.model_validate(data))
    return harvest


def is_there_thing(do: Do, name: str) -> bool:
    """Report whether the item with fullname ``name`` still exists."""
    return bool(_children(do(Request(path="/api/info.json", params={"id": name}))))


def _children(listing: Any) -> list[dict[str, Any]]:
    if not isinstance(listing, dict):
        return []
    return listing.get("data", {}).get("children", [])


def _without_replies(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k != "replies"}


def _comment_tree(listing: Any) -> list[Comment]:
    comments = []
    for child in _children(listing):
        # "more" stubs are not expanded
        if child.get("kind") != "t1":
            continue
        data = child["data"]
        comment = Comment.model_validate(_without_replies(data))
        comment.replies = _comment_tree(data.get("replies"))
        comments.append(comment)
    return comments


def _check(resp: Any) -> None:
    errors = resp.get("json", {}).get("errors", []) if isinstance(resp, dict) else []
    if errors:
        raise TransportError("; ".join(" ".join(str(part) for part in err if part) for err in errors))
