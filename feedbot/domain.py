from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _Thing(BaseModel):
    """Common fields of every item the platform hands back."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    name: str = ""
    author: str = ""
    created_utc: float = 0.0


class Comment(_Thing):
    """A comment, optionally carrying its reply tree."""

    body: str = ""
    subreddit: str = ""
    link_id: str = ""
    parent_id: str = ""
    replies: list[Comment] = Field(default_factory=list)


class Link(_Thing):
    """A link or self post. ``comments`` is only filled by a thread digest."""

    title: str = ""
    subreddit: str = ""
    selftext: str = ""
    url: str = ""
    permalink: str = ""
    is_self: bool = False
    comments: list[Comment] = Field(default_factory=list)


class Message(_Thing):
    """A private message or an inbox notification about a comment."""

    dest: str = ""
    subject: str = ""
    body: str = ""
    was_comment: bool = False


class Harvest(BaseModel):
    """New items returned by one scrape, oldest first.

    ``newest`` is the fullname of the most recent item of any kind.
    """

    newest: str = ""
    links: list[Link] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)
    messages: list[Message] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.links) + len(self.comments) + len(self.messages)


class Request(BaseModel):
    """A prepared platform call; transports decide how to put it on the wire."""

    model_config = ConfigDict(frozen=True)

    method: Literal["GET", "POST"] = "GET"
    path: str
    params: dict[str, str | int] = Field(default_factory=dict)
