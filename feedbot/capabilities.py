"""Optional behaviours a hosted bot may implement.

The engine never requires a bot base class. At each use site it checks the bot
against one of these protocols with ``isinstance`` and falls back to a default
when the check fails, so a bot opts into exactly the hooks it defines.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from feedbot.domain import Comment, Link


@runtime_checkable
class Loader(Protocol):
    """Runs once before the engine starts polling; raising aborts the run."""

    def set_up(self) -> None:  # pragma: no cover - protocol
        ...


@runtime_checkable
class Tearer(Protocol):
    """Runs once when the engine stops, provided set-up succeeded."""

    def tear_down(self) -> None:  # pragma: no cover - protocol
        ...


@runtime_checkable
class Failer(Protocol):
    """Decides whether a polling error is survivable.

    Return True to keep the engine running, False to make the error fatal.
    """

    def fail(self, err: Exception) -> bool:  # pragma: no cover - protocol
        ...


@runtime_checkable
class BlockTimer(Protocol):
    """Seconds to wait between polling passes, asked before every wait."""

    def block_time(self) -> float:  # pragma: no cover - protocol
        ...


@runtime_checkable
class UserHandler(Protocol):
    """Receives new posts and comments from watched users."""

    def user_post(self, post: Link) -> None:  # pragma: no cover - protocol
        ...

    def user_comment(self, comment: Comment) -> None:  # pragma: no cover - protocol
        ...
