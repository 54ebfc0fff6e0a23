from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable

from feedbot.domain import Comment, Harvest, Link
from feedbot.errors import InvalidTargetError
from feedbot.logging_setup import get_logger

Scrape = Callable[[str, str, int], Harvest]
Exists = Callable[[str], bool]
PostHandler = Callable[[Link], None]
CommentHandler = Callable[[Comment], None]

DEFAULT_SCRAPE_LIMIT = 100
# empty scrapes between checks that the tip still exists
EXISTS_CHECK_EVERY = 3
ANCHOR_HISTORY = 10

_USERNAME = re.compile(r"^[A-Za-z0-9_-]{3,20}$")


class Monitor(ABC):
    """Polls one target and remembers the newest item it has seen (its tip)."""

    @abstractmethod
    def update(self, scrape: Scrape, exists: Exists) -> None:  # pragma: no cover - interface
        """Fetch items newer than the tip and hand them to the handlers."""
        ...


class UserMonitor(Monitor):
    """Follows the posts and comments of a single user.

    The first update only records the current tip so that history is not
    replayed. The tip moves forward one item at a time as each handler
    returns, so an item whose handler raised is offered again on the next
    update along with everything after it.

    Listings return nothing for a deleted anchor, so every few empty scrapes
    the tip is checked for deletion. A deleted tip falls back to the newest
    earlier tip that still exists; items already delivered from there on are
    skipped. With no surviving anchor the monitor primes again.
    """

    def __init__(
        self,
        user: str,
        post_handler: PostHandler,
        comment_handler: CommentHandler,
        limit: int = DEFAULT_SCRAPE_LIMIT,
    ) -> None:
        if not _USERNAME.match(user or ""):
            raise InvalidTargetError(f"invalid username {user!r}")
        self.user = user
        self.path = f"/user/{user}"
        self.tip = ""
        self._primed = False
        self._limit = limit
        self._post = post_handler
        self._comment = comment_handler
        # earlier tips, oldest first
        self._anchors: deque[str] = deque(maxlen=ANCHOR_HISTORY)
        self._delivered: deque[str] = deque(maxlen=limit)
        self._empty_scrapes = 0
        self._logger = get_logger(self.__class__.__name__)

    def update(self, scrape: Scrape, exists: Exists) -> None:
        harvest = scrape(self.path, self.tip, self._limit if self._primed else 1)

        if not self._primed:
            self._primed = True
            self._move_tip(harvest.newest)
            self._logger.debug("Primed %s at tip %r", self.user, self.tip)
            return

        if not len(harvest):
            self._empty_scrapes += 1
            if self.tip and self._empty_scrapes % EXISTS_CHECK_EVERY == 0 and not exists(self.tip):
                self._fall_back(exists)
            return
        self._empty_scrapes = 0

        # interleave posts and comments in the order they were made
        items: list[Link | Comment] = [*harvest.links, *harvest.comments]
        items.sort(key=lambda item: item.created_utc)
        for item in items:
            if item.name in self._delivered:
                continue
            if isinstance(item, Link):
                self._post(item)
            else:
                self._comment(item)
            self._delivered.append(item.name)
            self._move_tip(item.name)
        self._move_tip(harvest.newest)

    def _move_tip(self, name: str) -> None:
        if not name or name == self.tip:
            return
        if self.tip:
            self._anchors.append(self.tip)
        self.tip = name

    def _fall_back(self, exists: Exists) -> None:
        gone = self.tip
        while self._anchors:
            anchor = self._anchors.pop()
            if exists(anchor):
                self._logger.info("Tip %s of %s is gone; resuming from %s", gone, self.user, anchor)
                self.tip = anchor
                return
        self._logger.info("Tip %s of %s is gone; re-priming", gone, self.user)
        self.tip = ""
        self._primed = False


def user_monitor(
    scrape: Scrape,
    post_handler: PostHandler,
    comment_handler: CommentHandler,
    user: str,
    limit: int = DEFAULT_SCRAPE_LIMIT,
) -> UserMonitor:
    """Build a monitor for ``user`` and prime it with one scrape.

    Priming here means a user that does not exist fails at watch time rather
    than on the first polling pass.
    """
    mon = UserMonitor(user, post_handler, comment_handler, limit=limit)
    mon.update(scrape, lambda name: True)
    return mon
