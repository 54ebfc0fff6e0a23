from __future__ import annotations

import queue
from typing import Any

from feedbot import api
from feedbot.capabilities import BlockTimer, Failer, Loader, Tearer, UserHandler
from feedbot.config import Settings
from feedbot.domain import Harvest, Link
from feedbot.errors import CapabilityError
from feedbot.logging_setup import get_logger
from feedbot.monitor import DEFAULT_SCRAPE_LIMIT, Monitor, user_monitor
from feedbot.registry import MonitorRegistry
from feedbot.transports.base import Transport

# Seconds between polling passes unless the bot says otherwise.
DEFAULT_BLOCK_TIME = 60.0 / 30


class Engine:
    """Runs a bot: polls its monitors and routes events to its capabilities.

    ``run`` blocks the calling thread. Every other public method may be called
    from any thread, including from inside a bot handler during a pass.
    """

    def __init__(self, bot: Any, transport: Transport, settings: Settings | None = None) -> None:
        self.bot = bot
        self.transport = transport
        self.registry = MonitorRegistry()
        self._default_block_time = settings.BLOCK_TIME_S if settings else DEFAULT_BLOCK_TIME
        self._scrape_limit = settings.SCRAPE_LIMIT if settings else DEFAULT_SCRAPE_LIMIT
        self._stop_sig: queue.Queue[bool] = queue.Queue(maxsize=1)
        self._stopping = False
        self._logger = get_logger(self.__class__.__name__)

    # Direct actions -------------------------------------------------------------
    def reply(self, parent_name: str, text: str) -> None:
        api.reply(self.transport.do, parent_name, text)

    def send_message(self, user: str, subject: str, text: str) -> None:
        api.compose(self.transport.do, user, subject, text)

    def self_post(self, subreddit: str, title: str, text: str) -> None:
        api.submit(self.transport.do, subreddit, "self", title, text)

    def link_post(self, subreddit: str, title: str, url: str) -> None:
        api.submit(self.transport.do, subreddit, "link", title, url)

    def digest_thread(self, permalink: str) -> Link:
        return api.thread(self.transport.do, permalink)

    # Watches --------------------------------------------------------------------
    def watch_user(self, user: str) -> None:
        if not isinstance(self.bot, UserHandler):
            raise CapabilityError("UserHandler", "bot cannot handle user posts or comments")

        mon = user_monitor(self._scrape, self.bot.user_post, self.bot.user_comment, user, limit=self._scrape_limit)
        if self.registry.add(mon, key=user) is not None:
            self._logger.info("Replaced existing monitor for user %s", user)
        else:
            self._logger.info("Watching user %s", user)

    def unwatch_user(self, user: str) -> None:
        if self.registry.remove(user):
            self._logger.info("Stopped watching user %s", user)

    def add_monitor(self, monitor: Monitor) -> None:
        """Register a monitor that is not tied to a user; it lives until the engine does."""
        self.registry.add(monitor)

    # Lifecycle ------------------------------------------------------------------
    def stop(self) -> None:
        try:
            self._stop_sig.put_nowait(True)
        except queue.Full:
            self._logger.debug("Stop already pending")

    def run(self) -> None:
        if isinstance(self.bot, Loader):
            self.bot.set_up()

        self._stopping = False
        try:
            self._logger.info("Engine started with %d monitor(s)", len(self.registry))
            while not self._stopping:
                try:
                    self._stop_sig.get(timeout=self._block_time())
                except queue.Empty:
                    pass
                else:
                    self._stopping = True
                    continue

                try:
                    self._update_monitors()
                except Exception as err:
                    if not self._should_continue(err):
                        self._logger.error("Polling failed; stopping: %s", err)
                        raise
                    self._logger.warning("Polling failed; continuing: %s", err)
            self._logger.info("Engine stopped")
        finally:
            if isinstance(self.bot, Tearer):
                self.bot.tear_down()

    # Internals ------------------------------------------------------------------
    def _update_monitors(self) -> None:
        monitors = self.registry.snapshot()
        self._logger.debug("Polling %d monitor(s)", len(monitors))
        for mon in monitors:
            mon.update(self._scrape, self._exists)

    def _scrape(self, path: str, tip: str, limit: int) -> Harvest:
        return api.scrape(self.transport.do, path, tip, limit)

    def _exists(self, name: str) -> bool:
        return api.is_there_thing(self.transport.do, name)

    def _should_continue(self, err: Exception) -> bool:
        return isinstance(self.bot, Failer) and self.bot.fail(err)

    def _block_time(self) -> float:
        if isinstance(self.bot, BlockTimer):
            # a negative wait polls at once
            return max(0.0, self.bot.block_time())
        return self._default_block_time
