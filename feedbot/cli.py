from __future__ import annotations

import json
import threading

import typer

from feedbot.config import Settings, load_settings
from feedbot.domain import Comment, Link
from feedbot.engine import Engine
from feedbot.logging_setup import get_logger, setup_logging
from feedbot.transports import HttpTransport, MockTransport, Transport

app = typer.Typer(help="feedbot - poll users and act on a link/comment platform")


class LoggingBot:
    """Logs everything watched users do and survives transport errors."""

    def __init__(self) -> None:
        self._logger = get_logger(self.__class__.__name__)

    def user_post(self, post: Link) -> None:
        self._logger.info("[post] %s in r/%s: %s", post.author, post.subreddit, post.title)

    def user_comment(self, comment: Comment) -> None:
        self._logger.info("[comment] %s on %s: %s", comment.author, comment.link_id, comment.body)

    def fail(self, err: Exception) -> bool:
        self._logger.warning("Ignoring polling error: %s", err)
        return True


class PacedLoggingBot(LoggingBot):
    """A LoggingBot that polls on its own cadence."""

    def __init__(self, interval: float) -> None:
        super().__init__()
        self._interval = interval

    def block_time(self) -> float:
        return self._interval


def _build_transport(settings: Settings) -> Transport:
    key = settings.TRANSPORT.lower()
    if key == "mock":
        return MockTransport()
    if key == "http":
        return HttpTransport(settings)
    raise typer.BadParameter("TRANSPORT must be 'mock' or 'http'.")


def _build_engine(settings: Settings, bot=None) -> Engine:
    return Engine(bot if bot is not None else LoggingBot(), _build_transport(settings), settings)


@app.callback()
def main(json_logs: bool = typer.Option(False, "--json-logs", help="Enable JSON logs")):
    settings = load_settings()
    setup_logging(json_logs=json_logs or settings.LOG_JSON, level=settings.LOG_LEVEL)


@app.command()
def run(
    users: list[str] = typer.Option([], "--user", "-u", help="User to watch; repeatable"),
    interval: float | None = typer.Option(None, "--interval", help="Seconds between polls"),
):
    """Watch users and log their new posts and comments until interrupted."""
    settings = load_settings()
    bot = LoggingBot() if interval is None else PacedLoggingBot(interval)
    engine = _build_engine(settings, bot)

    for user in [*settings.watch_users, *users]:
        engine.watch_user(user)

    errors: list[BaseException] = []

    def _target() -> None:
        try:
            engine.run()
        except Exception as exc:
            errors.append(exc)

    worker = threading.Thread(target=_target, name="feedbot-engine")
    worker.start()
    try:
        while worker.is_alive():
            worker.join(timeout=1.0)
    except (KeyboardInterrupt, SystemExit):
        typer.echo("Stopping...")
        engine.stop()
        worker.join()

    if errors:
        raise errors[0]


@app.command()
def reply(parent: str = typer.Option(..., "--parent"), text: str = typer.Option(..., "--text")):
    engine = _build_engine(load_settings())
    engine.reply(parent, text)
    typer.echo(f"Replied to {parent}")


@app.command()
def message(
    user: str = typer.Option(..., "--to"),
    subject: str = typer.Option(..., "--subject"),
    text: str = typer.Option(..., "--text"),
):
    engine = _build_engine(load_settings())
    engine.send_message(user, subject, text)
    typer.echo(f"Sent message to {user}")


@app.command("self-post")
def self_post(
    subreddit: str = typer.Option(..., "--subreddit"),
    title: str = typer.Option(..., "--title"),
    text: str = typer.Option("", "--text"),
):
    engine = _build_engine(load_settings())
    engine.self_post(subreddit, title, text)
    typer.echo(f"Posted to r/{subreddit}")


@app.command("link-post")
def link_post(
    subreddit: str = typer.Option(..., "--subreddit"),
    title: str = typer.Option(..., "--title"),
    url: str = typer.Option(..., "--url"),
):
    engine = _build_engine(load_settings())
    engine.link_post(subreddit, title, url)
    typer.echo(f"Posted to r/{subreddit}")


@app.command()
def thread(permalink: str = typer.Argument(...)):
    """Print a thread and its comment tree as JSON."""
    engine = _build_engine(load_settings())
    link = engine.digest_thread(permalink)
    typer.echo(json.dumps(link.model_dump(), indent=2, ensure_ascii=False))
