from __future__ import annotations

import threading
from typing import Any

import requests

from feedbot.config import Settings
from feedbot.domain import Request
from feedbot.errors import TransportError
from feedbot.logging_setup import get_logger
from feedbot.transports.base import Transport


class HttpTransport(Transport):
    """Plain HTTP transport over a ``requests`` session.

    Sends a bearer token when one is configured. There is no retry or rate
    limiting here; a failed call surfaces as ``TransportError``.
    """

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        self.settings = settings
        self._base_url = settings.BASE_URL.rstrip("/")
        self._timeout = settings.HTTP_TIMEOUT_S
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = settings.USER_AGENT
        if settings.ACCESS_TOKEN:
            self._session.headers["Authorization"] = f"bearer {settings.ACCESS_TOKEN}"
        # requests.Session is not documented as thread safe
        self._lock = threading.Lock()
        self._logger = get_logger(self.__class__.__name__)

    def do(self, request: Request) -> Any:
        url = self._base_url + request.path
        self._logger.debug("%s %s %s", request.method, url, request.params)
        try:
            with self._lock:
                if request.method == "GET":
                    resp = self._session.get(url, params=request.params, timeout=self._timeout)
                else:
                    data = {"api_type": "json", **request.params}
                    resp = self._session.post(url, data=data, timeout=self._timeout)
        except requests.RequestException as exc:
            raise TransportError(f"{request.method} {request.path} failed: {exc}") from exc

        if not resp.ok:
            raise TransportError(f"{request.method} {request.path}: {resp.reason}", status=resp.status_code)
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(f"{request.method} {request.path}: response is not JSON") from exc
