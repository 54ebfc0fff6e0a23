from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from feedbot.domain import Request


class Transport(ABC):
    """Executes prepared requests against the platform.

    Implementations own authentication and the wire format. They must be safe
    to call from several threads at once, since direct actions run beside the
    polling loop.
    """

    @abstractmethod
    def do(self, request: Request) -> Any:  # pragma: no cover - interface
        """Return the decoded response body or raise ``TransportError``."""
        ...
