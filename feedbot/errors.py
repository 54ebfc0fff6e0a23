"""Error types raised by the engine and its collaborators.

Only the bot's failure policy may swallow one of these; everything else
propagates to the caller of the operation that produced it.
"""
from __future__ import annotations


class FeedbotError(Exception):
    """Base class for feedbot errors."""


class CapabilityError(FeedbotError):
    """The hosted bot lacks a capability an operation requires."""

    def __init__(self, capability: str, message: str = ""):
        self.capability = capability
        super().__init__(message or f"bot does not implement {capability}")


class InvalidTargetError(FeedbotError, ValueError):
    """A monitor could not be built for the requested target."""


class TransportError(FeedbotError):
    """A transport failed to execute a request."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message if status is None else f"{status}: {message}")
