from .base import Transport
from .http import HttpTransport
from .mock import MockTransport

__all__ = ["Transport", "HttpTransport", "MockTransport"]
