"""feedbot - polling engine for bots on a link/comment/message platform

The engine polls registered monitors on a fixed cadence and dispatches new
items to whichever optional capabilities the hosted bot implements. Targets
can be watched and unwatched while the engine is running.
"""

from feedbot.engine import DEFAULT_BLOCK_TIME, Engine

__all__ = [
    "DEFAULT_BLOCK_TIME",
    "Engine",
    "__version__",
]

__version__ = "0.1.0"
