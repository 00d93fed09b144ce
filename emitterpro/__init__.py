"""
emitterpro: synchronous in-process event emitter.

This package contains:
- Events (the emitter, listener records and event keys)
- Logging (structlog configuration)
- Config (environment-driven settings)
"""

from emitterpro.events import Emitter, EventKey, ListenerRecord, Symbol, get_emitter

__version__ = "0.1.0"

__all__ = [
    "Emitter",
    "EventKey",
    "ListenerRecord",
    "Symbol",
    "get_emitter",
]
