"""
Event emitter module.

Provides the synchronous, in-process emitter and its event key types.
"""

from emitterpro.events.emitter import (
    Emitter,
    Listener,
    ListenerRecord,
    emit,
    get_emitter,
    on,
    once,
)
from emitterpro.events.keys import EventKey, Symbol

__all__ = [
    "Emitter",
    "EventKey",
    "Listener",
    "ListenerRecord",
    "Symbol",
    "emit",
    "get_emitter",
    "on",
    "once",
]
