"""
Synchronous event emitter.

Provides:
- Ordered listener registration (append or prepend)
- One-shot listeners that unregister themselves after the first call
- Removal by callback identity or per event name
- Synchronous, in-order dispatch with positional arguments

Listeners run in the caller's thread, one after the other. An exception
raised by a listener propagates out of ``emit`` and the listeners after
it are not called.

Example:
    emitter = Emitter()

    emitter.on("foo", lambda: print("foo 1"))
    emitter.on("foo", lambda: print("foo 2"))
    emitter.emit("foo")
    # foo 1
    # foo 2

    # Mutators return the emitter, so calls can be chained
    emitter.on("bar", handler).once("bar", other).off("foo")
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import wraps
from types import MethodType
from typing import Any, Generic, TypeVar

from emitterpro.events.keys import EventKey
from emitterpro.logging_config import get_logger

logger = get_logger(__name__)

Listener = Callable[..., Any]

F = TypeVar("F", bound=Listener)


# =============================================================================
# Helpers
# =============================================================================


def _same_callback(a: Any, b: Any) -> bool:
    """Identity comparison for callbacks."""
    if a is b:
        return True
    # Bound methods are re-created on every attribute access
    return (
        isinstance(a, MethodType)
        and isinstance(b, MethodType)
        and a.__self__ is b.__self__
        and a.__func__ is b.__func__
    )


def _call(callback: Listener, context: Any, args: tuple) -> Any:
    if context is None:
        return callback(*args)
    return callback(context, *args)


def _callback_name(callback: Any) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)


# =============================================================================
# Listener Record
# =============================================================================


@dataclass(eq=False)
class ListenerRecord(Generic[F]):
    """
    One registered subscription.

    Attributes:
        raw: Callback supplied at registration
        dispatch: Callback invoked on emit; ``raw`` itself, or the
            self-removing wrapper for one-shot registrations
        context: Receiver passed as the first argument to ``raw``
        removed: Set once the record has been unregistered
    """

    raw: F
    dispatch: F
    context: Any = None
    removed: bool = field(default=False, repr=False)

    @property
    def is_once(self) -> bool:
        return self.dispatch is not self.raw

    def invoke(self, args: tuple) -> None:
        if self.is_once:
            # The wrapper binds its own context
            self.dispatch(*args)
        else:
            _call(self.raw, self.context, args)


# =============================================================================
# Emitter
# =============================================================================


class Emitter(Generic[F]):
    """
    Registry mapping event keys to ordered lists of listeners.

    Features:
    - Same callback may be registered any number of times; each
      registration is an independent record
    - ``once`` listeners remove themselves right after they run
    - ``emit`` walks a snapshot of the listeners and skips records
      unregistered before their turn; listeners added during a pass
      first run on the next ``emit``
    - Recursive ``emit`` from inside a listener runs depth-first

    Not thread safe. Wrap it in a lock when shared between threads.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventKey, list[ListenerRecord[F]]] = {}

    def __repr__(self) -> str:
        stats = self.get_stats()
        return f"Emitter(events={stats['events']}, listeners={stats['total_listeners']})"

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def event_names(self) -> list[EventKey]:
        """
        Get every event name that has listeners.

        Returns:
            Event names in the order they were first registered

        Examples:
            emitter.on("foo", handler)
            emitter.on("bar", handler)
            emitter.event_names()  # ["foo", "bar"]
        """
        return [name for name, records in self._handlers.items() if records]

    def raw_listeners(self, event_name: EventKey) -> list[F]:
        """
        Get the listeners of an event as they were registered.

        One-shot listeners are returned unwrapped.

        Args:
            event_name: Event name

        Returns:
            Listeners in call order, empty if there are none
        """
        return [record.raw for record in self._handlers.get(event_name, ())]

    def listeners(self, event_name: EventKey) -> list[F]:
        """
        Get the callables invoked for an event.

        Same as ``raw_listeners`` except that one-shot listeners are
        returned as their self-removing wrapper.

        Args:
            event_name: Event name

        Returns:
            Callables in call order, empty if there are none
        """
        return [record.dispatch for record in self._handlers.get(event_name, ())]

    def has_listener(self, event_name: EventKey, listener: F) -> bool:
        """
        Check whether a listener is registered for an event.

        Args:
            event_name: Event name
            listener: Listener as passed to ``on``/``once``

        Returns:
            True if at least one record holds the listener
        """
        return any(
            _same_callback(record.raw, listener)
            for record in self._handlers.get(event_name, ())
        )

    def listener_count(self, event_name: EventKey) -> int:
        """Number of records registered for an event."""
        return len(self._handlers.get(event_name, ()))

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def _add(
        self,
        event_name: EventKey,
        raw: F,
        dispatch: F,
        context: Any = None,
        prepend: bool = False,
    ) -> Emitter[F]:
        record = ListenerRecord(raw=raw, dispatch=dispatch, context=context)
        records = self._handlers.setdefault(event_name, [])
        if prepend:
            records.insert(0, record)
        else:
            records.append(record)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "listener_added",
                event_name=repr(event_name),
                listener=_callback_name(raw),
                once=record.is_once,
                position="front" if prepend else "back",
            )
        return self

    def on(self, event_name: EventKey, listener: F, context: Any = None) -> Emitter[F]:
        """
        Register a listener.

        The same callable may be registered several times; it is then
        called once per registration.

        Args:
            event_name: Event name
            listener: Callable invoked with the emitted arguments
            context: Optional receiver passed as the first argument

        Returns:
            The emitter, for chaining

        Examples:
            emitter.on("foo", lambda: print("bar"))
            emitter.on("foo", lambda: print(42))
            emitter.emit("foo")
            # bar
            # 42
        """
        return self._add(event_name, listener, listener, context)

    add_listener = on

    def prepend_listener(
        self, event_name: EventKey, listener: F, context: Any = None
    ) -> Emitter[F]:
        """
        Register a listener ahead of all existing ones.

        Args:
            event_name: Event name
            listener: Callable invoked with the emitted arguments
            context: Optional receiver passed as the first argument

        Returns:
            The emitter, for chaining
        """
        return self._add(event_name, listener, listener, context, prepend=True)

    def _wrap_once(self, event_name: EventKey, listener: F, context: Any) -> F:
        @wraps(listener)
        def wrapper(*args):
            _call(listener, context, args)
            self.off(event_name, wrapper)

        return wrapper  # type: ignore[return-value]

    def once(self, event_name: EventKey, listener: F, context: Any = None) -> Emitter[F]:
        """
        Register a listener that runs at most once.

        The listener is unregistered right after it returns. If it
        raises, it stays registered.

        Args:
            event_name: Event name
            listener: Callable invoked with the emitted arguments
            context: Optional receiver passed as the first argument

        Returns:
            The emitter, for chaining

        Examples:
            emitter.on("foo", lambda: print("bar"))
            emitter.once("foo", lambda: print(42))
            emitter.emit("foo")
            # bar
            # 42
            emitter.emit("foo")
            # bar
        """
        wrapper = self._wrap_once(event_name, listener, context)
        return self._add(event_name, listener, wrapper, context)

    def prepend_once_listener(
        self, event_name: EventKey, listener: F, context: Any = None
    ) -> Emitter[F]:
        """Same as ``once``, but ahead of all existing listeners."""
        wrapper = self._wrap_once(event_name, listener, context)
        return self._add(event_name, listener, wrapper, context, prepend=True)

    # -------------------------------------------------------------------------
    # Removal
    # -------------------------------------------------------------------------

    def off(self, event_name: EventKey, listener: F | None = None) -> Emitter[F]:
        """
        Unregister listeners.

        Without ``listener`` every listener of the event is removed.
        Otherwise only the first record matching the listener (or its
        one-shot wrapper) is removed, so a callable registered twice
        needs two calls.

        Args:
            event_name: Event name
            listener: Listener or wrapper to remove

        Returns:
            The emitter, for chaining
        """
        records = self._handlers.get(event_name)
        if records is None:
            return self

        if listener is None:
            for record in records:
                record.removed = True
            del self._handlers[event_name]
            logger.debug("event_removed", event_name=repr(event_name), count=len(records))
            return self

        for index, record in enumerate(records):
            if _same_callback(record.dispatch, listener) or _same_callback(record.raw, listener):
                del records[index]
                record.removed = True
                if not records:
                    del self._handlers[event_name]
                logger.debug(
                    "listener_removed",
                    event_name=repr(event_name),
                    listener=_callback_name(record.raw),
                )
                break

        return self

    remove_listener = off

    def off_all(self) -> Emitter[F]:
        """
        Unregister every listener of every event.

        Returns:
            The emitter, for chaining
        """
        for records in self._handlers.values():
            for record in records:
                record.removed = True
        self._handlers = {}
        logger.debug("listeners_cleared")
        return self

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def emit(self, event_name: EventKey, *args: Any) -> bool:
        """
        Call every listener of an event, in order.

        Args:
            event_name: Event name
            *args: Positional arguments passed to every listener

        Returns:
            True if the event had listeners, False otherwise

        Examples:
            emitter.on("sum", lambda a, b: print(a + b))
            emitter.on("sum", lambda a, b: print(a * b))
            emitter.emit("sum", 2, 5)
            # 7
            # 10
        """
        records = self._handlers.get(event_name)
        if not records:
            return False

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("event_emitted", event_name=repr(event_name), listeners=len(records))

        for record in list(records):
            if record.removed:
                continue
            try:
                record.invoke(args)
            except Exception:
                logger.debug(
                    "listener_failed",
                    event_name=repr(event_name),
                    listener=_callback_name(record.raw),
                )
                raise

        return True

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------

    def get_stats(self) -> dict[str, Any]:
        """Get emitter statistics."""
        return {
            "events": len(self.event_names()),
            "total_listeners": sum(len(records) for records in self._handlers.values()),
        }


# =============================================================================
# Global Instance
# =============================================================================

_emitter: Emitter | None = None


def get_emitter() -> Emitter:
    """Get or create the global emitter instance."""
    global _emitter
    if _emitter is None:
        _emitter = Emitter()
    return _emitter


# =============================================================================
# Convenience Functions
# =============================================================================


def on(event_name: EventKey, listener: Listener | None = None, context: Any = None):
    """
    Register a listener on the global emitter (can be used as decorator).

    Usage:
        @on("ready")
        def handle_ready():
            ...

        # Or:
        on("ready", handle_ready)
    """
    emitter = get_emitter()

    if listener is not None:
        return emitter.on(event_name, listener, context)

    def decorator(fn: Listener):
        emitter.on(event_name, fn, context)
        return fn

    return decorator


def once(event_name: EventKey, listener: Listener | None = None, context: Any = None):
    """Register a one-shot listener on the global emitter (can be used as decorator)."""
    emitter = get_emitter()

    if listener is not None:
        return emitter.once(event_name, listener, context)

    def decorator(fn: Listener):
        emitter.once(event_name, fn, context)
        return fn

    return decorator


def emit(event_name: EventKey, *args: Any) -> bool:
    """Emit an event on the global emitter."""
    return get_emitter().emit(event_name, *args)
