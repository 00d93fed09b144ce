"""
Event key types.

Event keys are any hashable value. Strings compare by content; a
``Symbol`` is an opaque token that is only ever equal to itself.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Union


class Symbol:
    """
    Opaque event key.

    Two symbols are never equal unless they are the same object, even
    when created with the same description, and a symbol never equals a
    string.

    Example:
        READY = Symbol("ready")
        emitter.on(READY, handler)
        emitter.emit("ready")  # False, different key
    """

    __slots__ = ("_description",)

    def __init__(self, description: str = ""):
        self._description = description

    @property
    def description(self) -> str:
        return self._description

    def __repr__(self) -> str:
        return f"Symbol({self._description!r})"


EventKey = Union[str, Symbol, Hashable]
