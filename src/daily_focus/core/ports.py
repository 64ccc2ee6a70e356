# src/daily_focus/core/ports.py

"""
Ports (interfaces) used by the core.

The task store and the selection engine depend on Protocols instead of concrete
implementations, so storage and time can be swapped (and faked in tests).
"""

from __future__ import annotations

from datetime import date
from typing import Protocol


class KeyValueStorage(Protocol):
    """
    Durable key-value storage.

    get() returns None for an absent key. Both methods may raise; the store treats
    any failure as non-fatal and logs it.
    """

    def get(self, key: str) -> bytes | None: ...
    def set(self, key: str, value: bytes) -> None: ...


class Clock(Protocol):
    def now(self) -> float: ...
    # Local calendar date.
    def today(self) -> date: ...


class IdGenerator(Protocol):
    def __call__(self) -> str: ...
