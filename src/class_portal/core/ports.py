# src/class_portal/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The stores depend on Protocols instead of concrete implementations.
This keeps the durable backend swappable and makes testing easier.
"""

from typing import Protocol


class DurableStore(Protocol):
    """
    Quota-limited, synchronous, string-keyed key-value store.

    write() raises QuotaExceededError when the value does not fit;
    nothing is written in that case.
    """

    def read(self, key: str) -> str | None: ...
    def write(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...
