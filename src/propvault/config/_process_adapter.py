"""Adapter that reads the live process environment and property store.

Python has no process-level property registry of its own, so one is kept
here. It is process-wide and shared by every resolver, like ``os.environ``.
"""

from __future__ import annotations

import os
import threading

_properties: dict[str, str] = {}
_lock = threading.Lock()


def set_property(key: str, value: str) -> str | None:
    """Set a process property, returning the previous value (if any)."""
    with _lock:
        previous = _properties.get(key)
        _properties[key] = value
    return previous


def get_property(key: str) -> str | None:
    with _lock:
        return _properties.get(key)


def clear_property(key: str) -> str | None:
    """Remove a process property, returning the removed value (if any)."""
    with _lock:
        return _properties.pop(key, None)


def property_names() -> frozenset[str]:
    with _lock:
        return frozenset(_properties)


class ProcessEnvironment:
    """Reads from ``os.environ`` and the module-level property store."""

    def get_env(self, name: str) -> str | None:
        return os.environ.get(name)

    def get_property(self, key: str) -> str | None:
        return get_property(key)
