"""Run-scoped shared state passed between tools and agents.

One ``SharedState`` is created by the Orchestrator at the start of a run and
handed to every tool and agent built for that run.  Tools use it as a side
channel next to their declared parameters: one tool stores the context it
retrieved, a later tool (or an agent's validation hook) reads it back.

Reading a key that was never set is a normal condition, not an error.
``get`` returns the ``ABSENT`` marker in that case so that a stored ``None``
can still be told apart from a missing entry.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Callable

logger = logging.getLogger(__name__)


class _Absent:
    """Marker type for keys that were never set."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


class SharedState:
    """Thread-safe key-value store shared by the tools and agents of one run.

    Usage
    -----
    >>> state = SharedState()
    >>> state.set("context", "Paris is the capital of France")
    >>> state.get("context")
    'Paris is the capital of France'
    >>> state.get("missing") is ABSENT
    True
    """

    def __init__(self) -> None:
        self.run_id = uuid.uuid4().hex
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, overwriting any existing entry."""
        _check_key(key)
        with self._lock:
            self._data[key] = value
        logger.debug("state %s: set %r (%s)", self.run_id[:8], key, type(value).__name__)

    def get(self, key: str, default: Any = ABSENT) -> Any:
        """Return the value stored under *key*, or *default* if absent.

        Keys that are not strings can never have been set, so they are
        reported as absent rather than rejected.
        """
        if not isinstance(key, str):
            return default
        with self._lock:
            return self._data.get(key, default)

    def update(self, key: str, fn: Callable[[Any], Any], default: Any = ABSENT) -> Any:
        """Replace the value under *key* with ``fn(current)`` in one locked step.

        *current* is *default* when the key is absent.  Returns the new value.
        *fn* runs while the lock is held; it must be quick and must not use
        this store.
        """
        _check_key(key)
        with self._lock:
            value = fn(self._data.get(key, default))
            self._data[key] = value
        logger.debug("state %s: updated %r (%s)", self.run_id[:8], key, type(value).__name__)
        return value

    def has(self, key: str) -> bool:
        """Return True if *key* has been set."""
        return key in self

    def delete(self, key: str) -> bool:
        """Remove *key*; return False if it was not set."""
        if not isinstance(key, str):
            return False
        with self._lock:
            found = key in self._data
            self._data.pop(key, None)
        if found:
            logger.debug("state %s: deleted %r", self.run_id[:8], key)
        return found

    def clear(self) -> None:
        """Remove all stored entries."""
        with self._lock:
            self._data.clear()

    def snapshot(self) -> dict[str, Any]:
        """Return a shallow copy of the current contents."""
        with self._lock:
            return dict(self._data)

    def keys(self) -> list[str]:
        """Return the stored keys."""
        with self._lock:
            return list(self._data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        with self._lock:
            return key in self._data

    def __repr__(self) -> str:
        return f"SharedState(run_id={self.run_id[:8]!r}, keys={self.keys()!r})"


def _check_key(key: Any) -> None:
    if not isinstance(key, str):
        raise TypeError(f"SharedState keys must be strings, got {type(key).__name__}")
    if not key:
        raise ValueError("SharedState keys must be non-empty")
