"""Interning registry for parsed version constraints.

Constraints with the same identity key resolve to one shared, immutable
instance for as long as the registry lives. The default registry lives for
the whole process; a resolver can scope its own registry to a session with
``session_registry()`` so that its entries are released with the session.
"""

from __future__ import annotations

import contextvars
import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from common.logging_utils import extra_context, is_debug_enabled

logger = logging.getLogger(__name__)


class InternRegistry:
    """Thread-safe get-or-insert map from identity key to shared instance.

    Raw constraint text is also remembered as an alias of the key it
    produced, so repeated parses of identical text skip parsing entirely.
    Entries are never evicted: once a key is stored, every later lookup
    returns that same instance. Both maps grow with every distinct key and
    every distinct stripped raw text (``>=1, <2`` and ``>=1,<2`` are two
    aliases); bound memory by scoping work to ``session_registry()`` or
    calling ``clear()``.
    """

    def __init__(self):
        self._entries: Dict[str, Any] = {}
        self._aliases: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Return the instance stored under ``key``, if any."""
        with self._lock:
            return self._entries.get(key)

    def lookup_alias(self, raw: str) -> Optional[Any]:
        """Return the instance previously produced from raw text ``raw``."""
        with self._lock:
            key = self._aliases.get(raw)
            if key is None:
                return None
            value = self._entries.get(key)
            if value is not None:
                self._hits += 1
            return value

    def get_or_insert(self, key: str, value: Any, alias: Optional[str] = None) -> Any:
        """Insert ``value`` under ``key`` unless another instance won first.

        Args:
            key: Identity key.
            value: Freshly built instance.
            alias: Optional raw text to remember for ``lookup_alias``.

        Returns:
            The instance stored under ``key`` after the call; concurrent
            callers racing on the same key all receive the same object.
        """
        with self._lock:
            existing = self._entries.get(key)
            if existing is None:
                self._misses += 1
                self._entries[key] = value
                existing = value
            else:
                self._hits += 1
            if alias is not None:
                self._aliases[alias] = key
            return existing

    def clear(self) -> None:
        """Drop every stored instance and alias.

        This is the only way entries and aliases leave a registry. Instances
        handed out earlier stay valid, but a later parse of the same text
        builds a new instance.
        """
        with self._lock:
            dropped = len(self._entries)
            self._entries.clear()
            self._aliases.clear()
            self._hits = 0
            self._misses = 0
        if is_debug_enabled(logger):
            logger.debug(
                "Cleared interned constraints",
                extra=extra_context(
                    event="clear",
                    component="intern_registry",
                    action="clear",
                    count=dropped,
                ),
            )

    def stats(self) -> Dict[str, int]:
        """Get registry statistics."""
        with self._lock:
            return {
                "entries": len(self._entries),
                "aliases": len(self._aliases),
                "hits": self._hits,
                "misses": self._misses,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


_default_registry = InternRegistry()
_session_registry: contextvars.ContextVar[Optional[InternRegistry]] = contextvars.ContextVar(
    "versionspec_session_registry", default=None
)


def get_registry() -> InternRegistry:
    """Return the registry in effect: the active session's, else the process default."""
    session = _session_registry.get()
    return session if session is not None else _default_registry


@contextmanager
def session_registry(registry: Optional[InternRegistry] = None) -> Iterator[InternRegistry]:
    """Scope constraint interning to a resolver session.

    Specs parsed inside the ``with`` block are interned in ``registry`` (a
    fresh one by default) instead of the process-wide registry.
    """
    registry = registry if registry is not None else InternRegistry()
    token = _session_registry.set(registry)
    try:
        yield registry
    finally:
        _session_registry.reset(token)
