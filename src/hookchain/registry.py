"""Per-owner store of ordered filter functions."""

from __future__ import annotations

import logging
import threading
from collections.abc import Hashable
from typing import Any, Callable

from .bag import ArgumentBag

logger = logging.getLogger(__name__)

# (args, next) -> result; next is a Continuation or AsyncContinuation
FilterFunc = Callable[[ArgumentBag, Callable[..., Any]], Any]


def _owner_name(owner: Hashable) -> str:
    if owner is None:
        return "<global>"
    if isinstance(owner, type):
        return f"{owner.__module__}.{owner.__qualname__}"
    return str(owner)


class FilterRegistry:
    """Ordered, append-only filter lists keyed by (owner, operation).

    Lookups return tuples. Each registration swaps in a new tuple under a
    lock, so a snapshot taken by a running chain never changes underneath it.
    """

    def __init__(self) -> None:
        self._filters: dict[tuple[Hashable, str], tuple[FilterFunc, ...]] = {}
        self._lock = threading.Lock()
        self.extensions: dict[str, Any] = {}  # module name -> module

    def register(self, owner: Hashable, operation: str, func: FilterFunc) -> None:
        key = (owner, operation)
        with self._lock:
            self._filters[key] = self._filters.get(key, ()) + (func,)
            position = len(self._filters[key]) - 1
        logger.debug(
            "Registered filter %s for %s.%s at position %d",
            getattr(func, "__qualname__", repr(func)),
            _owner_name(owner),
            operation,
            position,
        )

    def lookup(self, owner: Hashable, operation: str) -> tuple[FilterFunc, ...]:
        return self._filters.get((owner, operation), ())

    def filter(self, owner: Hashable, operation: str) -> Callable[[FilterFunc], FilterFunc]:
        """Decorator to register a filter for ``operation`` on ``owner``."""

        def decorator(func: FilterFunc) -> FilterFunc:
            self.register(owner, operation, func)
            return func

        return decorator

    def count(self, owner: Hashable, operation: str) -> int:
        return len(self.lookup(owner, operation))

    def operations(self, owner: Hashable) -> list[str]:
        """Names of operations on ``owner`` that have at least one filter."""
        return [op for (o, op) in list(self._filters) if o == owner]

    def __contains__(self, key: object) -> bool:
        return key in self._filters

    def __len__(self) -> int:
        return len(self._filters)

    def __repr__(self) -> str:
        return f"<FilterRegistry operations={len(self._filters)}>"


default_registry = FilterRegistry()
