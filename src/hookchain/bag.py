"""Argument bag threaded through one chain invocation."""

from __future__ import annotations

from typing import Any, Mapping

from .errors import UsageError

# Reserved key naming the operation being invoked
OPERATION_KEY = "_method"


class ArgumentBag(dict):
    """Ordered parameter-name -> value mapping for a single call.

    The same instance is handed to every filter and finally to the
    terminal. Filters may add or change entries, but once the bag is
    tagged with an operation name the reserved key cannot be removed.
    """

    @classmethod
    def wrap(cls, args: Mapping[str, Any] | None) -> ArgumentBag:
        """Return ``args`` itself if it is already a bag, else a new bag."""
        if isinstance(args, ArgumentBag):
            return args
        return cls(args or {})

    @classmethod
    def for_operation(cls, args: Mapping[str, Any] | None, operation: str) -> ArgumentBag:
        """Bag tagged with ``operation``.

        A bag already tagged with a different operation is copied, so the
        call that owns it keeps its identity.
        """
        bag = cls.wrap(args)
        if bag.operation not in (None, operation):
            bag = bag.copy()
        return bag.tag(operation)

    @property
    def operation(self) -> str | None:
        return self.get(OPERATION_KEY)

    def tag(self, operation: str) -> ArgumentBag:
        if not operation:
            raise UsageError("operation name is required to enter a filter chain")
        dict.__setitem__(self, OPERATION_KEY, operation)
        return self

    def params(self) -> dict[str, Any]:
        """All entries except the reserved operation key."""
        return {k: v for k, v in self.items() if k != OPERATION_KEY}

    def _guard(self, key: Any) -> None:
        if key == OPERATION_KEY and OPERATION_KEY in self:
            raise UsageError(
                "the operation key cannot be removed from an argument bag",
                self.operation,
            )

    def __delitem__(self, key: Any) -> None:
        self._guard(key)
        super().__delitem__(key)

    def _check(self, key: Any, value: Any) -> None:
        if key == OPERATION_KEY and not value:
            self._guard(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        self._check(key, value)
        super().__setitem__(key, value)

    def update(self, *args: Any, **kwargs: Any) -> None:
        items = dict(*args, **kwargs)
        if OPERATION_KEY in items:
            self._check(OPERATION_KEY, items[OPERATION_KEY])
        super().update(items)

    def __ior__(self, other: Any) -> ArgumentBag:
        self.update(other)
        return self

    def setdefault(self, key: Any, default: Any = None) -> Any:
        if key not in self:
            self[key] = default
        return self[key]

    def pop(self, key: Any, *default: Any) -> Any:
        self._guard(key)
        return super().pop(key, *default)

    def popitem(self) -> tuple[Any, Any]:
        # Last inserted entry; refuse rather than reorder
        if self and next(reversed(self)) == OPERATION_KEY:
            self._guard(OPERATION_KEY)
        return super().popitem()

    def clear(self) -> None:
        self._guard(OPERATION_KEY)
        super().clear()

    def copy(self) -> ArgumentBag:
        return ArgumentBag(self)

    def __repr__(self) -> str:
        return f"ArgumentBag({dict.__repr__(self)})"
