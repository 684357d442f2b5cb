"""Name-based dispatch through the hook point."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from .errors import OperationNotFound
from .hook import ahook, hook
from .operation import Operation, bag_from_call, call_with_bag
from .registry import FilterRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotFound:
    """Returned by :func:`invoke` when the receiver has no such operation.

    Falsy, so ``if not result`` works, but never equal to a real return
    value such as ``None``.
    """

    receiver: str
    operation: str

    def __bool__(self) -> bool:
        return False


def is_not_found(value: Any) -> bool:
    return isinstance(value, NotFound)


def operations_of(receiver: Any) -> dict[str, Operation]:
    """The explicit operation table published by the receiver's class."""
    return dict(getattr(type(receiver), "__operations__", None) or {})


def resolve_operation(receiver: Any, name: str) -> Callable[..., Any] | None:
    """Return the bound callable for ``name``, or None if not published."""
    op = operations_of(receiver).get(name)
    if op is None:
        return None
    return getattr(receiver, op.attr)


def _lookup(receiver: Any, operation: str, strict: bool) -> Callable[..., Any] | None:
    target = resolve_operation(receiver, operation)
    if target is None:
        name = type(receiver).__qualname__
        logger.debug("%s has no operation %r", name, operation)
        if strict:
            raise OperationNotFound(name, operation)
    return target


def _terminal_for(target: Callable[..., Any]) -> Callable[[Mapping[str, Any]], Any]:
    def terminal(bag: Mapping[str, Any]) -> Any:
        return call_with_bag(target, bag)

    return terminal


def _registry_for(owner: type, registry: FilterRegistry | None) -> FilterRegistry | None:
    if registry is None:
        registry = getattr(owner, "__registry__", None)
    return registry


def invoke(
    receiver: Any,
    operation: str,
    args: Sequence[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
    *,
    strict: bool = False,
    registry: FilterRegistry | None = None,
) -> Any:
    """Call ``receiver``'s operation ``operation`` through its filter chain.

    Filters registered for the receiver's class apply even though the
    operation body never calls :func:`hook` itself. Returns a NotFound
    value if the operation is not published (or raises OperationNotFound
    when ``strict`` is set).
    """
    target = _lookup(receiver, operation, strict)
    if target is None:
        return NotFound(type(receiver).__qualname__, operation)
    owner = type(receiver)
    bag = bag_from_call(target, args, kwargs)
    return hook(
        operation,
        bag,
        _terminal_for(target),
        owner=owner,
        registry=_registry_for(owner, registry),
    )


async def ainvoke(
    receiver: Any,
    operation: str,
    args: Sequence[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
    *,
    strict: bool = False,
    registry: FilterRegistry | None = None,
) -> Any:
    """Coroutine version of :func:`invoke`; the operation may be async."""
    target = _lookup(receiver, operation, strict)
    if target is None:
        return NotFound(type(receiver).__qualname__, operation)
    owner = type(receiver)
    bag = bag_from_call(target, args, kwargs)
    return await ahook(
        operation,
        bag,
        _terminal_for(target),
        owner=owner,
        registry=_registry_for(owner, registry),
    )
