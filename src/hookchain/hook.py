"""Hook point: route a call through its filter chain."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Mapping

from .bag import ArgumentBag
from .chain import ChainState, TerminalCallback, acall_terminal, call_terminal
from .errors import UsageError
from .registry import FilterRegistry, default_registry


def _prepare(
    operation: str,
    args: Mapping[str, Any] | None,
    owner: Hashable,
    registry: FilterRegistry | None,
) -> tuple[ArgumentBag, tuple]:
    if not operation:
        raise UsageError("hook requires an explicit operation name")
    if registry is None:
        registry = default_registry
    bag = ArgumentBag.for_operation(args, operation)
    return bag, registry.lookup(owner, operation)


def hook(
    operation: str,
    args: Mapping[str, Any] | None,
    terminal: TerminalCallback,
    *,
    owner: Hashable = None,
    registry: FilterRegistry | None = None,
) -> Any:
    """Run ``terminal`` wrapped by the filters registered for ``operation``.

    With no filters registered this is just ``terminal(args)``. Otherwise
    the first registered filter is called with the bag and a continuation;
    whatever it returns is the result.
    """
    bag, filters = _prepare(operation, args, owner, registry)
    if not filters:
        return call_terminal(terminal, bag)
    return ChainState(operation, filters, terminal).run(bag)


async def ahook(
    operation: str,
    args: Mapping[str, Any] | None,
    terminal: TerminalCallback,
    *,
    owner: Hashable = None,
    registry: FilterRegistry | None = None,
) -> Any:
    """Coroutine version of :func:`hook` for async filters and terminals."""
    bag, filters = _prepare(operation, args, owner, registry)
    if not filters:
        return await acall_terminal(terminal, bag)
    return await ChainState(operation, filters, terminal).arun(bag)
