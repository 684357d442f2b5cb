"""Chain traversal: per-invocation state and the ``next`` continuation."""

from __future__ import annotations

import inspect
import logging
from contextvars import ContextVar
from typing import Any, Callable, Mapping, Sequence

from .bag import OPERATION_KEY, ArgumentBag
from .errors import UsageError

logger = logging.getLogger(__name__)

TerminalCallback = Callable[..., Any]

# Innermost continuation of the filter currently executing in this context
_current: ContextVar[Continuation | None] = ContextVar("hookchain_current", default=None)


def _takes_args(func: Callable[..., Any]) -> bool:
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return True
    return bool(sig.parameters)


def call_terminal(terminal: TerminalCallback, args: ArgumentBag) -> Any:
    """Call the unfiltered implementation with ``args`` (or no arguments)."""
    token = _current.set(None)
    try:
        if _takes_args(terminal):
            return terminal(args)
        return terminal()
    finally:
        _current.reset(token)


async def acall_terminal(terminal: TerminalCallback, args: ArgumentBag) -> Any:
    """Like call_terminal, awaiting the result if it is awaitable."""
    token = _current.set(None)
    try:
        result = terminal(args) if _takes_args(terminal) else terminal()
        if inspect.isawaitable(result):
            result = await result
        return result
    finally:
        _current.reset(token)


class ChainState:
    """Traversal state owned by exactly one hook invocation.

    Holds the filter snapshot taken when the invocation started, the
    position reached so far and the terminal to run once the filters are
    exhausted. Never stored anywhere shared: continuations carry a
    reference to it instead.
    """

    def __init__(
        self,
        operation: str,
        filters: Sequence[Callable[..., Any]],
        terminal: TerminalCallback,
    ) -> None:
        self.operation = operation
        self.filters = tuple(filters)
        self.terminal = terminal
        self.position = -1
        self.terminal_called = False
        self.finished = False

    def run(self, args: ArgumentBag) -> Any:
        """Invoke the first link and return what the chain returns."""
        try:
            result = self._call(0, args)
        finally:
            self.finished = True
        self._log_outcome()
        return result

    async def arun(self, args: ArgumentBag) -> Any:
        try:
            result = await self._acall(0, args)
        finally:
            self.finished = True
        self._log_outcome()
        return result

    def _call(self, position: int, args: ArgumentBag) -> Any:
        self.position = position
        if position >= len(self.filters):
            self._enter_terminal()
            return call_terminal(self.terminal, args)

        func = self.filters[position]
        cont = Continuation(self, position, args)
        self._enter_filter(func)
        token = _current.set(cont)
        try:
            return func(args, cont)
        finally:
            _current.reset(token)

    async def _acall(self, position: int, args: ArgumentBag) -> Any:
        self.position = position
        if position >= len(self.filters):
            self._enter_terminal()
            return await acall_terminal(self.terminal, args)

        func = self.filters[position]
        cont = AsyncContinuation(self, position, args)
        self._enter_filter(func)
        token = _current.set(cont)
        try:
            result = func(args, cont)
            if inspect.isawaitable(result):
                result = await result
            return result
        finally:
            _current.reset(token)

    def _enter_filter(self, func: Callable[..., Any]) -> None:
        logger.debug(
            "%s: filter %d/%d (%s)",
            self.operation,
            self.position + 1,
            len(self.filters),
            getattr(func, "__qualname__", repr(func)),
        )

    def _enter_terminal(self) -> None:
        self.terminal_called = True
        logger.debug("%s: filters exhausted, calling terminal", self.operation)

    def _log_outcome(self) -> None:
        if not self.terminal_called:
            logger.debug(
                "%s: short-circuited by filter %d", self.operation, self.position + 1
            )

    def __repr__(self) -> str:
        return (
            f"<ChainState {self.operation!r} position={self.position}"
            f" filters={len(self.filters)} finished={self.finished}>"
        )


class Continuation:
    """The ``next`` callable handed to a filter.

    Bound to one ChainState and one position. Calling it runs the next
    filter (or the terminal) and returns its result. Single use.
    """

    __slots__ = ("_state", "_position", "_args", "_used")

    def __init__(self, state: ChainState, position: int, args: ArgumentBag) -> None:
        self._state = state
        self._position = position
        self._args = args
        self._used = False

    @property
    def operation(self) -> str:
        return self._state.operation

    def _advance(self, args: Mapping[str, Any] | None) -> ArgumentBag:
        state = self._state
        if state.finished:
            raise UsageError("next called after the chain finished", state.operation)
        if self._used:
            raise UsageError("next called twice from the same filter", state.operation)
        self._used = True
        if args is None:
            return self._args
        return ArgumentBag.for_operation(args, state.operation)

    def __call__(self, args: Mapping[str, Any] | None = None) -> Any:
        bag = self._advance(args)
        return self._state._call(self._position + 1, bag)


class AsyncContinuation(Continuation):
    """``next`` for coroutine filters; must be awaited."""

    __slots__ = ()

    async def __call__(self, args: Mapping[str, Any] | None = None) -> Any:  # type: ignore[override]
        bag = self._advance(args)
        return await self._state._acall(self._position + 1, bag)


def _no_chain(args: Any) -> UsageError:
    operation = args.get(OPERATION_KEY) if isinstance(args, Mapping) else None
    return UsageError("next called outside of an active filter chain", operation)


def proceed(args: Mapping[str, Any] | None = None) -> Any:
    """Call the continuation of the filter currently running.

    For filters that would rather not thread ``next`` through helper
    functions. Raises UsageError outside of a filter body.
    """
    cont = _current.get()
    if cont is None:
        raise _no_chain(args)
    if isinstance(cont, AsyncContinuation):
        raise UsageError("use 'await aproceed()' inside async chains", cont.operation)
    return cont(args)


async def aproceed(args: Mapping[str, Any] | None = None) -> Any:
    cont = _current.get()
    if cont is None:
        raise _no_chain(args)
    if not isinstance(cont, AsyncContinuation):
        raise UsageError("aproceed called inside a synchronous chain", cont.operation)
    return await cont(args)


def current_continuation() -> Continuation | None:
    return _current.get()
