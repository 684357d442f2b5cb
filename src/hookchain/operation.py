"""Operation decorator and signature-driven argument binding."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from .bag import OPERATION_KEY, ArgumentBag


@dataclass
class Operation:
    """A method published for name-based dispatch."""

    name: str
    callback: Callable[..., Any]
    description: str = ""
    attr: str = ""  # attribute name on the owner, set on discovery

    @property
    def help_text(self) -> str:
        """Help text from docstring or description."""
        if self.description:
            return self.description
        doc = self.callback.__doc__
        if doc:
            return doc.strip().split("\n")[0]
        return ""


def operation(name: str | None = None, *, desc: str = "") -> Callable:
    """Decorator to publish a method under an operation name.

    The function is returned unchanged; the owning class collects the
    attached Operation when it is defined.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        target = func.__func__ if isinstance(func, (classmethod, staticmethod)) else func
        target.__operation__ = Operation(  # type: ignore[attr-defined]
            name=name or target.__name__,
            callback=target,
            description=desc,
            attr=target.__name__,
        )
        return func

    return decorator


def bag_from_call(
    func: Callable[..., Any],
    args: Sequence[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
) -> ArgumentBag:
    """Bind a call's arguments to ``func``'s parameter names.

    Defaults are applied so filters see every parameter. Raises TypeError
    if the arguments do not fit the signature.
    """
    bound = inspect.signature(func).bind(*args, **(kwargs or {}))
    bound.apply_defaults()
    return ArgumentBag(bound.arguments)


def call_with_bag(func: Callable[..., Any], bag: Mapping[str, Any]) -> Any:
    """Call ``func`` with the entries of ``bag`` matching its parameters.

    Parameters are passed positionally until the first one missing from
    the bag, then by keyword. Bag entries that match no parameter are
    dropped, or passed through ``**kwargs`` when the function takes it.
    """
    positional: list[Any] = []
    keyword: dict[str, Any] = {}
    gap = False
    var_keyword = None

    params = inspect.signature(func).parameters
    names = set(params)
    for name, param in params.items():
        kind = param.kind
        if kind is inspect.Parameter.VAR_KEYWORD:
            var_keyword = name
            continue
        if name not in bag:
            if kind is not inspect.Parameter.KEYWORD_ONLY:
                gap = True
            continue
        value = bag[name]
        if kind is inspect.Parameter.VAR_POSITIONAL:
            if not gap:
                positional.extend(value)
        elif kind is inspect.Parameter.KEYWORD_ONLY:
            keyword[name] = value
        elif not gap:
            positional.append(value)
        elif kind is inspect.Parameter.POSITIONAL_OR_KEYWORD:
            keyword[name] = value

    if var_keyword is not None:
        keyword.update(bag.get(var_keyword) or {})
        for key, value in bag.items():
            if key != OPERATION_KEY and key not in names:
                keyword.setdefault(key, value)

    return func(*positional, **keyword)
