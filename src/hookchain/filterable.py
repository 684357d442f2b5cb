"""Filterable base class for owners of hookable operations."""

from __future__ import annotations

import dataclasses
from typing import Any, ClassVar, Mapping

from .chain import TerminalCallback
from .dispatch import ainvoke, invoke
from .hook import ahook, hook
from .operation import Operation
from .registry import FilterFunc, FilterRegistry, default_registry


class Filterable:
    """Base class for objects whose operations can be filtered.

    Subclass this and mark methods with the @operation() decorator to make
    them reachable by name through ``obj(name, *args)``. Methods can also
    opt in from their own body with ``self.hook(name, args, terminal)``.

    Filters are keyed by the exact class: a subclass starts with an empty
    chain for every operation.
    """

    __registry__: ClassVar[FilterRegistry | None] = None
    __operations__: ClassVar[dict[str, Operation]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        table: dict[str, Operation] = {}

        # Discover operations on the class, inherited ones included
        for name in dir(cls):
            value = getattr(cls, name, None)
            op = getattr(value, "__operation__", None)
            if isinstance(op, Operation):
                table[op.name] = dataclasses.replace(op, attr=name)
        cls.__operations__ = table

    @classmethod
    def filter_registry(cls) -> FilterRegistry:
        return cls.__registry__ if cls.__registry__ is not None else default_registry

    @classmethod
    def filter(cls, operation: str, func: FilterFunc | None = None) -> Any:
        """Register a filter for ``operation`` on this class.

        Usable directly, ``Cls.filter("op", fn)``, or as a decorator,
        ``@Cls.filter("op")``.
        """
        registry = cls.filter_registry()
        if func is None:
            return registry.filter(cls, operation)
        registry.register(cls, operation, func)
        return func

    @classmethod
    def filters(cls, operation: str) -> tuple[FilterFunc, ...]:
        return cls.filter_registry().lookup(cls, operation)

    @classmethod
    def hook(
        cls,
        operation: str,
        args: Mapping[str, Any] | None,
        terminal: TerminalCallback,
    ) -> Any:
        return hook(operation, args, terminal, owner=cls, registry=cls.filter_registry())

    @classmethod
    async def ahook(
        cls,
        operation: str,
        args: Mapping[str, Any] | None,
        terminal: TerminalCallback,
    ) -> Any:
        return await ahook(
            operation, args, terminal, owner=cls, registry=cls.filter_registry()
        )

    @classmethod
    def operations(cls) -> list[Operation]:
        return list(cls.__operations__.values())

    def __call__(self, operation: str, *args: Any, **kwargs: Any) -> Any:
        """Dispatch ``operation`` by name through its filter chain."""
        return invoke(self, operation, args, kwargs)

    async def acall(self, operation: str, *args: Any, **kwargs: Any) -> Any:
        return await ainvoke(self, operation, args, kwargs)
