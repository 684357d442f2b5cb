"""Apply configuration: import filters, load extensions, set up logging."""

from __future__ import annotations

import importlib
import inspect
import logging
from collections.abc import Hashable
from typing import Any

from .config import HookConfig
from .errors import ConfigError
from .registry import FilterRegistry, default_registry

logger = logging.getLogger(__name__)


def import_object(path: str) -> Any:
    """Import ``"package.module:attr"`` (attr may be dotted)."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigError(f"Expected 'module:attribute', got {path!r}")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import {module_name!r}: {e}") from e
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ConfigError(f"{module_name!r} has no attribute {attr!r}") from None
    return obj


def resolve_owner(name: str) -> Hashable:
    """Owners written as ``module:Class`` are imported, others are plain keys."""
    if name in ("", "global", "None"):
        return None
    if ":" in name:
        return import_object(name)
    return name


def load_extension(module_name: str, registry: FilterRegistry | None = None) -> None:
    """Load an extension module and call its setup(registry) function."""
    if registry is None:
        registry = default_registry
    if module_name in registry.extensions:
        raise ConfigError(f"Extension {module_name!r} is already loaded")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import extension {module_name!r}: {e}") from e
    setup = getattr(module, "setup", None)
    if setup is None:
        raise ConfigError(f"Extension {module_name!r} has no setup() function")

    if inspect.iscoroutinefunction(setup):
        raise ConfigError(
            f"Extension {module_name!r} has an async setup(); it must be synchronous"
        )
    result = setup(registry)
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise ConfigError(f"Extension {module_name!r} setup() returned an awaitable")
    registry.extensions[module_name] = module
    logger.info("Loaded extension: %s", module_name)


def apply_config(
    config: HookConfig, registry: FilterRegistry | None = None
) -> FilterRegistry:
    """Register configured filters in file order, then load extensions."""
    if registry is None:
        registry = default_registry

    for owner_name, operations in config.filters.items():
        owner = resolve_owner(owner_name)
        for operation, paths in operations.items():
            for path in paths:
                func = import_object(path)
                if not callable(func):
                    raise ConfigError(f"Filter {path!r} is not callable")
                registry.register(owner, operation, func)
        logger.info("Configured filters for %s", owner_name)

    for ext in config.extensions:
        load_extension(ext, registry)

    return registry


def configure_logging(config: HookConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
