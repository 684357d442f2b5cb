"""hookchain: ordered filter chains around named operations."""

from .bag import OPERATION_KEY, ArgumentBag
from .chain import AsyncContinuation, ChainState, Continuation, aproceed, proceed
from .config import HookConfig
from .dispatch import NotFound, ainvoke, invoke, is_not_found, resolve_operation
from .errors import ChainError, ConfigError, OperationNotFound, UsageError
from .filterable import Filterable
from .hook import ahook, hook
from .loader import apply_config, configure_logging, import_object, load_extension
from .operation import Operation, bag_from_call, call_with_bag, operation
from .registry import FilterFunc, FilterRegistry, default_registry

__all__ = [
    "ArgumentBag",
    "OPERATION_KEY",
    "ChainState",
    "Continuation",
    "AsyncContinuation",
    "proceed",
    "aproceed",
    "HookConfig",
    "NotFound",
    "invoke",
    "ainvoke",
    "is_not_found",
    "resolve_operation",
    "Filterable",
    "hook",
    "ahook",
    "apply_config",
    "configure_logging",
    "import_object",
    "load_extension",
    "Operation",
    "operation",
    "bag_from_call",
    "call_with_bag",
    "FilterFunc",
    "FilterRegistry",
    "default_registry",
    # Errors
    "ChainError",
    "ConfigError",
    "OperationNotFound",
    "UsageError",
]
