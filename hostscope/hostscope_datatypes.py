"""
Defines the core data types for the hostscope binder.

This module provides the environment that the hosting evaluator works
with, the callable wrapper for late-bound host functions, and the
errors raised across the binder.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional
import collections.abc


# =================================================================
# Errors
# =================================================================

class ArgumentError(TypeError):
    """Wrong argument count or argument type for an environment entry."""
    pass


class SymbolTableError(Exception):
    """Base class for failures reported by a symbol-table service."""
    pass


class SymbolNotFound(SymbolTableError):
    def __init__(self, key: str):
        super().__init__(f"symbol not found: {key}")
        self.key = key


class InvocationError(SymbolTableError):
    """Raised for any failure while invoking a symbol by name."""
    def __init__(self, name: str, message: str):
        super().__init__(f"{name}: {message}")
        self.name = name


class ConfigError(ValueError):
    pass


# =================================================================
# Symbols
# =================================================================

@dataclass(frozen=True)
class DeclaredType:
    """A class declared by the host, as reported by the symbol table."""
    namespace: str
    name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}.{self.name}"


# =================================================================
# Bindings
# =================================================================

class BindingKind(Enum):
    VALUE = "value"
    NAMESPACE = "namespace"
    CALLABLE = "callable"


class HostCallable(ABC):
    """Abstract base class for callables bound lazily into an environment."""
    pass


class HostFunction(HostCallable):
    """A lazily-bound callable.

    The evaluator calls it with positional arguments and receives the list
    of results. The wrapped function does the work; this class only marks
    the binding so discovery and the evaluator can tell it apart from a
    plain value.
    """
    def __init__(self, func: Callable[..., List[Any]], name: Optional[str] = None):
        self.func = func
        self.name = name or getattr(func, "__name__", None)

    def __call__(self, *args) -> List[Any]:
        return list(self.func(*args))

    def __repr__(self) -> str:
        return f"<HostFunction {self.name}>"


class Environment(collections.abc.MutableMapping):
    """A namespace of bindings hosted by the evaluator.

    Bindings are plain values, nested environments (sub-namespaces) or
    HostFunctions. Keys are strings; writing an existing key replaces it.
    """
    def __init__(self, bindings: Optional[Dict[str, Any]] = None):
        self.bindings: Dict[str, Any] = {}
        if bindings:
            self.update(bindings)

    def __setitem__(self, key: str, value: Any):
        if not isinstance(key, str):
            raise TypeError(f"Environment key must be a str, not {type(key)}")
        self.bindings[key] = value

    def __getitem__(self, key: str) -> Any:
        if not isinstance(key, str):
            raise TypeError(f"Environment key must be a str, not {type(key)}")
        return self.bindings[key]

    def __delitem__(self, key: str):
        del self.bindings[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.bindings)

    def __len__(self) -> int:
        return len(self.bindings)

    def kind_of(self, key: str) -> BindingKind:
        """Returns the binding variant stored under key."""
        return binding_kind(self[key])

    def names(self, hidden_prefix: Optional[str] = None) -> List[str]:
        """Sorted binding names, leaving out those starting with hidden_prefix."""
        if hidden_prefix:
            return sorted(k for k in self.bindings if not k.startswith(hidden_prefix))
        return sorted(self.bindings)

    def __repr__(self) -> str:
        keys = ', '.join(self.bindings.keys())
        return f"<Environment bindings=[{keys}]>"


def binding_kind(value: Any) -> BindingKind:
    if isinstance(value, Environment):
        return BindingKind.NAMESPACE
    if isinstance(value, HostCallable):
        return BindingKind.CALLABLE
    return BindingKind.VALUE


def is_environment(value: Any) -> bool:
    return binding_kind(value) is BindingKind.NAMESPACE


def is_host_function(value: Any) -> bool:
    return binding_kind(value) is BindingKind.CALLABLE
