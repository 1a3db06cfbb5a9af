"""
Privilege bypass for host values.

Evaluators hide underscore-prefixed attributes of host objects. Wrapping a
value in Unrestricted lifts that: private attributes become reachable, and
name-mangled attributes (``__secret`` declared in class ``Vault`` and
stored as ``_Vault__secret``) are found under their declared spelling.
"""

import inspect
from typing import Any, Iterator, List, Tuple


def _lineage(obj: Any) -> Tuple[type, ...]:
    """Classes whose private names may be mangled into obj's attributes."""
    return obj.__mro__ if inspect.isclass(obj) else type(obj).__mro__


def _mangled_candidates(obj: Any, name: str) -> Iterator[str]:
    if not name.startswith("__") or name.endswith("__"):
        return
    for cls in _lineage(obj):
        owner = cls.__name__.lstrip("_")
        if owner:
            yield f"_{owner}{name}"


def _resolve_name(obj: Any, name: str) -> str:
    """The attribute name under which `name` is actually stored on obj."""
    if hasattr(obj, name):
        return name
    for candidate in _mangled_candidates(obj, name):
        if hasattr(obj, candidate):
            return candidate
    return name


def demangle(name: str, obj: Any) -> str:
    """Inverse of private name mangling for the classes obj is built from."""
    for cls in _lineage(obj):
        owner = cls.__name__.lstrip("_")
        prefix = f"_{owner}__"
        if owner and name.startswith(prefix) and not name.endswith("__"):
            return name[len(prefix) - 2:]
    return name


class Unrestricted:
    """Transparent proxy exposing every attribute of the wrapped value."""
    __slots__ = ("_target",)

    def __init__(self, target: Any):
        object.__setattr__(self, "_target", target)

    def __getattr__(self, name: str) -> Any:
        target = object.__getattribute__(self, "_target")
        return getattr(target, _resolve_name(target, name))

    def __setattr__(self, name: str, value: Any):
        target = object.__getattribute__(self, "_target")
        setattr(target, _resolve_name(target, name), value)

    def __dir__(self) -> List[str]:
        target = object.__getattribute__(self, "_target")
        return sorted({demangle(n, target) for n in dir(target)})

    def __repr__(self) -> str:
        return f"Unrestricted({object.__getattribute__(self, '_target')!r})"


def unwrap(value: Any) -> Any:
    if isinstance(value, Unrestricted):
        return object.__getattribute__(value, "_target")
    return value


def sudo(*values) -> List[Unrestricted]:
    """Wraps each value, preserving order and count."""
    return [Unrestricted(v) for v in values]
