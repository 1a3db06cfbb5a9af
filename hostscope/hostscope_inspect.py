"""
Discovery: listing what can be reached from a binding or a host value.
"""

import dataclasses
import inspect
from typing import Any, List, Optional, Set

from hostscope.hostscope_datatypes import ArgumentError, Environment, is_environment, is_host_function
from hostscope.hostscope_sudo import Unrestricted, demangle, unwrap
from hostscope.hostscope_unsafe import TypedReference, is_layout_type

DIRECTIVE_PREFIX = "$"


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _visible(name: str, privileged: bool) -> bool:
    if _is_dunder(name):
        return False
    return privileged or not name.startswith("_")


def method_names(typ: type) -> Set[str]:
    names = set()
    for name, member in inspect.getmembers(typ):
        if inspect.isroutine(member) or isinstance(member, (property, staticmethod, classmethod)):
            names.add(name)
    return names


def declared_fields(typ: type) -> Set[str]:
    """Field names a record type declares, read from the type alone."""
    fields: Set[str] = set()
    if dataclasses.is_dataclass(typ):
        fields.update(f.name for f in dataclasses.fields(typ))
    if is_layout_type(typ):
        fields.update(entry[0] for entry in getattr(typ, "_fields_", ()))
    record = getattr(typ, "_fields", None)
    if isinstance(record, tuple) and issubclass(typ, tuple):
        fields.update(record)
    for cls in typ.__mro__:
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        fields.update(s for s in slots if s not in ("__dict__", "__weakref__"))
    return fields


def _members_of(value: Any, privileged: bool) -> List[str]:
    if inspect.isclass(value):
        # a class lists its own methods and declared fields, not those of its metaclass
        found = method_names(value) | declared_fields(value)
    else:
        typ = type(value)
        found = method_names(typ) | declared_fields(typ)
        instance_dict = getattr(value, "__dict__", None)
        if isinstance(instance_dict, dict):
            found.update(instance_dict)
    if isinstance(value, TypedReference) and isinstance(value.type, type):
        found |= method_names(value.type) | declared_fields(value.type)
    if privileged:
        found = {demangle(name, value) for name in found}
    return sorted(n for n in found if _visible(n, privileged))


def environment_names(env: Environment, directive_prefix: Optional[str] = DIRECTIVE_PREFIX) -> List[str]:
    return env.names(hidden_prefix=directive_prefix)


def list_members(root: Environment, *args, directive_prefix: Optional[str] = DIRECTIVE_PREFIX) -> List[str]:
    """
    With no argument, lists the root environment. An environment lists its
    bindings, a host function has no members, and any other value lists its
    methods and record fields. Values wrapped in Unrestricted also show
    their private members.
    """
    if len(args) > 1:
        raise ArgumentError("dir expected at most 1 argument")
    if not args:
        return environment_names(root, directive_prefix)
    arg = args[0]
    if is_environment(arg):
        return environment_names(arg, directive_prefix)
    if is_host_function(arg):
        return []
    if isinstance(arg, Unrestricted):
        return _members_of(unwrap(arg), privileged=True)
    return _members_of(arg, privileged=False)
