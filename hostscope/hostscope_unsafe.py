"""
Unsafe zone: typed references over raw addresses.

Nothing in this module validates an address. A TypedReference is only as
good as the address it was given: the caller guarantees that the address
holds a live, correctly typed value for as long as the reference is used.
Dereferencing anything else is undefined behaviour and may crash the
interpreter. Keep uses of this module out of otherwise checked code paths.
"""

import ctypes
from typing import Any

from hostscope.hostscope_datatypes import ArgumentError

# Base of every ctypes data type; they can be laid over a raw address directly.
_CData = ctypes.c_int.__mro__[-2]


def is_layout_type(typ: type) -> bool:
    """True for ctypes data types (scalars, structures, unions, arrays, pointers)."""
    return isinstance(typ, type) and issubclass(typ, _CData)


class TypedReference:
    """A view of `type` anchored at `address`.

    Creating one never touches memory. For ctypes types the view is the
    ctypes object laid over the address; for any other class the address is
    read as the identity of a live instance.
    """
    __slots__ = ("type", "address")

    def __init__(self, typ: type, address: int):
        self.type = typ
        self.address = address

    def deref(self) -> Any:
        if is_layout_type(self.type):
            return self.type.from_address(self.address)
        return ctypes.cast(self.address, ctypes.py_object).value

    @property
    def value(self) -> Any:
        """The referenced value; for ctypes scalars, the Python value they hold."""
        target = self.deref()
        if is_layout_type(self.type) and issubclass(self.type, ctypes._SimpleCData):
            return target.value
        return target

    @value.setter
    def value(self, new_value: Any):
        if not (is_layout_type(self.type) and issubclass(self.type, ctypes._SimpleCData)):
            raise TypeError(f"cannot assign through a reference to {self.type.__name__}")
        self.deref().value = new_value

    def __repr__(self) -> str:
        return f"<TypedReference {self.type.__module__}.{self.type.__qualname__} at {self.address:#x}>"


def check_address(address: Any) -> int:
    # bool is an int subclass but never an address
    if isinstance(address, bool) or not isinstance(address, int):
        raise ArgumentError("new_at expected the third argument to be an integer")
    if address < 0:
        raise ArgumentError("new_at expected a non-negative address")
    return address


def new_at(symbols, namespace: str, type_name: str, address: int) -> TypedReference:
    """Resolves namespace.type_name and anchors a reference to it at address."""
    if not isinstance(namespace, str):
        raise ArgumentError("new_at expected the first argument to be a string")
    if not isinstance(type_name, str):
        raise ArgumentError("new_at expected the second argument to be a string")
    address = check_address(address)
    typ = symbols.resolve_type(namespace, type_name)
    return TypedReference(typ, address)
