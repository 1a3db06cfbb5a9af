"""
Symbol-table services.

A SymbolTable enumerates and resolves the symbols of a host process. The
binder treats it as an oracle; ProcessSymbolTable is the implementation
backed by the modules loaded into the current interpreter.
"""

import inspect
import logging
import sys
from abc import ABC, abstractmethod
from types import ModuleType
from typing import Any, Dict, Iterator, List, Sequence, Tuple

from hostscope.hostscope_datatypes import (
    DeclaredType, InvocationError, SymbolNotFound, SymbolTableError,
)
from hostscope.hostscope_names import PATH_SEPARATOR

logger = logging.getLogger("hostscope.symbols")


class SymbolTable(ABC):
    """The required base class for any symbol-table service used by the binder."""

    @abstractmethod
    def globals(self) -> List[str]:
        """Qualified names of every global variable."""
        raise NotImplementedError

    @abstractmethod
    def functions(self) -> List[str]:
        """Qualified names of every function and method."""
        raise NotImplementedError

    @abstractmethod
    def types(self) -> List[DeclaredType]:
        raise NotImplementedError

    @abstractmethod
    def resolve_global(self, name: str) -> Any:
        """Current value of the global with qualified name `name`."""
        raise NotImplementedError

    @abstractmethod
    def invoke(self, name: str, *args) -> List[Any]:
        """Calls the function `name` and returns its results.

        Every failure is reported as InvocationError.
        """
        raise NotImplementedError

    @abstractmethod
    def resolve_type(self, namespace: str, name: str) -> type:
        raise NotImplementedError


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _is_method_like(value: Any) -> bool:
    return isinstance(value, (staticmethod, classmethod)) or inspect.isfunction(value)


class ProcessSymbolTable(SymbolTable):
    """Symbols of the modules currently loaded in this interpreter.

    Module names are rendered with `/` between package levels, so the
    function ``parse`` of ``xml.etree.ElementTree`` is reported as
    ``xml/etree/ElementTree.parse`` and the method ``get`` of
    ``collections.abc.Mapping`` as ``collections/abc.Mapping.get``.

    Only symbols owned by a module are reported: functions and classes whose
    ``__module__`` names that module, and module-level values that are
    neither routines, classes nor modules. Dunder attributes are skipped.
    Modules are never imported on demand.
    """

    def __init__(self, exclude_modules: Sequence[str] = (), path_separator: str = PATH_SEPARATOR):
        self.exclude_modules = tuple(exclude_modules)
        self.path_separator = path_separator

    # --- Module discovery ---

    def _namespace(self, module_name: str) -> str:
        return module_name.replace(".", self.path_separator)

    def _excluded(self, module_name: str) -> bool:
        return any(module_name == p or module_name.startswith(p + ".") for p in self.exclude_modules)

    def _modules(self) -> Iterator[Tuple[str, Dict[str, Any]]]:
        """Yields (module name, snapshot of its namespace) once per loaded module."""
        seen = set()
        for module in list(sys.modules.values()):
            if not isinstance(module, ModuleType) or id(module) in seen:
                continue
            seen.add(id(module))
            name = getattr(module, "__name__", None)
            if not isinstance(name, str) or self._excluded(name):
                continue
            try:
                namespace = dict(vars(module))
            except TypeError:
                logger.warning("skipping module %s: namespace is not introspectable", name)
                continue
            yield name, namespace

    def _owned(self, value: Any, module_name: str) -> bool:
        return getattr(value, "__module__", None) == module_name

    # --- Enumeration ---

    def globals(self) -> List[str]:
        names = []
        for module_name, namespace in self._modules():
            ns = self._namespace(module_name)
            for attr, value in namespace.items():
                if _is_dunder(attr):
                    continue
                if inspect.ismodule(value) or inspect.isclass(value) or inspect.isroutine(value):
                    continue
                names.append(f"{ns}.{attr}")
        return names

    def functions(self) -> List[str]:
        names = []
        for module_name, namespace in self._modules():
            ns = self._namespace(module_name)
            for attr, value in namespace.items():
                if _is_dunder(attr):
                    continue
                if inspect.isroutine(value) and self._owned(value, module_name):
                    names.append(f"{ns}.{attr}")
                elif inspect.isclass(value) and self._owned(value, module_name):
                    for member, raw in list(vars(value).items()):
                        if not _is_dunder(member) and _is_method_like(raw):
                            names.append(f"{ns}.{attr}.{member}")
        return names

    def types(self) -> List[DeclaredType]:
        found = []
        for module_name, namespace in self._modules():
            ns = self._namespace(module_name)
            for attr, value in namespace.items():
                if inspect.isclass(value) and self._owned(value, module_name) and not _is_dunder(attr):
                    found.append(DeclaredType(ns, attr))
        return found

    # --- Resolution ---

    def _module_for(self, namespace: str) -> ModuleType:
        dotted = namespace.replace(self.path_separator, ".")
        module = sys.modules.get(dotted)
        if isinstance(module, ModuleType) and not self._excluded(dotted):
            return module
        raise SymbolNotFound(namespace)

    def _locate(self, name: str) -> Any:
        sep = name.rfind(self.path_separator)
        cut = sep + len(self.path_separator) if sep >= 0 else 0
        dot = name.find(".", cut)
        if dot < 0:
            raise SymbolNotFound(name)
        target: Any = self._module_for(name[:dot])
        for part in name[dot + 1:].split("."):
            try:
                target = getattr(target, part)
            except AttributeError:
                raise SymbolNotFound(name) from None
        return target

    def resolve_global(self, name: str) -> Any:
        logger.debug("resolving global %s", name)
        return self._locate(name)

    def invoke(self, name: str, *args) -> List[Any]:
        logger.debug("invoking %s with %d argument(s)", name, len(args))
        try:
            func = self._locate(name)
        except SymbolTableError as e:
            raise InvocationError(name, str(e)) from e
        if not callable(func):
            raise InvocationError(name, f"{type(func).__name__} object is not callable")
        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            signature = None
        if signature is not None:
            try:
                signature.bind(*args)
            except TypeError as e:
                raise InvocationError(name, f"wrong arguments: {e}") from e
        try:
            result = func(*args)
        except Exception as e:
            raise InvocationError(name, f"{type(e).__name__}: {e}") from e
        return [result]

    def resolve_type(self, namespace: str, name: str) -> type:
        qualified = f"{namespace}.{name}"
        logger.debug("resolving type %s", qualified)
        typ = self._locate(qualified)
        if not inspect.isclass(typ):
            raise SymbolNotFound(qualified)
        return typ
