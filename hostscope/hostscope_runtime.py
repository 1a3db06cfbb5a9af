# hostscope_runtime.py

import inspect
import logging
from functools import partial
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from hostscope.hostscope_config import BinderConfig
from hostscope.hostscope_datatypes import ArgumentError, Environment, HostFunction
from hostscope.hostscope_inspect import list_members
from hostscope.hostscope_names import (
    NameNormalizer, extract_namespaces, filter_members, filter_names, is_identifier,
)
from hostscope.hostscope_sudo import sudo
from hostscope.hostscope_symbols import ProcessSymbolTable, SymbolTable
from hostscope.hostscope_unsafe import new_at

logger = logging.getLogger("hostscope.runtime")

# ===================================================================
# 1. Binding markers
# ===================================================================


def host_function(func):
    """Marks a toolkit method to be bound as a HostFunction (positional args in, result list out)."""
    func._is_host_function = True
    return func


def directive(func):
    """Marks a toolkit method as a control directive, bound under the directive prefix."""
    func._is_directive = True
    return func


def _marked(member, flag: str) -> bool:
    if getattr(member, flag, False):
        return True
    func = getattr(member, "__func__", None)
    return func is not None and getattr(func, flag, False)


def _require_strings(entry: str, args: Sequence[Any], count: int):
    ordinals = ("first", "second", "third")
    for i in range(count):
        if not isinstance(args[i], str):
            raise ArgumentError(f"{entry} expected the {ordinals[i]} argument to be a string")


def invoke_by_name(symbols: SymbolTable, name: str, *args) -> List[Any]:
    """Calls the function `name` through the symbol table and returns its results."""
    return list(symbols.invoke(name, *args))


# ===================================================================
# 2. Namespace import
# ===================================================================

class NamespaceImporter:
    """Copies the globals and functions of one namespace into an environment.

    Globals are resolved once (snapshot). Functions become HostFunctions that
    call the qualified name captured here. Members are staged first and only
    committed after every one of them resolved, so a failed import leaves
    the target untouched.
    """

    def __init__(self, symbols: SymbolTable, normalizer: NameNormalizer, config: BinderConfig):
        self.symbols = symbols
        self.normalizer = normalizer
        self.config = config

    def _members(self, names: List[str], namespace: str) -> Iterator[Tuple[str, str]]:
        prefix = namespace + "."
        for name in names:
            if not name.startswith(prefix):
                continue
            parts = self.normalizer.split(name)
            if parts is None or parts[0] != namespace:
                continue
            local = name[len(prefix):]
            if is_identifier(local):
                yield name, local

    def collect(self, namespace: str) -> Dict[str, Any]:
        staged: Dict[str, Any] = {}
        for name, local in self._members(self.symbols.globals(), namespace):
            staged[local] = self.symbols.resolve_global(name)
        for name, local in self._members(self.symbols.functions(), namespace):
            staged[local] = HostFunction(partial(invoke_by_name, self.symbols, name), name=name)
        return staged

    def import_into(self, root: Environment, target: str, namespace: str) -> Optional[Environment]:
        """
        Imports namespace according to target:
          - the discard target loads the members and binds nothing,
          - the merge target writes them into root,
          - any other name binds a new child environment ("" means the
            namespace's last path segment).
        Returns the environment that received the members, if any.
        """
        staged = self.collect(namespace)
        if target == self.config.discard_target:
            logger.info("loaded %d member(s) of %s, discarded", len(staged), namespace)
            return None
        if target == self.config.merge_target:
            root.update(staged)
            logger.info("imported %d member(s) of %s into the root environment", len(staged), namespace)
            return root
        if not target:
            target = self.normalizer.last_segment(namespace)
        child = Environment(staged)
        root[target] = child
        logger.info("imported %d member(s) of %s as %s", len(staged), namespace, target)
        return child


# ===================================================================
# 3. The toolkit bound into every root environment
# ===================================================================

class Toolkit:
    """Entries of the root environment.

    Each method named `_name` is bound as `name`. Methods marked with
    @host_function are wrapped in HostFunction; @directive methods get the
    directive prefix and are hidden from discovery.
    """

    def __init__(self, session: 'BinderSession'):
        self.session = session

    @property
    def symbols(self) -> SymbolTable:
        return self.session.symbols

    # --- Namespace index ---
    def _namespaces(self) -> List[str]:
        return extract_namespaces(self.symbols, self.session.normalizer)

    def _globals(self, namespace):
        _require_strings("globals", [namespace], 1)
        return filter_members(namespace, self.symbols.globals())

    def _functions(self, namespace):
        _require_strings("functions", [namespace], 1)
        return filter_members(namespace, self.symbols.functions())

    def _types(self, namespace):
        _require_strings("types", [namespace], 1)
        return sorted(t.name for t in self.symbols.types() if t.namespace == namespace)

    def _filter(self, haystack, needle):
        if isinstance(haystack, str):
            raise ArgumentError("filter expected a list of strings")
        haystack = list(haystack)
        if not all(isinstance(h, str) for h in haystack):
            raise ArgumentError("filter expected a list of strings")
        _require_strings("filter", [needle], 1)
        return filter_names(haystack, needle)

    # --- Resolution and invocation ---
    @host_function
    def _lookup(self, *args):
        if len(args) != 2:
            raise ArgumentError("lookup expected 2 arguments")
        _require_strings("lookup", args, 2)
        return [self.symbols.resolve_global(f"{args[0]}.{args[1]}")]

    @host_function
    def _call(self, *args):
        if len(args) < 2:
            raise ArgumentError("call expected at least 2 arguments")
        _require_strings("call", args, 2)
        return invoke_by_name(self.symbols, f"{args[0]}.{args[1]}", *args[2:])

    @host_function
    def _new_at(self, *args):
        if len(args) != 3:
            raise ArgumentError("new_at expected 3 arguments")
        return [new_at(self.symbols, *args)]

    # --- Discovery and privileges ---
    def _dir(self, *args):
        return list_members(self.session.root, *args, directive_prefix=self.session.config.directive_prefix)

    @host_function
    def _sudo(self, *args):
        return sudo(*args)

    # --- Directives ---
    @directive
    @host_function
    def _import(self, *args):
        if len(args) != 2:
            raise ArgumentError("import expected 2 arguments")
        if not isinstance(args[0], str):
            raise ArgumentError("import expected a target name argument")
        if not isinstance(args[1], str):
            raise ArgumentError("import expected a namespace name")
        self.session.importer.import_into(self.session.root, args[0], args[1])
        return []


# ===================================================================
# 4. Sessions
# ===================================================================

class BinderSession:
    """Binds one symbol table into a root environment.

    The session owns the root environment; independent sessions share no
    state. close() drops every binding.
    """

    def __init__(self, symbols: Optional[SymbolTable] = None, config: Optional[BinderConfig] = None):
        self.config = config or BinderConfig()
        if symbols is None:
            symbols = ProcessSymbolTable(
                exclude_modules=self.config.exclude_modules,
                path_separator=self.config.path_separator,
            )
        self.symbols = symbols
        self.normalizer = self.config.normalizer()
        self.importer = NamespaceImporter(self.symbols, self.normalizer, self.config)
        self.root = Environment()
        self._bind_toolkit()

    def _bind_toolkit(self):
        """Bind the toolkit entries into the root environment."""
        toolkit = Toolkit(self)
        for name, member in inspect.getmembers(toolkit):
            if not (name.startswith('_') and not name.startswith('__') and callable(member)):
                continue
            entry = name[1:]
            if _marked(member, "_is_directive"):
                entry = self.config.directive_prefix + entry
            if _marked(member, "_is_host_function"):
                member = HostFunction(member, name=entry)
            self.root[entry] = member

    def import_namespace(self, namespace: str, target: str = "") -> Optional[Environment]:
        return self.importer.import_into(self.root, target, namespace)

    def reset(self):
        """Drops every binding and restores the toolkit entries."""
        self.root.clear()
        self._bind_toolkit()

    def close(self):
        self.root.clear()

    def __enter__(self) -> 'BinderSession':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
