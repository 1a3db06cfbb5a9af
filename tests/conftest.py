import sys
import textwrap
import types

import pytest

from hostscope import BinderSession, DeclaredType, InvocationError, SymbolNotFound, SymbolTable


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y

    def norm1(self):
        return abs(self.x) + abs(self.y)


class Blob:
    pass


def _fail():
    raise ValueError("boom")


class FakeSymbolTable(SymbolTable):
    """In-memory symbol table with a small two-namespace application."""

    def __init__(self, globals_=None, functions=None, types_=None):
        self._globals = dict(globals_ if globals_ is not None else {
            "app/models.VERSION": "1.2",
            "app/models.registry": {"a": 1},
            "app/models.Point.origin": (0, 0),
            "app/views.DEBUG": True,
            "<string>.leak": 1,
        })
        self._functions = dict(functions if functions is not None else {
            "app/models.make_point": lambda x, y: Point(x, y),
            "app/models.total": lambda *xs: sum(xs),
            "app/models.fail": _fail,
            "app/models.Point.norm1": Point.norm1,
            "app/views.render": lambda name: f"<{name}>",
            "__eq__:app/models.Point": lambda a, b: a is b,
            "{x: int}.eq": lambda a, b: a == b,
        })
        self._types = dict(types_ if types_ is not None else {
            DeclaredType("app/models", "Point"): Point,
            DeclaredType("app/storage", "Blob"): Blob,
        })
        self.calls = []
        self.unresolvable = set()
        self.broken = False

    def globals(self):
        if self.broken:
            raise RuntimeError("symbol table unavailable")
        return list(self._globals)

    def functions(self):
        if self.broken:
            raise RuntimeError("symbol table unavailable")
        return list(self._functions)

    def types(self):
        if self.broken:
            raise RuntimeError("symbol table unavailable")
        return list(self._types)

    def resolve_global(self, name):
        if name in self.unresolvable or name not in self._globals:
            raise SymbolNotFound(name)
        return self._globals[name]

    def invoke(self, name, *args):
        self.calls.append((name, args))
        if name not in self._functions:
            raise InvocationError(name, f"symbol not found: {name}")
        try:
            return [self._functions[name](*args)]
        except Exception as e:
            raise InvocationError(name, f"{type(e).__name__}: {e}") from e

    def resolve_type(self, namespace, name):
        try:
            return self._types[DeclaredType(namespace, name)]
        except KeyError:
            raise SymbolNotFound(f"{namespace}.{name}") from None


@pytest.fixture
def fake_symbols():
    return FakeSymbolTable()


@pytest.fixture
def session(fake_symbols):
    with BinderSession(fake_symbols) as s:
        yield s


FIXTURE_SOURCE = textwrap.dedent('''
    import ctypes

    SCALE = 3
    label = "geometry"

    def scale(x):
        return x * SCALE

    def fail():
        raise RuntimeError("geometry failure")

    class Point(ctypes.Structure):
        _fields_ = [("x", ctypes.c_int), ("y", ctypes.c_int)]

        def norm1(self):
            return abs(self.x) + abs(self.y)

    class Vault:
        def __init__(self, secret):
            self.__secret = secret
            self._hint = "ask"

        def open(self):
            return self.__secret
''')


@pytest.fixture
def fixture_module():
    """Registers the package `hsfixture` with the module `hsfixture.geometry`."""
    package = types.ModuleType("hsfixture")
    package.__path__ = []
    module = types.ModuleType("hsfixture.geometry")
    exec(compile(FIXTURE_SOURCE, "hsfixture/geometry.py", "exec"), module.__dict__)
    package.geometry = module
    sys.modules["hsfixture"] = package
    sys.modules["hsfixture.geometry"] = module
    try:
        yield module
    finally:
        sys.modules.pop("hsfixture.geometry", None)
        sys.modules.pop("hsfixture", None)
