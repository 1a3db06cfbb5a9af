"""
Qualified-name handling: normalizing symbol names into namespaces and
selecting the members of one namespace.
"""

import keyword
from typing import Iterable, List, Optional, Sequence, Set, Tuple

# Names the interpreter synthesizes for code that has no module of its own:
# <string>, <stdin>, <frozen importlib._bootstrap>, <lambda>.
SYNTHETIC_MARKERS: Tuple[str, ...] = ("<",)
# Structural record literals such as "{x: int, y: int}".
RECORD_MARKERS: Tuple[str, ...] = ("{",)
# Decorations on generated equality/hash helpers, e.g. "__eq__:pkg/mod.Point".
HELPER_PREFIXES: Tuple[str, ...] = ("__eq__:", "__hash__:")
PATH_SEPARATOR = "/"


class NameNormalizer:
    """Splits qualified names into (namespace, local member)."""

    def __init__(self,
                 synthetic_markers: Sequence[str] = SYNTHETIC_MARKERS,
                 record_markers: Sequence[str] = RECORD_MARKERS,
                 helper_prefixes: Sequence[str] = HELPER_PREFIXES,
                 path_separator: str = PATH_SEPARATOR):
        self.discard_markers = tuple(synthetic_markers) + tuple(record_markers)
        self.helper_prefixes = tuple(helper_prefixes)
        self.path_separator = path_separator

    def split(self, name: str) -> Optional[Tuple[str, Optional[str]]]:
        """
        Returns (namespace, local) for a qualified name, or None for names
        that belong to no user namespace. local is None when the name is a
        bare namespace path.
        """
        if name.startswith(self.discard_markers):
            return None
        stripped = True
        while stripped:
            stripped = False
            for prefix in self.helper_prefixes:
                if prefix and name.startswith(prefix):
                    name = name[len(prefix):]
                    stripped = True

        sep = name.rfind(self.path_separator)
        cut = sep + len(self.path_separator) if sep >= 0 else 0
        pkg_prefix, rest = name[:cut], name[cut:]
        dot = rest.find(".")
        if dot < 0:
            return name, None
        return pkg_prefix + rest[:dot], rest[dot + 1:]

    def namespace(self, name: str) -> Optional[str]:
        parts = self.split(name)
        return parts[0] if parts else None

    def last_segment(self, namespace: str) -> str:
        """The default binding name for an imported namespace."""
        return namespace.rsplit(self.path_separator, 1)[-1]


default_normalizer = NameNormalizer()


def is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def extract_namespaces(symbols, normalizer: NameNormalizer = default_normalizer) -> List[str]:
    """Sorted, de-duplicated namespaces of every global, function and type."""
    found: Set[str] = set()
    for names in (symbols.globals(), symbols.functions()):
        for name in names:
            ns = normalizer.namespace(name)
            if ns is not None:
                found.add(ns)
    for typ in symbols.types():
        found.add(typ.namespace)
    return sorted(found)


def filter_members(namespace: str, names: Iterable[str]) -> List[str]:
    """Local names of the entries qualified by namespace, sorted."""
    prefix = namespace + "."
    return sorted(name[len(prefix):] for name in names if name.startswith(prefix))


def filter_names(haystack: Iterable[str], needle: str) -> List[str]:
    """Entries containing needle, in their original order."""
    return [hay for hay in haystack if needle in hay]
