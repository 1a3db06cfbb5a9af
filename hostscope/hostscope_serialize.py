from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any, Optional

import yaml


# --------------------------
# Helpers
# --------------------------

_SUFFIXES = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
}


def _norm_text(data: bytes | bytearray | str, *, encoding: Optional[str] = None) -> str:
    if isinstance(data, (bytes, bytearray)):
        return data.decode(encoding or 'utf-8', errors='replace')
    return data


def detect_format(path: Optional[str | Path] = None, data_hint: Optional[str] = None) -> Optional[str]:
    """
    Returns a canonical format name among: 'json', 'yaml', 'toml'.
    Uses the file suffix first; falls back to simple data sniffing if provided.
    """
    if path is not None:
        f = _SUFFIXES.get(Path(path).suffix.lower())
        if f:
            return f

    if data_hint is not None:
        s = data_hint.lstrip()
        if s.startswith('{') or s.startswith('['):
            return 'json'
        if s.startswith('---'):
            return 'yaml'
    return None


# --------------------------
# Public API
# --------------------------

def deserialize(data: bytes | bytearray | str,
                *,
                fmt: Optional[str] = None,
                encoding: Optional[str] = None) -> Any:
    """
    Convert text or bytes to native Python structures.
    Supported fmt: 'json', 'yaml', 'toml'. If fmt is None, the data is
    sniffed; anything unrecognised is read as YAML, which is a superset of JSON.
    Malformed input raises the decoder's own error.
    """
    text = _norm_text(data, encoding=encoding)
    f = (fmt or detect_format(data_hint=text) or 'yaml').lower()
    if f == 'json':
        return json.loads(text)
    if f == 'yaml':
        return yaml.safe_load(text)
    if f == 'toml':
        return tomllib.loads(text)
    raise ValueError(f"Unsupported format: {fmt!r}")


def serialize(value: Any, *, fmt: str, pretty: bool = True) -> str:
    """
    Convert a native Python value into a textual representation.
    - fmt: 'json' | 'yaml'
    """
    f = (fmt or '').lower()
    if f == 'json':
        return json.dumps(value, ensure_ascii=False, indent=2 if pretty else None)
    if f == 'yaml':
        return yaml.safe_dump(value, sort_keys=False)
    if f == 'toml':
        raise ValueError("TOML serialization is not supported (tomllib is read-only)")
    raise ValueError(f"Unsupported serialization format: {fmt!r}")


def load_file(path: str | Path) -> Any:
    p = Path(path)
    return deserialize(p.read_bytes(), fmt=detect_format(p))


__all__ = [
    "deserialize",
    "serialize",
    "detect_format",
    "load_file",
]
