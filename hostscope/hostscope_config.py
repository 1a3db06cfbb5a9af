"""
Binder configuration.

Every field has a default, so BinderConfig() is a working configuration.
Files may be JSON, YAML or TOML; the format follows the file suffix.
"""

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import yaml

from hostscope.hostscope_datatypes import ConfigError
from hostscope.hostscope_names import (
    HELPER_PREFIXES, PATH_SEPARATOR, RECORD_MARKERS, SYNTHETIC_MARKERS, NameNormalizer,
)
from hostscope.hostscope_serialize import load_file, serialize


@dataclass
class BinderConfig:
    path_separator: str = PATH_SEPARATOR
    synthetic_markers: Tuple[str, ...] = SYNTHETIC_MARKERS
    record_markers: Tuple[str, ...] = RECORD_MARKERS
    helper_prefixes: Tuple[str, ...] = HELPER_PREFIXES
    # Root bindings starting with this prefix are control directives.
    directive_prefix: str = "$"
    discard_target: str = "_"
    merge_target: str = "."
    # Module-name prefixes the process symbol table never reports.
    exclude_modules: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if f.type == str:
                if not isinstance(value, str):
                    raise ConfigError(f"{f.name} must be a string, not {type(value).__name__}")
            else:
                if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
                    raise ConfigError(f"{f.name} must be a list of strings")
                setattr(self, f.name, tuple(value))
        if not self.path_separator:
            raise ConfigError("path_separator must not be empty")
        if self.discard_target == self.merge_target:
            raise ConfigError("discard_target and merge_target must differ")

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> 'BinderConfig':
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"configuration must be a mapping, not {type(data).__name__}")
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'BinderConfig':
        try:
            data = load_file(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"cannot read configuration {path}: {e}") from e
        return cls.from_mapping(data)

    def to_mapping(self) -> Dict[str, Any]:
        data = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            data[f.name] = list(value) if isinstance(value, tuple) else value
        return data

    def dumps(self, fmt: str = "yaml") -> str:
        return serialize(self.to_mapping(), fmt=fmt)

    def normalizer(self) -> NameNormalizer:
        return NameNormalizer(
            synthetic_markers=self.synthetic_markers,
            record_markers=self.record_markers,
            helper_prefixes=self.helper_prefixes,
            path_separator=self.path_separator,
        )
