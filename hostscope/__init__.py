from hostscope.hostscope_config import BinderConfig
from hostscope.hostscope_datatypes import (
    ArgumentError, BindingKind, ConfigError, DeclaredType, Environment, HostFunction,
    InvocationError, SymbolNotFound, SymbolTableError,
)
from hostscope.hostscope_names import NameNormalizer, extract_namespaces, filter_members
from hostscope.hostscope_runtime import BinderSession, NamespaceImporter, Toolkit
from hostscope.hostscope_sudo import Unrestricted, sudo, unwrap
from hostscope.hostscope_symbols import ProcessSymbolTable, SymbolTable
from hostscope.hostscope_unsafe import TypedReference

__all__ = [
    "ArgumentError",
    "BinderConfig",
    "BinderSession",
    "BindingKind",
    "ConfigError",
    "DeclaredType",
    "Environment",
    "HostFunction",
    "InvocationError",
    "NameNormalizer",
    "NamespaceImporter",
    "ProcessSymbolTable",
    "SymbolNotFound",
    "SymbolTable",
    "SymbolTableError",
    "Toolkit",
    "TypedReference",
    "Unrestricted",
    "extract_namespaces",
    "filter_members",
    "sudo",
    "unwrap",
]
