"""
Infrastructure layer - Runtime integrations.

This layer probes the Python runtime and filesystem and wires the selector to them.
It depends on both Application and Domain layers.
"""

from . import testing
from .autoload import MetaPathAutoloader, NamespacePathFinder
from .bootstrap import apply_memcache_settings, create_selector
from .diagnostics import FileDiagnosticWriter
from .probes import ImportlibExtensionRegistry

__all__ = [
    "FileDiagnosticWriter",
    "ImportlibExtensionRegistry",
    "MetaPathAutoloader",
    "NamespacePathFinder",
    "apply_memcache_settings",
    "create_selector",
    "testing",
]
