"""
memcache-bootstrap: Bootstrap-time selection of a memcache cache and lock backend.

Public API exports for the memcache-bootstrap package.
"""

# Application exports
from memcache_bootstrap.application import (
    BootstrapCacheSelector,
    ContainerDefinitionBuilder,
    build_bootstrap_container_definition,
)

# Domain exports
from memcache_bootstrap.domain import (
    BootstrapException,
    CircularReferenceError,
    ClientLibrary,
    ContainerDefinition,
    DuplicateServiceError,
    HostingEnvironment,
    SelectionOutcome,
    SelectionResult,
    SelectorConfig,
    UnresolvedReferenceError,
)

# Infrastructure exports
from memcache_bootstrap.infrastructure import apply_memcache_settings, create_selector

__version__ = "0.1.0"

__all__ = [
    # Selector
    "BootstrapCacheSelector",
    "apply_memcache_settings",
    "create_selector",
    # Service graph
    "ContainerDefinition",
    "ContainerDefinitionBuilder",
    "build_bootstrap_container_definition",
    # Models and enums
    "ClientLibrary",
    "HostingEnvironment",
    "SelectionOutcome",
    "SelectionResult",
    "SelectorConfig",
    # Exceptions
    "BootstrapException",
    "CircularReferenceError",
    "DuplicateServiceError",
    "UnresolvedReferenceError",
]
