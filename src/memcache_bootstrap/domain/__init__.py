"""
Domain layer - Core models and rules for bootstrap cache selection.

This layer contains the service graph value objects, operator configuration and
the abstract probes the selector relies on. It has no dependencies on other layers.
"""

from .enums import ClientLibrary, Construction, SelectionOutcome
from .exceptions import (
    BootstrapException,
    CircularReferenceError,
    DuplicateServiceError,
    UnresolvedReferenceError,
)
from .interfaces import IAutoloader, IDiagnosticWriter, IExtensionRegistry
from .models import (
    ContainerDefinition,
    FactoryMethod,
    HostingEnvironment,
    SelectionResult,
    SelectorConfig,
    ServiceDefinition,
    ServiceReference,
)

__all__ = [
    # Enums
    "ClientLibrary",
    "Construction",
    "SelectionOutcome",
    # Exceptions
    "BootstrapException",
    "CircularReferenceError",
    "DuplicateServiceError",
    "UnresolvedReferenceError",
    # Interfaces
    "IAutoloader",
    "IDiagnosticWriter",
    "IExtensionRegistry",
    # Models
    "ContainerDefinition",
    "FactoryMethod",
    "HostingEnvironment",
    "SelectionResult",
    "SelectorConfig",
    "ServiceDefinition",
    "ServiceReference",
]
