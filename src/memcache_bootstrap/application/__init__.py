"""
Application layer - Use cases and orchestration.

This layer builds the bootstrap service graph and runs the cache selection.
It depends only on the Domain layer.
"""

from .circular_detector import CircularReferenceDetector
from .container_builder import ContainerDefinitionBuilder, build_bootstrap_container_definition, ref
from .selector import DIAGNOSTIC_MESSAGE, BootstrapCacheSelector, format_diagnostic

__all__ = [
    "BootstrapCacheSelector",
    "CircularReferenceDetector",
    "ContainerDefinitionBuilder",
    "DIAGNOSTIC_MESSAGE",
    "build_bootstrap_container_definition",
    "format_diagnostic",
    "ref",
]
