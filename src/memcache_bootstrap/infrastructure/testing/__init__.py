"""
Testing utilities module.

Provides in-memory stand-ins for the runtime probes so the selector can be
exercised without real client libraries, import hooks or log files.
"""

from .utilities import MemoryDiagnosticWriter, RecordingAutoloader, StaticExtensionRegistry, fixed_clock

__all__ = [
    "MemoryDiagnosticWriter",
    "RecordingAutoloader",
    "StaticExtensionRegistry",
    "fixed_clock",
]
