from abc import ABC, abstractmethod
from pathlib import Path

from memcache_bootstrap.domain.enums import ClientLibrary


class IExtensionRegistry(ABC):
    """Abstract interface for probing optional client libraries."""

    @abstractmethod
    def is_available(self, library: ClientLibrary) -> bool:
        """Return whether the library can be imported, without importing it.

        Args:
            library: The client library to probe.
        """


class IAutoloader(ABC):
    """Abstract interface for process-wide import rules."""

    @abstractmethod
    def register(self, namespace: str, directory: Path) -> bool:
        """Map a dotted import prefix onto a source directory.

        Args:
            namespace: Dotted import prefix, e.g. ``drupal.memcache``.
            directory: Directory holding the modules of that prefix.

        Returns:
            True if a new rule was installed, False if it already existed or
            the directory is missing.
        """


class IDiagnosticWriter(ABC):
    """Abstract interface for best-effort diagnostic output."""

    @abstractmethod
    def write(self, path: Path, line: str) -> None:
        """Append a line to the file at ``path``. Must never raise.

        Args:
            path: Destination file.
            line: Text to append, without trailing newline.
        """
