import logging
from pathlib import Path

from memcache_bootstrap.domain import IDiagnosticWriter

logger = logging.getLogger(__name__)


class FileDiagnosticWriter(IDiagnosticWriter):
    """Appends diagnostic lines to a file, ignoring any I/O failure.

    Runs before the host's logging is set up, so a failed write must never
    stop startup.
    """

    def write(self, path: Path, line: str) -> None:
        try:
            with open(path, "a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        except OSError as e:
            logger.debug("Could not write diagnostic to %s: %s", path, e)
