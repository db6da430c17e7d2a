import importlib.util
import logging

from memcache_bootstrap.domain import ClientLibrary, IExtensionRegistry

logger = logging.getLogger(__name__)


class ImportlibExtensionRegistry(IExtensionRegistry):
    """Probes client libraries through ``importlib`` without importing them."""

    def is_available(self, library: ClientLibrary) -> bool:
        try:
            available = importlib.util.find_spec(library.value) is not None
        except (ImportError, ValueError):
            available = False
        logger.debug("Client library %s %s", library, "found" if available else "not found")
        return available
