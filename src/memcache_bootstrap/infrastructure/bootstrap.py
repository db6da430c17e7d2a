from collections.abc import MutableMapping
from pathlib import Path
from typing import Optional

from memcache_bootstrap.application import BootstrapCacheSelector
from memcache_bootstrap.domain import HostingEnvironment, SelectorConfig
from memcache_bootstrap.infrastructure.autoload import MetaPathAutoloader
from memcache_bootstrap.infrastructure.diagnostics import FileDiagnosticWriter
from memcache_bootstrap.infrastructure.probes import ImportlibExtensionRegistry


def create_selector(
    application_root: Path,
    config: Optional[SelectorConfig] = None,
) -> BootstrapCacheSelector:
    """Create a selector wired to the real runtime, ``sys.meta_path`` and filesystem.

    Args:
        application_root: Root directory that module paths are relative to.
        config: Optional operator knobs; defaults apply when omitted.
    """
    return BootstrapCacheSelector(
        application_root,
        extension_registry=ImportlibExtensionRegistry(),
        autoloader=MetaPathAutoloader(),
        diagnostic_writer=FileDiagnosticWriter(),
        config=config,
    )


def apply_memcache_settings(
    settings: MutableMapping,
    application_root: Path,
    environment: Optional[HostingEnvironment] = None,
    config: Optional[SelectorConfig] = None,
) -> MutableMapping:
    """Rewire ``settings`` onto memcache when running on the hosting platform.

    Intended to be called once from the host's settings loader.

    Args:
        settings: The host's settings tree, mutated in place.
        application_root: Root directory that module paths are relative to.
        environment: Platform markers; read from ``AH_*`` environment variables when omitted.
        config: Optional operator knobs.

    Returns:
        The ``settings`` argument.

    Example:
        >>> settings = {"memcache": {"servers": {"127.0.0.1:11211": "default"}}}
        >>> apply_memcache_settings(settings, Path("/var/www/html/docroot"))
    """
    if environment is None:
        environment = HostingEnvironment()
    return create_selector(application_root, config).apply(environment, settings)
