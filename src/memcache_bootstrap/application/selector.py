import logging
from collections.abc import MutableMapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from memcache_bootstrap.application import settings_tree
from memcache_bootstrap.application.container_builder import build_bootstrap_container_definition
from memcache_bootstrap.domain import (
    ClientLibrary,
    HostingEnvironment,
    IAutoloader,
    IDiagnosticWriter,
    IExtensionRegistry,
    SelectionOutcome,
    SelectionResult,
    SelectorConfig,
)

logger = logging.getLogger(__name__)

DIAGNOSTIC_MESSAGE = (
    "Could not enable memcache module integration: integration requested but prerequisites missing"
)


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_diagnostic(moment: datetime, message: str = DIAGNOSTIC_MESSAGE) -> str:
    """Format a diagnostic line as ``[YYYY/MM/D HH:MM:SS UTC] message``.

    The day of month carries no leading zero. Naive datetimes are taken as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return f"[{moment:%Y/%m}/{moment.day} {moment:%H:%M:%S} UTC] {message}"


class BootstrapCacheSelector:
    """Decides at bootstrap whether cache and lock services move onto memcache.

    Runs a single linear decision: gate check, library probe, module probe,
    then either splices the memcache wiring into the settings or writes a
    best-effort diagnostic line. Collaborators are injected so the decision
    can run without touching the real runtime or filesystem.

    Attributes:
        _application_root: Root directory that relative module paths resolve against.
        _config: Operator knobs.
        _extensions: Probe for optional client libraries.
        _autoloader: Installs the import rule for the integration module.
        _diagnostics: Writer for the fallback log line.
        _clock: Returns the current time for diagnostic timestamps.
    """

    def __init__(
        self,
        application_root: Path,
        extension_registry: IExtensionRegistry,
        autoloader: IAutoloader,
        diagnostic_writer: IDiagnosticWriter,
        config: Optional[SelectorConfig] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the selector with its probes and writers.

        Args:
            application_root: Root directory that module paths resolve against.
            extension_registry: Probe for optional client libraries.
            autoloader: Installs the import rule for the integration module.
            diagnostic_writer: Writer for the fallback log line.
            config: Optional operator knobs; defaults apply when omitted.
            clock: Source of the current time for diagnostic timestamps.
        """
        self._application_root = Path(application_root)
        self._config = config or SelectorConfig()
        self._extensions = extension_registry
        self._autoloader = autoloader
        self._diagnostics = diagnostic_writer
        self._clock = clock

    @property
    def config(self) -> SelectorConfig:
        """Operator knobs this selector runs with."""
        return self._config

    def apply(self, environment: HostingEnvironment, settings: MutableMapping) -> MutableMapping:
        """Run the selection and return the same, possibly mutated, settings mapping.

        Args:
            environment: Hosting platform markers.
            settings: The host's settings tree, mutated in place.

        Returns:
            The ``settings`` argument.
        """
        self.select(environment, settings)
        return settings

    def select(self, environment: HostingEnvironment, settings: MutableMapping) -> SelectionResult:
        """Run the selection and describe which path was taken.

        Args:
            environment: Hosting platform markers.
            settings: The host's settings tree, mutated in place on the integration path only.

        Returns:
            The selection result.
        """
        if not environment.is_hosted:
            logger.debug("Not running on the hosting platform; leaving cache settings untouched")
            return SelectionResult(outcome=SelectionOutcome.SKIPPED)

        if not settings_tree.has_memcache_servers(settings):
            logger.debug("No memcache servers configured; leaving cache settings untouched")
            return SelectionResult(outcome=SelectionOutcome.SKIPPED)

        malformed = settings_tree.malformed_targets(settings, compression=self._config.compression)
        if malformed:
            logger.debug("Malformed settings (%s); leaving cache settings untouched", ", ".join(malformed))
            return SelectionResult(outcome=SelectionOutcome.SKIPPED)

        detected = self._detect_libraries()
        manifest_path = self._config.manifest_path(self._application_root)

        if manifest_path.is_file() and detected:
            return self._integrate(settings, detected, manifest_path)

        return self._fall_back(environment, detected, manifest_path)

    def _detect_libraries(self) -> List[ClientLibrary]:
        return [library for library in ClientLibrary if self._extensions.is_available(library)]

    def _integrate(
        self,
        settings: MutableMapping,
        detected: List[ClientLibrary],
        manifest_path: Path,
    ) -> SelectionResult:
        config = self._config
        extension = ClientLibrary.PYLIBMC if ClientLibrary.PYLIBMC in detected else None

        if extension is not None:
            settings_tree.assign(settings, "memcache.extension", extension.value)

        source_directory = config.source_directory(self._application_root)
        registered = self._autoloader.register(config.autoload_namespace, source_directory)
        if not registered:
            logger.debug(
                "Autoload rule for %s not installed (already present or missing %s)",
                config.autoload_namespace,
                source_directory,
            )

        settings_tree.append_unique(settings, "container_yamls", str(manifest_path))

        # Bootstrap cache.container with memcache rather than the database.
        definition = build_bootstrap_container_definition(
            tolerance=config.invalidator_tolerance,
            bin_timestamps_tag=config.bin_timestamps_tag,
            container_bin=config.container_bin,
        )
        settings["bootstrap_container_definition"] = definition.render()

        for bin_name in config.bootstrap_bins:
            settings_tree.branch(settings, "cache", "bins")[bin_name] = config.backend_id
        settings_tree.assign(settings, "cache.default", config.backend_id)

        settings_tree.assign(settings, "memcache.stampede_protection", True)

        settings_tree.append_unique(settings, "container_yamls", config.locks_manifest)

        if config.compression:
            settings_tree.assign(settings, "memcache.options.compression", True)

        logger.info(
            "Memcache integration enabled for bins %s and default (client: %s)",
            ", ".join(config.bootstrap_bins),
            extension or detected[0],
        )
        return SelectionResult(
            outcome=SelectionOutcome.INTEGRATED,
            detected_libraries=tuple(detected),
            extension=extension,
            manifest_path=manifest_path,
            autoload_registered=registered,
        )

    def _fall_back(
        self,
        environment: HostingEnvironment,
        detected: List[ClientLibrary],
        manifest_path: Path,
    ) -> SelectionResult:
        log_path = self._config.log_path(environment.site_name)
        logger.warning(
            "Memcache integration requested but prerequisites missing (module manifest: %s, client libraries: %s)",
            manifest_path,
            ", ".join(str(library) for library in detected) or "none",
        )
        self._diagnostics.write(log_path, format_diagnostic(self._clock()))
        return SelectionResult(
            outcome=SelectionOutcome.FALLBACK,
            detected_libraries=tuple(detected),
            manifest_path=manifest_path,
            log_path=log_path,
        )
