from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from memcache_bootstrap.domain.enums import ClientLibrary, Construction, SelectionOutcome


class ServiceReference(BaseModel):
    """Back-reference from one service definition to another by name.

    Attributes:
        name: Name of the referenced service.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Name of the referenced service.")

    def render(self) -> str:
        """Return the container notation for the reference, e.g. ``@database``."""
        return f"@{self.name}"


class FactoryMethod(BaseModel):
    """Factory method invoked on another service to produce an instance.

    Attributes:
        service: The service the method is called on.
        method: Name of the method.
    """

    model_config = ConfigDict(frozen=True)

    service: ServiceReference = Field(..., description="Service providing the factory method.")
    method: str = Field(..., min_length=1, description="Factory method name.")

    def render(self) -> List[str]:
        return [self.service.render(), self.method]


Argument = Union[ServiceReference, StrictBool, StrictInt, StrictFloat, StrictStr]


class ServiceDefinition(BaseModel):
    """Value object describing one injectable service.

    Attributes:
        name: Service identifier inside the container.
        class_name: Dotted path of the implementation class.
        factory: Optional factory callable (dotted path) or factory method on another service.
        arguments: Ordered constructor or factory arguments.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Service identifier.")
    class_name: str = Field(..., min_length=1, description="Dotted path of the implementation class.")
    factory: Optional[Union[FactoryMethod, StrictStr]] = Field(
        default=None,
        description="Factory callable or factory method used instead of the constructor.",
    )
    arguments: Tuple[Argument, ...] = Field(
        default=(),
        description="Ordered constructor or factory arguments.",
    )

    @property
    def construction(self) -> Construction:
        return Construction.DIRECT if self.factory is None else Construction.FACTORY

    def references(self) -> List[str]:
        """Names of all services this definition depends on, in declaration order."""
        names: List[str] = []
        if isinstance(self.factory, FactoryMethod):
            names.append(self.factory.service.name)
        for argument in self.arguments:
            if isinstance(argument, ServiceReference) and argument.name not in names:
                names.append(argument.name)
        return names

    def render(self) -> Dict[str, Any]:
        """Render the definition in the framework's settings notation."""
        entry: Dict[str, Any] = {"class": self.class_name}
        if isinstance(self.factory, FactoryMethod):
            entry["factory"] = self.factory.render()
        elif self.factory is not None:
            entry["factory"] = self.factory
        if self.arguments:
            entry["arguments"] = [
                argument.render() if isinstance(argument, ServiceReference) else argument
                for argument in self.arguments
            ]
        return entry


class ContainerDefinition(BaseModel):
    """Self-contained service graph consulted before the full container exists.

    Attributes:
        parameters: Container parameters.
        services: Service definitions keyed by name, in insertion order.
    """

    model_config = ConfigDict(frozen=True)

    parameters: Dict[str, Any] = Field(default_factory=dict, description="Container parameters.")
    services: Dict[str, ServiceDefinition] = Field(
        default_factory=dict,
        description="Service definitions keyed by service name.",
    )

    def dependencies_of(self, name: str) -> List[str]:
        return self.services[name].references()

    def unresolved_references(self) -> List[Tuple[str, str]]:
        """Return ``(service, reference)`` pairs whose reference has no definition."""
        return [
            (service.name, reference)
            for service in self.services.values()
            for reference in service.references()
            if reference not in self.services
        ]

    def render(self) -> Dict[str, Any]:
        return {
            "parameters": dict(self.parameters),
            "services": {name: service.render() for name, service in self.services.items()},
        }


class SelectorConfig(BaseModel):
    """Operator knobs for the bootstrap cache selector.

    Attributes:
        module_folder: Location of the memcache integration module, relative to the application root.
        manifest_name: Service-definition file whose presence marks the module as installed.
        autoload_namespace: Import prefix mapped onto the module's ``src`` directory.
        locks_manifest: Service-definition file moving locks onto memcache, relative to the root.
        invalidator_tolerance: Timestamp tolerance; raise it when memcache is not on localhost.
        bin_timestamps_tag: Bin name used by the timestamp invalidator.
        container_bin: Namespace tag of the bootstrap container cache.
        backend_id: Cache backend service used for routed bins.
        bootstrap_bins: Low-level bins routed to memcache explicitly.
        log_path_template: Diagnostic log path; ``{site_name}`` is interpolated.
        compression: Ask the memcache client to compress values.
    """

    model_config = ConfigDict(frozen=True)

    module_folder: str = "modules/contrib/memcache"
    manifest_name: str = "memcache.services.yml"
    autoload_namespace: str = "drupal.memcache"
    locks_manifest: str = "sites/all/memcache-locks.yml"
    invalidator_tolerance: float = Field(default=0.001, ge=0)
    bin_timestamps_tag: str = "memcache_bin_timestamps"
    container_bin: str = "container"
    backend_id: str = "cache.backend.memcache"
    bootstrap_bins: Tuple[str, ...] = ("bootstrap", "discovery", "config")
    log_path_template: str = "/mnt/tmp/{site_name}/cloud-memcache-8.x-2.0-error.log"
    compression: bool = False

    def manifest_path(self, application_root: Path) -> Path:
        return Path(application_root) / self.module_folder / self.manifest_name

    def source_directory(self, application_root: Path) -> Path:
        return Path(application_root) / self.module_folder / "src"

    def log_path(self, site_name: Optional[str]) -> Path:
        return Path(self.log_path_template.format(site_name=site_name or ""))


class HostingEnvironment(BaseSettings):
    """Hosting platform markers read from ``AH_*`` environment variables.

    Attributes:
        site_environment: Platform environment name (``dev``, ``test``, ``prod``...).
        site_name: Per-site identifier used to locate the diagnostic log.
    """

    model_config = SettingsConfigDict(env_prefix="AH_", extra="ignore", frozen=True)

    site_environment: Optional[str] = None
    site_name: Optional[str] = None

    @property
    def is_hosted(self) -> bool:
        return bool(self.site_environment)


class SelectionResult(BaseModel):
    """Outcome of one selection pass.

    Attributes:
        outcome: Which path the selector took.
        detected_libraries: Client libraries found at runtime.
        extension: Client library recorded in settings, if any.
        manifest_path: Path probed for the integration module.
        autoload_registered: Whether a new autoload rule was installed.
        log_path: Diagnostic log written on the fallback path.
    """

    model_config = ConfigDict(frozen=True)

    outcome: SelectionOutcome
    detected_libraries: Tuple[ClientLibrary, ...] = ()
    extension: Optional[ClientLibrary] = None
    manifest_path: Optional[Path] = None
    autoload_registered: bool = False
    log_path: Optional[Path] = None
