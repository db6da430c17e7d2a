import logging
from typing import Any, Dict, Optional, Sequence, Union

from memcache_bootstrap.application.circular_detector import CircularReferenceDetector
from memcache_bootstrap.domain import (
    ContainerDefinition,
    DuplicateServiceError,
    FactoryMethod,
    ServiceDefinition,
    ServiceReference,
    UnresolvedReferenceError,
)

logger = logging.getLogger(__name__)

DATABASE_SERVICE = "database"
SETTINGS_SERVICE = "settings"
MEMCACHE_SETTINGS_SERVICE = "memcache.settings"
MEMCACHE_FACTORY_SERVICE = "memcache.factory"
TIMESTAMP_INVALIDATOR_SERVICE = "memcache.timestamp.invalidator.bin"
CONTAINER_CLIENT_SERVICE = "memcache.backend.cache.container"
CACHE_TAGS_SERVICE = "cache_tags_provider.container"
CONTAINER_CACHE_SERVICE = "cache.container"


def ref(name: str) -> ServiceReference:
    """Shorthand for a reference to the service called ``name``."""
    return ServiceReference(name=name)


class ContainerDefinitionBuilder:
    """Builds a validated, self-contained container definition.

    Services are collected in declaration order. Nothing is checked until
    ``build()``, so services may reference each other in any order.

    Attributes:
        _parameters: Container parameters.
        _services: Service definitions collected so far.
    """

    def __init__(self) -> None:
        """Initialize the builder with no parameters and no services."""
        self._parameters: Dict[str, Any] = {}
        self._services: Dict[str, ServiceDefinition] = {}

    def parameter(self, name: str, value: Any) -> "ContainerDefinitionBuilder":
        """Add a container parameter, replacing any earlier value for ``name``.

        Args:
            name: Parameter name.
            value: Parameter value.

        Returns:
            The builder, for chaining.
        """
        self._parameters[name] = value
        return self

    def service(
        self,
        name: str,
        class_name: str,
        arguments: Sequence[Any] = (),
        factory: Optional[Union[str, FactoryMethod]] = None,
    ) -> "ContainerDefinitionBuilder":
        """Add one service definition.

        Args:
            name: Service identifier.
            class_name: Dotted path of the implementation class.
            arguments: Constructor or factory arguments; use ``ref()`` for back-references.
            factory: Dotted factory callable or a ``FactoryMethod`` on another service.

        Raises:
            DuplicateServiceError: If ``name`` was already added.

        Example:
            >>> builder.service("memcache.settings", "drupal.memcache.MemcacheSettings", [ref("settings")])
        """
        if name in self._services:
            raise DuplicateServiceError(name)

        self._services[name] = ServiceDefinition(
            name=name,
            class_name=class_name,
            factory=factory,
            arguments=tuple(arguments),
        )
        return self

    def factory_service(
        self,
        name: str,
        class_name: str,
        provider: str,
        method: str,
        arguments: Sequence[Any] = (),
    ) -> "ContainerDefinitionBuilder":
        """Add a service produced by calling ``method`` on the ``provider`` service."""
        return self.service(
            name,
            class_name,
            arguments=arguments,
            factory=FactoryMethod(service=ref(provider), method=method),
        )

    def build(self) -> ContainerDefinition:
        """Validate the collected services and return the definition.

        Raises:
            UnresolvedReferenceError: If a reference has no definition in the graph.
            CircularReferenceError: If services reference each other in a cycle.
        """
        definition = ContainerDefinition(parameters=dict(self._parameters), services=dict(self._services))

        unresolved = definition.unresolved_references()
        if unresolved:
            service_name, reference = unresolved[0]
            raise UnresolvedReferenceError(service_name, reference)

        CircularReferenceDetector().check(definition)

        logger.debug("Built container definition with %d services", len(definition.services))
        return definition


def build_bootstrap_container_definition(
    tolerance: float = 0.001,
    bin_timestamps_tag: str = "memcache_bin_timestamps",
    container_bin: str = "container",
) -> ContainerDefinition:
    """Build the minimal graph that serves ``cache.container`` from memcache.

    Only ``database`` and ``settings`` come from the framework's own bootstrap
    primitives; every other service is defined here.

    Args:
        tolerance: Timestamp invalidator tolerance. Raise it when memcache is not on localhost.
        bin_timestamps_tag: Bin used by the invalidator to store timestamps.
        container_bin: Namespace tag of the container cache.

    Returns:
        The validated bootstrap container definition.
    """
    return (
        ContainerDefinitionBuilder()
        .service(
            DATABASE_SERVICE,
            "drupal.core.database.Connection",
            arguments=["default"],
            factory="drupal.core.database.Database.get_connection",
        )
        .service(
            SETTINGS_SERVICE,
            "drupal.core.site.Settings",
            factory="drupal.core.site.Settings.get_instance",
        )
        .service(
            MEMCACHE_SETTINGS_SERVICE,
            "drupal.memcache.MemcacheSettings",
            arguments=[ref(SETTINGS_SERVICE)],
        )
        .service(
            MEMCACHE_FACTORY_SERVICE,
            "drupal.memcache.driver.MemcacheDriverFactory",
            arguments=[ref(MEMCACHE_SETTINGS_SERVICE)],
        )
        .service(
            TIMESTAMP_INVALIDATOR_SERVICE,
            "drupal.memcache.invalidator.MemcacheTimestampInvalidator",
            arguments=[ref(MEMCACHE_FACTORY_SERVICE), bin_timestamps_tag, tolerance],
        )
        .factory_service(
            CONTAINER_CLIENT_SERVICE,
            "drupal.memcache.DrupalMemcacheInterface",
            provider=MEMCACHE_FACTORY_SERVICE,
            method="get",
            arguments=[container_bin],
        )
        .service(
            CACHE_TAGS_SERVICE,
            "drupal.core.cache.DatabaseCacheTagsChecksum",
            arguments=[ref(DATABASE_SERVICE)],
        )
        .service(
            CONTAINER_CACHE_SERVICE,
            "drupal.memcache.MemcacheBackend",
            arguments=[
                container_bin,
                ref(CONTAINER_CLIENT_SERVICE),
                ref(CACHE_TAGS_SERVICE),
                ref(TIMESTAMP_INVALIDATOR_SERVICE),
            ],
        )
        .build()
    )
