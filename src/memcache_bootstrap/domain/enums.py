from enum import Enum


class Construction(str, Enum):
    """Defines how the container builds a service instance.

    Attributes:
        DIRECT: The class constructor is called with the arguments.
        FACTORY: A factory callable or factory method is invoked with the arguments.
    """

    DIRECT = "direct"
    FACTORY = "factory"

    def __str__(self) -> str:
        return self.value


class ClientLibrary(str, Enum):
    """Memcache client libraries the selector knows how to detect.

    Attributes:
        MEMCACHE: Pure-Python client (python-memcached), imported as ``memcache``.
        PYLIBMC: libmemcached-based client, preferred when present.
    """

    MEMCACHE = "memcache"
    PYLIBMC = "pylibmc"

    def __str__(self) -> str:
        return self.value


class SelectionOutcome(str, Enum):
    """Result of a bootstrap selection pass.

    Attributes:
        SKIPPED: Not running on the hosting platform, or no servers configured.
        INTEGRATED: Settings were rewired onto the memcache backend.
        FALLBACK: Integration was requested but prerequisites are missing.
    """

    SKIPPED = "skipped"
    INTEGRATED = "integrated"
    FALLBACK = "fallback"

    def __str__(self) -> str:
        return self.value
