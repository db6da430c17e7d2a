"""Helpers for reading and patching the host's nested settings mapping.

The settings tree is owned by the host application. These helpers only add or
overwrite keys; nothing here deletes an existing entry.
"""

from collections.abc import Mapping, MutableMapping, MutableSequence
from typing import Any, List, Optional

_MISSING = object()


def lookup(settings: Mapping, *keys: str, default: Any = None) -> Any:
    """Return the value at the nested ``keys`` path, or ``default``.

    Any intermediate value that is not a mapping counts as missing.

    Example:
        >>> lookup({"memcache": {"servers": {"127.0.0.1:11211": "default"}}}, "memcache", "servers")
        {'127.0.0.1:11211': 'default'}
    """
    current: Any = settings
    for key in keys:
        if not isinstance(current, Mapping):
            return default
        current = current.get(key, _MISSING)
        if current is _MISSING:
            return default
    return current


def branch(settings: MutableMapping, *keys: str) -> MutableMapping:
    """Return the nested mapping at ``keys``, creating empty dicts on the way.

    Raises:
        TypeError: If an existing value along the path is not a mapping.
    """
    current = settings
    for key in keys:
        child = current.get(key)
        if child is None:
            child = current[key] = {}
        elif not isinstance(child, MutableMapping):
            raise TypeError(f"Setting '{key}' is a {type(child).__name__}, expected a mapping")
        current = child
    return current


def assign(settings: MutableMapping, path: str, value: Any) -> None:
    """Set a dotted ``path`` such as ``cache.bins.config`` to ``value``."""
    *parents, leaf = path.split(".")
    branch(settings, *parents)[leaf] = value


def append_unique(settings: MutableMapping, key: str, value: Any) -> bool:
    """Append ``value`` to the list stored under ``key`` unless already present.

    Returns:
        True if the value was appended.
    """
    entries: Optional[MutableSequence] = settings.get(key)
    if entries is None:
        entries = settings[key] = []
    elif not isinstance(entries, MutableSequence):
        raise TypeError(f"Setting '{key}' is a {type(entries).__name__}, expected a list")

    if value in entries:
        return False
    entries.append(value)
    return True


def has_memcache_servers(settings: Any) -> bool:
    """Return whether at least one memcache server endpoint is configured."""
    if not isinstance(settings, Mapping):
        return False
    servers = lookup(settings, "memcache", "servers")
    if isinstance(servers, (str, bytes)):
        return False
    try:
        return len(servers) > 0
    except TypeError:
        return False


def _absent_or(value: Any, expected: type) -> bool:
    return value is None or isinstance(value, expected)


def malformed_targets(settings: Any, compression: bool = False) -> List[str]:
    """Return the dotted names of integration targets that cannot be patched.

    Every target must be absent or of the mutable type the integration writes
    into. An empty result means the whole integration can be applied without
    failing halfway.

    Example:
        >>> malformed_targets({"memcache": {"servers": ["a"]}, "cache": "database"})
        ['cache']
    """
    if not isinstance(settings, MutableMapping):
        return ["<settings>"]

    problems: List[str] = []
    memcache = settings.get("memcache")
    if not _absent_or(memcache, MutableMapping):
        problems.append("memcache")
    elif compression and not _absent_or(lookup(settings, "memcache", "options"), MutableMapping):
        problems.append("memcache.options")

    cache = settings.get("cache")
    if not _absent_or(cache, MutableMapping):
        problems.append("cache")
    elif not _absent_or(lookup(settings, "cache", "bins"), MutableMapping):
        problems.append("cache.bins")

    if not _absent_or(settings.get("container_yamls"), MutableSequence):
        problems.append("container_yamls")
    return problems
