"""Process-wide import rule mapping a dotted prefix onto a source directory.

Once registered, ``import drupal.memcache.driver`` loads
``<module>/src/driver.py`` even though the module is not an installed
distribution. Parent packages of the prefix are created as empty namespace
packages when nothing else provides them.
"""

import importlib.util
import logging
import sys
from importlib.abc import MetaPathFinder
from importlib.machinery import ModuleSpec
from pathlib import Path
from typing import List, Optional

from memcache_bootstrap.domain import IAutoloader

logger = logging.getLogger(__name__)


class NamespacePathFinder(MetaPathFinder):
    """Meta path finder serving one dotted namespace from one directory.

    Attributes:
        namespace: Dotted import prefix, e.g. ``drupal.memcache``.
        directory: Directory holding the modules of the prefix.
    """

    def __init__(self, namespace: str, directory: Path) -> None:
        self.namespace = namespace
        self.directory = Path(directory)

    def _parents(self) -> List[str]:
        parts = self.namespace.split(".")
        return [".".join(parts[:index]) for index in range(1, len(parts))]

    def find_spec(self, fullname, path=None, target=None) -> Optional[ModuleSpec]:
        if fullname in self._parents():
            return ModuleSpec(fullname, None, is_package=True)

        if fullname != self.namespace:
            # Submodules are found by the regular path finder through __path__.
            return None

        init_file = self.directory / "__init__.py"
        if init_file.is_file():
            return importlib.util.spec_from_file_location(
                fullname,
                str(init_file),
                submodule_search_locations=[str(self.directory)],
            )

        spec = ModuleSpec(fullname, None, is_package=True)
        spec.submodule_search_locations.append(str(self.directory))
        return spec

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NamespacePathFinder):
            return NotImplemented
        return self.namespace == other.namespace and self.directory == other.directory

    def __hash__(self) -> int:
        return hash((self.namespace, self.directory))

    def __repr__(self) -> str:
        return f"NamespacePathFinder({self.namespace!r}, {str(self.directory)!r})"


class MetaPathAutoloader(IAutoloader):
    """Installs ``NamespacePathFinder`` rules on ``sys.meta_path``.

    Attributes:
        _meta_path: The finder list rules are appended to.
    """

    def __init__(self, meta_path: Optional[List] = None) -> None:
        self._meta_path = sys.meta_path if meta_path is None else meta_path

    def register(self, namespace: str, directory: Path) -> bool:
        """Install the rule once.

        Returns:
            True if a finder was appended; False if an equal one is already
            installed or ``directory`` does not exist.
        """
        finder = NamespacePathFinder(namespace, directory)

        if not finder.directory.is_dir():
            logger.warning("Not autoloading %s: %s is not a directory", namespace, finder.directory)
            return False

        if finder in self._meta_path:
            return False

        self._meta_path.append(finder)
        logger.debug("Registered %r", finder)
        return True
