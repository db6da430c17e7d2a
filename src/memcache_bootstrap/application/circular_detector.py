"""Application layer - Circular reference detection."""

from typing import List

from memcache_bootstrap.domain import CircularReferenceError, ContainerDefinition


class CircularReferenceDetector:
    """Detects reference cycles in a container definition.

    Walks the service graph depth first while keeping the current path on a
    stack. When a service appears twice on the stack, a cycle is detected.

    Attributes:
        _stack: Service names on the current traversal path.
    """

    def __init__(self) -> None:
        self._stack: List[str] = []

    def push(self, service_name: str) -> None:
        """Add a service to the traversal stack.

        Args:
            service_name: The service being visited.

        Raises:
            CircularReferenceError: If the service is already on the stack.

        Example:
            >>> detector = CircularReferenceDetector()
            >>> detector.push("cache.container")
            >>> detector.push("memcache.factory")
            >>> detector.push("cache.container")  # Raises CircularReferenceError
        """
        if service_name in self._stack:
            cycle_start_index = self._stack.index(service_name)
            cycle = self._stack[cycle_start_index:] + [service_name]
            raise CircularReferenceError(cycle)

        self._stack.append(service_name)

    def pop(self) -> None:
        """Remove the last service from the traversal stack."""
        if self._stack:
            self._stack.pop()

    def clear(self) -> None:
        self._stack.clear()

    def check(self, definition: ContainerDefinition) -> None:
        """Walk every service of the definition and raise on the first cycle.

        References to undefined services are skipped here; they are reported
        separately as unresolved references.

        Args:
            definition: The container definition to inspect.

        Raises:
            CircularReferenceError: If any reference cycle exists.
        """
        visited = set()

        def visit(name: str) -> None:
            self.push(name)
            try:
                if name not in visited:
                    for reference in definition.dependencies_of(name):
                        if reference in definition.services:
                            visit(reference)
                    visited.add(name)
            finally:
                self.pop()

        self.clear()
        for service_name in definition.services:
            visit(service_name)
