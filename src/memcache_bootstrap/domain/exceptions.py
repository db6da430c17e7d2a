from typing import List, Optional


class BootstrapException(Exception):
    """Base exception for bootstrap configuration errors."""


class CircularReferenceError(BootstrapException):
    """Raised when service definitions reference each other in a cycle.

    Attributes:
        reference_chain: Service names involved in the cycle, first name repeated at the end.
    """

    def __init__(self, reference_chain: List[str]) -> None:
        self.reference_chain = reference_chain
        message = f"Circular service reference detected: {' -> '.join(reference_chain)}"
        super().__init__(message)


class UnresolvedReferenceError(BootstrapException):
    """Raised when a service argument references an undefined service.

    Attributes:
        service_name: The service holding the dangling reference.
        reference: The referenced service name that has no definition.
    """

    def __init__(self, service_name: str, reference: str) -> None:
        self.service_name = service_name
        self.reference = reference
        super().__init__(f"Service '{service_name}' references undefined service '@{reference}'")


class DuplicateServiceError(BootstrapException):
    """Raised when the same service name is defined twice in one graph.

    Attributes:
        service_name: The name defined more than once.
    """

    def __init__(self, service_name: str, reason: Optional[str] = None) -> None:
        self.service_name = service_name
        self.reason = reason
        message = f"Service '{service_name}' is already defined"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)
