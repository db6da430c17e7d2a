"""Unit tests for domain exceptions."""

import pytest

from memcache_bootstrap.domain.exceptions import (
    BootstrapException,
    CircularReferenceError,
    DuplicateServiceError,
    UnresolvedReferenceError,
)


class TestBootstrapException:
    """Test cases for the base exception."""

    def test_is_exception(self):
        """Test that BootstrapException derives from Exception."""
        assert issubclass(BootstrapException, Exception)

    @pytest.mark.parametrize(
        "exception_class",
        [CircularReferenceError, UnresolvedReferenceError, DuplicateServiceError],
    )
    def test_subclasses(self, exception_class):
        """Test that all specific errors derive from BootstrapException."""
        assert issubclass(exception_class, BootstrapException)


class TestCircularReferenceError:
    """Test cases for CircularReferenceError."""

    def test_message_contains_chain(self):
        """Test that the message lists the cycle."""
        error = CircularReferenceError(["a", "b", "a"])

        assert error.reference_chain == ["a", "b", "a"]
        assert str(error) == "Circular service reference detected: a -> b -> a"

    def test_can_be_caught_as_base(self):
        """Test that the error can be caught as BootstrapException."""
        with pytest.raises(BootstrapException):
            raise CircularReferenceError(["x", "x"])


class TestUnresolvedReferenceError:
    """Test cases for UnresolvedReferenceError."""

    def test_attributes_and_message(self):
        """Test that the dangling reference is reported."""
        error = UnresolvedReferenceError("cache.container", "memcache.factory")

        assert error.service_name == "cache.container"
        assert error.reference == "memcache.factory"
        assert "'cache.container'" in str(error)
        assert "'@memcache.factory'" in str(error)


class TestDuplicateServiceError:
    """Test cases for DuplicateServiceError."""

    def test_message_without_reason(self):
        """Test the default message."""
        error = DuplicateServiceError("database")

        assert error.service_name == "database"
        assert error.reason is None
        assert str(error) == "Service 'database' is already defined"

    def test_message_with_reason(self):
        """Test that a reason is appended to the message."""
        error = DuplicateServiceError("database", "defined by the framework")

        assert str(error) == "Service 'database' is already defined. Reason: defined by the framework"
