"""
Custom exception classes for error-relay.

Separates the three failure families the reporter deals with:
content the transport would reject, deliveries that failed, and
the fatal case where the fallback content itself is unusable.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ErrorRelayError(Exception):
    """
    Base exception for all error-relay errors.

    Attributes:
        message: Human-readable error description.
        details: Additional context about the error.
        error_code: Optional error code for categorization.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Additional context about the error.
            error_code: Optional error code for categorization.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.error_code = error_code

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "error_code": self.error_code,
        }


class ConfigurationError(ErrorRelayError):
    """
    Exception raised for configuration-related errors.

    Raised when:
    - Configuration file is missing or malformed
    - A sink is enabled without its identifiers
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_file: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if config_file:
            details["config_file"] = config_file

        super().__init__(message, details=details, error_code="CONFIG_ERROR", **kwargs)


class ContentValidationError(ErrorRelayError):
    """
    Exception raised when content breaks a transport's content rules.

    Raised before any request is sent, so it never means a delivery
    was attempted. Sinks recover from it by retrying with the
    fallback content.
    """

    def __init__(
        self,
        message: str,
        length: Optional[int] = None,
        limit: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize content validation error.

        Args:
            message: Error description.
            length: Length of the rejected content.
            limit: Maximum length the transport accepts.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if length is not None:
            details["length"] = length
        if limit is not None:
            details["limit"] = limit

        super().__init__(message, details=details, error_code="CONTENT_REJECTED", **kwargs)


class DeliveryError(ErrorRelayError):
    """
    Exception raised when a transport request fails.

    Raised when:
    - The chat service answers with an error status
    - The connection fails or times out
    - The client lacks the credentials the request needs
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        sink: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize delivery error.

        Args:
            message: Error description.
            status: HTTP status code, if a response was received.
            sink: Name of the sink that failed.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if status is not None:
            details["status"] = status
        if sink:
            details["sink"] = sink

        super().__init__(message, details=details, error_code="DELIVERY_FAILED", **kwargs)
        self.status = status


class FallbackContentError(ErrorRelayError):
    """
    Fatal: the fallback content is rejected by a transport.

    The fallback text is expected to satisfy every transport's rules.
    When it does not, the configuration is broken, so the reporter lets
    this propagate instead of folding it into the report.
    """

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message, error_code="FALLBACK_INVALID", **kwargs)
