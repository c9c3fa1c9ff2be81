"""Exception types raised by metricwire."""


class MetricwireError(Exception):
    """Base exception for all metricwire errors."""


class ParsingError(MetricwireError):
    """Raised when wire data cannot be decoded.

    Attributes:
        data: The offending bytes (the line that failed to parse).
    """

    def __init__(self, message: str, data: bytes) -> None:
        super().__init__(message)
        self.message = message
        self.data = data

    def __str__(self) -> str:
        return f"{self.message}: {self.data!r}"


class ReplacementError(MetricwireError, ValueError):
    """Raised when a replacement template is malformed or references a missing group."""


class ConfigurationError(MetricwireError):
    """Raised when configuration values are invalid."""
