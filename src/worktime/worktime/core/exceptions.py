class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when request input is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced developer, calendar or task does not exist."""


class ConfigurationError(DomainError):
    """Raised when a calendar is malformed (bad time string, weekday or timezone)."""


class SlaCalculationError(DomainError):
    """Raised when an SLA cannot be consumed within the iteration cap."""
