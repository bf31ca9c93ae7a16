"""Domain-level exception hierarchy for service, provider and cache layers."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for domain-specific failures."""


class NotFoundError(DomainError):
    """Raised when a requested entity does not exist."""


class ValidationError(DomainError):
    """Raised when input validation fails at the domain/service layer."""


class InfrastructureError(DomainError):
    """Raised when infrastructure (DB or external service) is unavailable."""


class CacheBackendError(InfrastructureError):
    """Raised when the key-value cache backend cannot be reached."""


class UpstreamError(DomainError):
    """Raised when an upstream data provider is unavailable or times out."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class MalformedPayloadError(UpstreamError):
    """Raised when an upstream payload lacks the keys a domain requires."""
