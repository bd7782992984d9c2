"""
Domain exceptions.

Typed exceptions for explicit error handling.
Scoring and aggregation never raise for well-typed input; these types
mark the boundaries where failures are caught or surfaced.
"""

from __future__ import annotations


# ═══════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════


class DomainError(Exception):
    """
    Base exception for all domain errors.

    All domain-specific exceptions inherit from this.
    Allows catching all domain errors with single except clause.
    """

    pass


# ═══════════════════════════════════════════════════════════
# ENGINE EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class ScoringError(DomainError):
    """
    Dish scoring could not produce an assessment.

    Raised when:
    - A remote payload cannot be turned into an assessment

    Example:
        >>> raise ScoringError("Assessment payload missing 'score'")
    """

    pass


class CorrelationError(DomainError, ValueError):
    """
    Meal/symptom correlation was called with invalid arguments.

    Also a ValueError, since a negative window is a caller bug.

    Raised when:
    - Correlation window is negative

    Example:
        >>> raise CorrelationError("Correlation window must not be negative")
    """

    pass


class ValidationError(DomainError):
    """
    Input validation failed.

    Raised when:
    - A raw record cannot be converted into a domain record

    Example:
        >>> raise ValidationError("Symptom record has no timestamp")
    """

    pass


# ═══════════════════════════════════════════════════════════
# EXTERNAL SERVICE EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class ExternalServiceError(DomainError):
    """
    External service call failed.

    Base class for all external service errors.

    Raised when:
    - API call fails
    - Network error
    - Service unavailable

    Example:
        >>> raise ExternalServiceError("OpenAI API failed: connection reset")
    """

    pass


class RemoteAnalysisError(ExternalServiceError):
    """
    Remote dish analysis failed.

    Raised when:
    - The remote model returns invalid JSON
    - The payload misses required fields
    - The transport fails

    Example:
        >>> raise RemoteAnalysisError("Invalid JSON response from model")
    """

    pass


class RemoteAnalysisTimeoutError(RemoteAnalysisError):
    """
    Remote dish analysis did not answer in time.

    Example:
        >>> raise RemoteAnalysisTimeoutError("No response after 12.0s")
    """

    pass


class RateLimitError(ExternalServiceError):
    """
    API rate limit exceeded.

    Example:
        >>> raise RateLimitError("OpenAI rate limit: 60 requests/minute")
    """

    pass


# ═══════════════════════════════════════════════════════════
# INFRASTRUCTURE EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class InfrastructureError(DomainError):
    """
    Infrastructure layer error.

    Base class for record store errors.
    """

    pass


class RepositoryError(InfrastructureError):
    """
    Record store operation failed.

    Raised when:
    - A record with the same id is stored twice

    Example:
        >>> raise RepositoryError("Meal meal-001 already stored")
    """

    pass
