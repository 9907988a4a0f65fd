"""Errors raised by the domain and application layers.

Everything a caller can recover from derives from DomainException; the
CLI turns any of them into a one-line (or one-line-per-field) message.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """One rejected input: which field, and why."""

    field: str
    message: str

    def __str__(self) -> str:
        return self.message


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated.

    Carries every violation found, not just the first, so callers can
    show a complete error list.
    """

    def __init__(
        self,
        message: str | None = None,
        errors: list[FieldError] | None = None,
    ) -> None:
        if errors:
            self.errors = list(errors)
        else:
            self.errors = [FieldError("", message or "Invalid input")]
        super().__init__(message or "; ".join(e.message for e in self.errors))


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ConcurrencyError(DomainException):
    """The record changed since the caller read it. Re-read and retry."""


class PersistenceError(DomainException):
    """The store could not complete the transaction; nothing was applied."""


class ReferentialIntegrityError(PersistenceError):
    """A delete would orphan or silently drop dependent records."""
