"""
Repository Outcomes

Repository operations return an ``Outcome`` instead of raising for domain
conditions. Callers branch on ``outcome.kind``:

- OK: ``value`` holds the result
- NOT_FOUND: no record with that id (a normal result, not a failure)
- VALIDATION_FAILED: caller input broke a field rule
- DUPLICATE_KEY: the store rejected a second book with the same ISBN
- STORE_UNAVAILABLE: the database failed; not the caller's fault

``detail`` holds internal store error text. It is meant for logs and
debug output, never as a user-facing message.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class OutcomeKind(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    DUPLICATE_KEY = "duplicate_key"
    STORE_UNAVAILABLE = "store_unavailable"


@dataclass(frozen=True)
class FieldViolation:
    """A single broken field rule, identified by the field's wire name."""

    field: str
    message: str


@dataclass(frozen=True)
class Outcome(Generic[T]):
    kind: OutcomeKind
    value: T | None = None
    violations: tuple[FieldViolation, ...] = ()
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.OK

    @property
    def is_client_error(self) -> bool:
        """True for outcomes the caller can fix by changing the input."""
        return self.kind in (OutcomeKind.VALIDATION_FAILED, OutcomeKind.DUPLICATE_KEY)

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(OutcomeKind.OK, value=value)

    @classmethod
    def not_found(cls) -> "Outcome[T]":
        return cls(OutcomeKind.NOT_FOUND)

    @classmethod
    def validation_failed(cls, violations: list[FieldViolation]) -> "Outcome[T]":
        return cls(OutcomeKind.VALIDATION_FAILED, violations=tuple(violations))

    @classmethod
    def duplicate_key(cls, field: str, message: str, detail: str | None = None) -> "Outcome[T]":
        return cls(
            OutcomeKind.DUPLICATE_KEY,
            violations=(FieldViolation(field, message),),
            detail=detail,
        )

    @classmethod
    def store_unavailable(cls, detail: str) -> "Outcome[T]":
        return cls(OutcomeKind.STORE_UNAVAILABLE, detail=detail)
