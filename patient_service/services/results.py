"""Outcome types returned by the patient service."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class FailureKind(StrEnum):
    """Closed set of ways a patient operation can fail."""

    EMAIL_CONFLICT = "email_conflict"
    NOT_FOUND = "not_found"
    VALIDATION_FAILURE = "validation_failure"
    STORE_UNAVAILABLE = "store_unavailable"
    BILLING_FAILURE = "billing_failure"
    PUBLISH_FAILURE = "publish_failure"


# Kinds reported after the patient record was already committed
PARTIAL_SUCCESS_KINDS = frozenset({FailureKind.BILLING_FAILURE, FailureKind.PUBLISH_FAILURE})


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome."""

    value: T


@dataclass(frozen=True)
class Failure:
    """Failed outcome.

    For partial successes ``patient_id`` names the record that was left in the
    store; callers own any reconciliation.
    """

    kind: FailureKind
    message: str
    patient_id: str | None = None

    @property
    def is_partial_success(self) -> bool:
        """Whether some side effects were committed before the failure."""
        return self.kind in PARTIAL_SUCCESS_KINDS


Result = Ok[T] | Failure
