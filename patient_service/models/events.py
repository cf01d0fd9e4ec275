"""Patient lifecycle event models."""

from datetime import UTC, datetime
from typing import Literal

from cuid2 import cuid_wrapper
from pydantic import BaseModel, Field

from patient_service.models.patient import Patient

cuid = cuid_wrapper()


class PatientEvent(BaseModel):
    """Event emitted to the patient stream."""

    event_id: str = Field(default_factory=cuid)
    event_type: Literal["PATIENT_CREATED"] = "PATIENT_CREATED"
    patient_id: str
    name: str
    email: str
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def patient_created(cls, patient: Patient) -> "PatientEvent":
        """Build the creation event for a stored patient."""
        if patient.id is None:
            raise ValueError("Cannot publish an event for an unsaved patient")

        return cls(patient_id=patient.id, name=patient.name, email=patient.email)
