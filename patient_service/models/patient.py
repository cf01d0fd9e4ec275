"""Patient data models."""

from dataclasses import dataclass, replace
from datetime import date

from pydantic import BaseModel, EmailStr, Field


@dataclass
class Patient:
    """Patient business model.

    ``id`` stays ``None`` until the record store assigns one.
    """

    name: str
    email: str
    address: str
    date_of_birth: date
    id: str | None = None

    def copy(self) -> "Patient":
        """Return a detached copy of this patient."""
        return replace(self)


class PatientRequest(BaseModel):
    """Request model for creating or updating a patient.

    ``date_of_birth`` is kept as text; the patient service parses it.
    """

    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    address: str = Field(min_length=1)
    date_of_birth: str = Field(min_length=1)


class PatientResponse(BaseModel):
    """External representation of a stored patient."""

    id: str
    name: str
    email: str
    address: str
    date_of_birth: str

    @classmethod
    def from_patient(cls, patient: Patient) -> "PatientResponse":
        """Map a stored patient to its external representation."""
        if patient.id is None:
            raise ValueError("Patient has not been stored yet")

        return cls(
            id=patient.id,
            name=patient.name,
            email=patient.email,
            address=patient.address,
            date_of_birth=patient.date_of_birth.isoformat(),
        )
