"""Patient record store interface and in-memory implementation."""

import asyncio
from typing import Protocol

from cuid2 import cuid_wrapper

from patient_service.errors import DuplicateEmailError, PatientNotFoundError
from patient_service.models.patient import Patient

cuid = cuid_wrapper()


class PatientRecordStore(Protocol):
    """Interface for durable patient storage.

    Implementations enforce email uniqueness at write time and raise
    ``StoreUnavailableError`` when the backing storage cannot be reached.
    """

    async def find_all(self) -> list[Patient]:
        """Return every stored patient in store-native order."""
        ...

    async def find_by_id(self, patient_id: str) -> Patient | None:
        """Return the patient with the given id, or None if absent."""
        ...

    async def save(self, patient: Patient) -> Patient:
        """Insert a patient (assigning its id) or update it in place.

        Raises:
            DuplicateEmailError: If another patient already has this email
            PatientNotFoundError: If the patient has an id but is no longer stored
        """
        ...

    async def delete(self, patient: Patient) -> None:
        """Delete a stored patient."""
        ...

    async def exists_by_id(self, patient_id: str) -> bool:
        """Check whether a patient with this id exists."""
        ...

    async def exists_by_email(self, email: str) -> bool:
        """Check whether any patient uses this email."""
        ...

    async def exists_by_email_excluding(self, email: str, patient_id: str) -> bool:
        """Check whether a patient other than ``patient_id`` uses this email."""
        ...


class InMemoryPatientRecordStore:
    """In-memory record store.

    Writes are serialised by a lock and the email constraint is checked inside
    it, so two concurrent saves for one email cannot both commit.
    """

    def __init__(self):
        self.patients: dict[str, Patient] = {}
        self._lock = asyncio.Lock()

    async def find_all(self) -> list[Patient]:
        return [patient.copy() for patient in self.patients.values()]

    async def find_by_id(self, patient_id: str) -> Patient | None:
        patient = self.patients.get(patient_id)
        return patient.copy() if patient else None

    async def save(self, patient: Patient) -> Patient:
        async with self._lock:
            # Deleted patients are never re-inserted under their old id
            if patient.id is not None and patient.id not in self.patients:
                raise PatientNotFoundError(patient.id)

            patient_id = patient.id or cuid()
            if self._email_taken(patient.email, exclude_id=patient_id):
                raise DuplicateEmailError(patient.email)

            stored = patient.copy()
            stored.id = patient_id
            self.patients[patient_id] = stored
            return stored.copy()

    async def delete(self, patient: Patient) -> None:
        async with self._lock:
            if patient.id is not None:
                self.patients.pop(patient.id, None)

    async def exists_by_id(self, patient_id: str) -> bool:
        return patient_id in self.patients

    async def exists_by_email(self, email: str) -> bool:
        return self._email_taken(email)

    async def exists_by_email_excluding(self, email: str, patient_id: str) -> bool:
        return self._email_taken(email, exclude_id=patient_id)

    def _email_taken(self, email: str, exclude_id: str | None = None) -> bool:
        """Check the email constraint against current contents."""
        return any(
            stored.email == email and stored_id != exclude_id for stored_id, stored in self.patients.items()
        )
