"""Patient event publisher interface and in-memory implementation."""

from typing import Protocol

from patient_service.models.events import PatientEvent
from patient_service.models.patient import Patient


class EventPublisher(Protocol):
    """Interface for publishing patient lifecycle events."""

    async def publish_patient_created(self, patient: Patient) -> None:
        """Publish the creation event for a stored patient.

        Raises:
            EventPublishError: If the event was not accepted by the stream
        """
        ...


class InMemoryEventPublisher:
    """Collects events in memory for local development and tests."""

    def __init__(self):
        self.events: list[PatientEvent] = []

    async def publish_patient_created(self, patient: Patient) -> None:
        self.events.append(PatientEvent.patient_created(patient))
