"""Exceptions raised by the record store, billing client and event publisher.

These never cross the orchestrator: ``PatientService`` turns each of them into a
``Failure`` result.
"""


class PatientServiceError(Exception):
    """Base class for collaborator failures."""


class StoreUnavailableError(PatientServiceError):
    """The record store could not complete an operation."""


class DuplicateEmailError(PatientServiceError):
    """A write would give two patients the same email."""

    def __init__(self, email: str):
        super().__init__(f"A patient with this email already exists: {email}")
        self.email = email


class BillingAccountError(PatientServiceError):
    """The billing service did not provision an account."""


class EventPublishError(PatientServiceError):
    """A lifecycle event could not be handed to the event stream."""


class PatientNotFoundError(PatientServiceError):
    """An update targeted a patient that is no longer stored."""

    def __init__(self, patient_id: str):
        super().__init__(f"Patient not found with ID: {patient_id}")
        self.patient_id = patient_id
