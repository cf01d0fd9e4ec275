"""Patient service coordinating the record store, billing and event stream."""

from datetime import date

from patient_service.errors import (
    BillingAccountError,
    DuplicateEmailError,
    EventPublishError,
    PatientNotFoundError,
    StoreUnavailableError,
)
from patient_service.models.patient import Patient, PatientRequest, PatientResponse
from patient_service.services.billing import BillingAccountClient
from patient_service.services.events import EventPublisher
from patient_service.services.records import PatientRecordStore
from patient_service.services.results import Failure, FailureKind, Ok, Result
from patient_service.utils.logging import get_logger

logger = get_logger(__name__)


def parse_date_of_birth(value: str) -> date:
    """Parse an ISO calendar date (YYYY-MM-DD).

    Raises:
        ValueError: If the text is not a valid date
    """
    text = value.strip()
    parsed = date.fromisoformat(text)
    # fromisoformat also takes compact forms such as 19900101
    if parsed.isoformat() != text:
        raise ValueError(f"Expected YYYY-MM-DD, got {value!r}")
    return parsed


class PatientService:
    """Runs patient create, update, delete and list workflows.

    Creation touches three independent systems in a fixed order: the record
    store, then billing, then the event stream. A failure after the store write
    leaves the record in place and is reported as a partial success failure
    carrying the stored patient id. Nothing is retried or compensated here.
    """

    def __init__(
        self,
        record_store: PatientRecordStore,
        billing_client: BillingAccountClient,
        event_publisher: EventPublisher,
    ):
        """Initialize patient service.

        Args:
            record_store: Store holding patient records
            billing_client: Client provisioning billing accounts
            event_publisher: Publisher for patient lifecycle events
        """
        self.record_store = record_store
        self.billing_client = billing_client
        self.event_publisher = event_publisher

    async def list_patients(self) -> Result[list[PatientResponse]]:
        """Return all stored patients."""
        logger.info("Retrieving all patients")
        try:
            patients = await self.record_store.find_all()
        except StoreUnavailableError as e:
            return self._store_failure("retrieving patients", e)

        logger.info(f"Successfully retrieved {len(patients)} patients")
        return Ok([PatientResponse.from_patient(patient) for patient in patients])

    async def create_patient(self, request: PatientRequest) -> Result[PatientResponse]:
        """Create a patient, provision billing and publish the creation event.

        Returns:
            Ok with the stored patient, or a Failure. BILLING_FAILURE and
            PUBLISH_FAILURE mean the record was stored and still exists.
        """
        logger.info(f"Creating new patient with email: {request.email}")

        try:
            if await self.record_store.exists_by_email(request.email):
                return self._email_conflict(request.email)
        except StoreUnavailableError as e:
            return self._store_failure("checking patient email", e)

        try:
            date_of_birth = parse_date_of_birth(request.date_of_birth)
        except ValueError:
            return self._invalid_date_of_birth(request.date_of_birth)

        new_patient = Patient(
            name=request.name,
            email=request.email,
            address=request.address,
            date_of_birth=date_of_birth,
        )
        try:
            patient = await self.record_store.save(new_patient)
        except DuplicateEmailError:
            # Lost a race with a concurrent create for the same email
            return self._email_conflict(request.email)
        except StoreUnavailableError as e:
            return self._store_failure("saving patient", e)

        logger.info(f"Successfully created patient with ID: {patient.id}")

        try:
            account = await self.billing_client.create_billing_account(patient.id, patient.name, patient.email)
        except BillingAccountError as e:
            logger.error(f"Failed to create billing account for patient ID {patient.id}: {e}")
            return Failure(
                kind=FailureKind.BILLING_FAILURE,
                message=f"Failed to create billing account: {e}",
                patient_id=patient.id,
            )

        logger.info(f"Successfully created billing account {account.account_id} for patient ID: {patient.id}")

        try:
            await self.event_publisher.publish_patient_created(patient)
        except EventPublishError as e:
            logger.error(f"Failed to publish creation event for patient ID {patient.id}: {e}")
            return Failure(
                kind=FailureKind.PUBLISH_FAILURE,
                message=f"Failed to publish patient created event: {e}",
                patient_id=patient.id,
            )

        logger.info(f"Successfully published creation event for patient ID: {patient.id}")
        return Ok(PatientResponse.from_patient(patient))

    async def update_patient(self, patient_id: str, request: PatientRequest) -> Result[PatientResponse]:
        """Replace the mutable fields of an existing patient.

        No billing or event side effects happen on update.
        """
        logger.info(f"Updating patient with ID: {patient_id}")

        try:
            patient = await self.record_store.find_by_id(patient_id)
            if patient is None:
                return self._not_found(patient_id)

            if await self.record_store.exists_by_email_excluding(request.email, patient_id):
                return self._email_conflict(request.email)
        except StoreUnavailableError as e:
            return self._store_failure(f"looking up patient {patient_id}", e)

        try:
            date_of_birth = parse_date_of_birth(request.date_of_birth)
        except ValueError:
            return self._invalid_date_of_birth(request.date_of_birth)

        patient.name = request.name
        patient.email = request.email
        patient.address = request.address
        patient.date_of_birth = date_of_birth

        try:
            updated = await self.record_store.save(patient)
        except DuplicateEmailError:
            return self._email_conflict(request.email)
        except PatientNotFoundError:
            # Deleted after the lookup above
            return self._not_found(patient_id)
        except StoreUnavailableError as e:
            return self._store_failure(f"updating patient {patient_id}", e)

        logger.info(f"Successfully updated patient with ID: {patient_id}")
        return Ok(PatientResponse.from_patient(updated))

    async def delete_patient(self, patient_id: str) -> Result[None]:
        """Delete a patient. Billing and event systems are not touched."""
        logger.info(f"Deleting patient with ID: {patient_id}")

        try:
            patient = await self.record_store.find_by_id(patient_id)
            if patient is None:
                return self._not_found(patient_id)

            await self.record_store.delete(patient)
        except StoreUnavailableError as e:
            return self._store_failure(f"deleting patient {patient_id}", e)

        logger.info(f"Successfully deleted patient with ID: {patient_id}")
        return Ok(None)

    async def exists_by_id(self, patient_id: str) -> Result[bool]:
        """Check whether a patient exists."""
        logger.debug(f"Checking if patient exists with ID: {patient_id}")
        try:
            exists = await self.record_store.exists_by_id(patient_id)
        except StoreUnavailableError as e:
            return self._store_failure(f"checking patient {patient_id}", e)

        logger.debug(f"Patient exists check result for ID {patient_id}: {exists}")
        return Ok(exists)

    def _email_conflict(self, email: str) -> Failure:
        logger.warning(f"Attempt to use existing patient email: {email}")
        return Failure(kind=FailureKind.EMAIL_CONFLICT, message=f"A patient with this email already exists: {email}")

    def _not_found(self, patient_id: str) -> Failure:
        logger.warning(f"Patient not found with ID: {patient_id}")
        return Failure(kind=FailureKind.NOT_FOUND, message=f"Patient not found with ID: {patient_id}")

    def _invalid_date_of_birth(self, value: str) -> Failure:
        logger.warning(f"Invalid date of birth: {value!r}")
        return Failure(
            kind=FailureKind.VALIDATION_FAILURE,
            message=f"Invalid date of birth {value!r}, expected YYYY-MM-DD",
        )

    def _store_failure(self, action: str, error: StoreUnavailableError) -> Failure:
        logger.error(f"Error {action}: {error}")
        return Failure(kind=FailureKind.STORE_UNAVAILABLE, message=f"Patient store unavailable while {action}")
