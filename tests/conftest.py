"""Shared fixtures and collaborator doubles for the test suite."""

import asyncio

import pytest

from patient_service.db.connection import create_tables, get_engine, get_session_factory
from patient_service.db.store import SqlPatientRecordStore
from patient_service.errors import BillingAccountError, EventPublishError, StoreUnavailableError
from patient_service.models.billing import BillingAccount
from patient_service.models.patient import Patient, PatientRequest
from patient_service.services.billing import InMemoryBillingAccountClient
from patient_service.services.events import InMemoryEventPublisher
from patient_service.services.patients import PatientService
from patient_service.services.records import InMemoryPatientRecordStore


class RecordingRecordStore(InMemoryPatientRecordStore):
    """In-memory store that counts mutating calls."""

    def __init__(self):
        super().__init__()
        self.mutations: list[str] = []

    async def save(self, patient: Patient) -> Patient:
        self.mutations.append("save")
        return await super().save(patient)

    async def delete(self, patient: Patient) -> None:
        self.mutations.append("delete")
        await super().delete(patient)


class UnavailableRecordStore(InMemoryPatientRecordStore):
    """Store whose every operation fails."""

    async def find_all(self) -> list[Patient]:
        raise StoreUnavailableError("database is down")

    async def find_by_id(self, patient_id: str) -> Patient | None:
        raise StoreUnavailableError("database is down")

    async def save(self, patient: Patient) -> Patient:
        raise StoreUnavailableError("database is down")

    async def exists_by_id(self, patient_id: str) -> bool:
        raise StoreUnavailableError("database is down")

    async def exists_by_email(self, email: str) -> bool:
        raise StoreUnavailableError("database is down")


class RecordingBillingClient(InMemoryBillingAccountClient):
    """Billing double that yields to the event loop and records call order."""

    def __init__(self, calls: list[str], fail: bool = False):
        super().__init__()
        self.calls = calls
        self.fail = fail

    async def create_billing_account(self, patient_id: str, name: str, email: str) -> BillingAccount:
        await asyncio.sleep(0)
        if self.fail:
            self.calls.append("billing:failed")
            raise BillingAccountError("billing service returned 500")

        account = await super().create_billing_account(patient_id, name, email)
        self.calls.append("billing")
        return account


class RecordingEventPublisher(InMemoryEventPublisher):
    """Publisher double recording call order."""

    def __init__(self, calls: list[str], fail: bool = False):
        super().__init__()
        self.calls = calls
        self.fail = fail

    async def publish_patient_created(self, patient: Patient) -> None:
        if self.fail:
            self.calls.append("publish:failed")
            raise EventPublishError("broker unavailable")

        await super().publish_patient_created(patient)
        self.calls.append("publish")


@pytest.fixture
def calls() -> list[str]:
    return []


@pytest.fixture
def record_store():
    return RecordingRecordStore()


@pytest.fixture
def billing_client(calls):
    return RecordingBillingClient(calls)


@pytest.fixture
def event_publisher(calls):
    return RecordingEventPublisher(calls)


@pytest.fixture
def patient_service(record_store, billing_client, event_publisher):
    return PatientService(record_store, billing_client, event_publisher)


@pytest.fixture
def ada_request():
    return PatientRequest(name="Ada", email="ada@x.com", address="1 Main St", date_of_birth="1990-01-01")


@pytest.fixture
def grace_request():
    return PatientRequest(name="Grace", email="grace@x.com", address="2 Navy Yard", date_of_birth="1906-12-09")


@pytest.fixture
async def sql_record_store(tmp_path):
    """SQL store over a SQLite file, so concurrent sessions use separate connections."""
    engine = get_engine(f"sqlite+aiosqlite:///{tmp_path / 'patients.db'}")
    await create_tables(engine)
    yield SqlPatientRecordStore(get_session_factory(engine))
    await engine.dispose()
