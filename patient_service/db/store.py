"""SQLAlchemy-backed patient record store."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from cuid2 import cuid_wrapper
from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from patient_service.db.base import PatientRecord
from patient_service.errors import DuplicateEmailError, PatientNotFoundError, StoreUnavailableError
from patient_service.models.patient import Patient
from patient_service.utils.logging import get_logger

logger = get_logger(__name__)

cuid = cuid_wrapper()


def _to_patient(record: PatientRecord) -> Patient:
    return Patient(
        id=record.id,
        name=record.name,
        email=record.email,
        address=record.address,
        date_of_birth=record.date_of_birth,
    )


class SqlPatientRecordStore:
    """Record store over a relational database.

    Each operation runs in its own session and commits a single row, so no
    transaction ever spans a call to billing or the event stream.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Open a session, translating driver failures into StoreUnavailableError."""
        try:
            async with self.session_factory() as session:
                yield session
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Patient store operation failed: {e}", exc_info=True)
            raise StoreUnavailableError(f"Patient store unavailable: {e}") from e

    async def find_all(self) -> list[Patient]:
        async with self._session() as session:
            result = await session.scalars(select(PatientRecord))
            return [_to_patient(record) for record in result]

    async def find_by_id(self, patient_id: str) -> Patient | None:
        async with self._session() as session:
            record = await session.get(PatientRecord, patient_id)
            return _to_patient(record) if record else None

    async def save(self, patient: Patient) -> Patient:
        async with self._session() as session:
            if patient.id is None:
                record = PatientRecord(id=cuid())
                session.add(record)
            else:
                record = await session.get(PatientRecord, patient.id)
                if record is None:
                    raise PatientNotFoundError(patient.id)

            record.name = patient.name
            record.email = patient.email
            record.address = patient.address
            record.date_of_birth = patient.date_of_birth

            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise DuplicateEmailError(patient.email) from e
            except StaleDataError as e:
                # Row deleted between the read and the UPDATE
                await session.rollback()
                raise PatientNotFoundError(patient.id) from e

            return _to_patient(record)

    async def delete(self, patient: Patient) -> None:
        async with self._session() as session:
            record = await session.get(PatientRecord, patient.id)
            if record is not None:
                await session.delete(record)
                await session.commit()

    async def exists_by_id(self, patient_id: str) -> bool:
        async with self._session() as session:
            return bool(await session.scalar(select(exists().where(PatientRecord.id == patient_id))))

    async def exists_by_email(self, email: str) -> bool:
        async with self._session() as session:
            return bool(await session.scalar(select(exists().where(PatientRecord.email == email))))

    async def exists_by_email_excluding(self, email: str, patient_id: str) -> bool:
        async with self._session() as session:
            query = select(exists().where(PatientRecord.email == email, PatientRecord.id != patient_id))
            return bool(await session.scalar(query))
