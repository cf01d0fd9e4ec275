"""Construction of the patient service from settings, and its FastAPI dependency."""

from contextlib import AsyncExitStack

from fastapi import Request

from patient_service.clients.billing import BillingClientConfig, HttpBillingAccountClient
from patient_service.clients.event_stream import EventStreamConfig, RestProxyEventPublisher
from patient_service.config import Settings
from patient_service.db.connection import create_tables, get_engine, get_session_factory
from patient_service.db.store import SqlPatientRecordStore
from patient_service.services.billing import BillingAccountClient, InMemoryBillingAccountClient
from patient_service.services.events import EventPublisher, InMemoryEventPublisher
from patient_service.services.patients import PatientService
from patient_service.services.records import InMemoryPatientRecordStore, PatientRecordStore
from patient_service.utils.logging import get_logger

logger = get_logger(__name__)


async def build_patient_service(settings: Settings, resources: AsyncExitStack) -> PatientService:
    """Wire the record store, billing client and event publisher.

    Connections opened here are registered on ``resources`` and closed with it.
    """
    record_store: PatientRecordStore
    if settings.database_url:
        engine = get_engine(settings.database_url, echo=settings.echo_sql)
        resources.push_async_callback(engine.dispose)
        await create_tables(engine)
        record_store = SqlPatientRecordStore(get_session_factory(engine))
        logger.info("Using SQL patient record store")
    else:
        record_store = InMemoryPatientRecordStore()
        logger.info("DATABASE_URL not set, using in-memory patient record store")

    billing_client: BillingAccountClient
    if settings.billing_service_url:
        http_billing = HttpBillingAccountClient(
            BillingClientConfig(
                base_url=settings.billing_service_url,
                timeout=settings.billing_timeout_seconds,
                max_retries=settings.billing_max_retries,
            )
        )
        resources.push_async_callback(http_billing.aclose)
        billing_client = http_billing
    else:
        billing_client = InMemoryBillingAccountClient()
        logger.info("BILLING_SERVICE_URL not set, using in-memory billing client")

    event_publisher: EventPublisher
    if settings.event_stream_url:
        stream_publisher = RestProxyEventPublisher(
            EventStreamConfig(
                base_url=settings.event_stream_url,
                topic=settings.event_topic,
                timeout=settings.event_timeout_seconds,
            )
        )
        resources.push_async_callback(stream_publisher.aclose)
        event_publisher = stream_publisher
    else:
        event_publisher = InMemoryEventPublisher()
        logger.info("EVENT_STREAM_URL not set, using in-memory event publisher")

    return PatientService(record_store, billing_client, event_publisher)


def get_patient_service(request: Request) -> PatientService:
    """FastAPI dependency returning the service wired at startup."""
    return request.app.state.patient_service
