"""Event stream client publishing through a Kafka REST proxy."""

from dataclasses import dataclass

import httpx

from patient_service.errors import EventPublishError
from patient_service.models.events import PatientEvent
from patient_service.models.patient import Patient
from patient_service.utils.logging import get_logger

logger = get_logger(__name__)

KAFKA_JSON_CONTENT_TYPE = "application/vnd.kafka.json.v2+json"


@dataclass
class EventStreamConfig:
    """Configuration for the event stream client."""

    base_url: str
    topic: str = "patient"
    timeout: float = 5.0


class RestProxyEventPublisher:
    """Publishes patient events as keyed JSON records.

    The patient id is the record key so all events for one patient land on
    the same partition.
    """

    def __init__(self, config: EventStreamConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self.client = httpx.AsyncClient(base_url=config.base_url, timeout=config.timeout, transport=transport)

    async def publish_patient_created(self, patient: Patient) -> None:
        event = PatientEvent.patient_created(patient)
        body = {"records": [{"key": event.patient_id, "value": event.model_dump(mode="json")}]}

        try:
            response = await self.client.post(
                f"/topics/{self.config.topic}",
                json=body,
                headers={"Content-Type": KAFKA_JSON_CONTENT_TYPE},
            )
        except httpx.TransportError as e:
            raise EventPublishError(f"Event stream unreachable: {e}") from e
        except httpx.HTTPError as e:
            raise EventPublishError(f"Event stream request failed: {e}") from e

        if response.is_error:
            logger.error(f"Event stream rejected {event.event_type} for {event.patient_id}: {response.status_code}")
            raise EventPublishError(f"Event stream returned {response.status_code} for patient {event.patient_id}")

        logger.info(f"Published {event.event_type} event {event.event_id} to topic {self.config.topic}")

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
