"""HTTP client for the billing service."""

import asyncio
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from patient_service.errors import BillingAccountError
from patient_service.models.billing import BillingAccount, BillingAccountRequest
from patient_service.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BillingClientConfig:
    """Configuration for the billing service client."""

    base_url: str
    timeout: float = 5.0
    # Only transport failures are retried; a billing error response is final
    max_retries: int = 2
    retry_delay: float = 0.5


class HttpBillingAccountClient:
    """Billing client speaking JSON over HTTP."""

    def __init__(self, config: BillingClientConfig, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize billing client.

        Args:
            config: Client configuration
            transport: Optional transport override, used by tests
        """
        self.config = config
        self.client = httpx.AsyncClient(base_url=config.base_url, timeout=config.timeout, transport=transport)

    async def create_billing_account(self, patient_id: str, name: str, email: str) -> BillingAccount:
        payload = BillingAccountRequest(patient_id=patient_id, name=name, email=email)
        response = await self._post_with_retries("/billing-accounts", payload.model_dump())

        if response.is_error:
            logger.error(f"Billing service rejected patient {patient_id}: {response.status_code} {response.text}")
            raise BillingAccountError(f"Billing service returned {response.status_code} for patient {patient_id}")

        try:
            account = BillingAccount.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise BillingAccountError(f"Malformed billing response for patient {patient_id}") from e

        logger.info(f"Billing account {account.account_id} created for patient {patient_id} ({account.status})")
        return account

    async def _post_with_retries(self, path: str, body: dict) -> httpx.Response:
        """POST with retries on transport errors.

        Raises:
            BillingAccountError: On any HTTP client failure once retries are spent
        """
        attempts = self.config.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return await self.client.post(path, json=body)
            except httpx.TransportError as e:
                if attempt == attempts:
                    raise BillingAccountError(f"Billing service unreachable after {attempts} attempts: {e}") from e

                logger.warning(f"Billing request attempt {attempt}/{attempts} failed: {e}, retrying")
                await asyncio.sleep(self.config.retry_delay * attempt)
            except httpx.HTTPError as e:
                # Decoding and redirect errors are not transient
                raise BillingAccountError(f"Billing request failed: {e}") from e

        raise BillingAccountError("Billing request was not attempted")

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
