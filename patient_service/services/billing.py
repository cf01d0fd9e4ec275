"""Billing account service interface and in-memory implementation."""

from typing import Protocol

from cuid2 import cuid_wrapper

from patient_service.errors import BillingAccountError
from patient_service.models.billing import BillingAccount

cuid = cuid_wrapper()


class BillingAccountClient(Protocol):
    """Interface for provisioning billing accounts.

    The call sits outside the record store's atomicity: by the time it runs the
    patient row is already committed.
    """

    async def create_billing_account(self, patient_id: str, name: str, email: str) -> BillingAccount:
        """Provision a billing account for a patient.

        Args:
            patient_id: Store-assigned patient identifier
            name: Patient display name
            email: Patient email, used by billing to correlate the patient

        Returns:
            The created account

        Raises:
            BillingAccountError: If the account could not be created
        """
        ...


class InMemoryBillingAccountClient:
    """In-memory billing client for local development and tests."""

    def __init__(self):
        self.accounts: dict[str, BillingAccount] = {}

    async def create_billing_account(self, patient_id: str, name: str, email: str) -> BillingAccount:
        if patient_id in self.accounts:
            raise BillingAccountError(f"Billing account already exists for patient {patient_id}")

        account = BillingAccount(account_id=cuid(), status="ACTIVE")
        self.accounts[patient_id] = account
        return account
