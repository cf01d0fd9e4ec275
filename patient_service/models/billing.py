"""Billing account models."""

from pydantic import BaseModel


class BillingAccountRequest(BaseModel):
    """Payload sent to the billing service."""

    patient_id: str
    name: str
    email: str


class BillingAccount(BaseModel):
    """Account returned by the billing service."""

    account_id: str
    status: str
