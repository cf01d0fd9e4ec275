"""Tests for data models and settings."""

import logging
from datetime import UTC, date, datetime

import pytest
from pydantic import ValidationError

from patient_service.config import Settings
from patient_service.models.events import PatientEvent
from patient_service.models.health import HealthResponse
from patient_service.models.patient import Patient, PatientRequest, PatientResponse
from patient_service.services.results import Failure, FailureKind, Ok
from patient_service.utils.logging import LogConfig, get_logger, setup_logging


class TestPatientModels:
    """Tests for patient models."""

    def test_patient_copy_is_detached(self):
        patient = Patient(id="p1", name="Ada", email="ada@x.com", address="1 Main St", date_of_birth=date(1990, 1, 1))

        copy = patient.copy()
        copy.name = "Changed"

        assert patient.name == "Ada"
        assert copy.id == "p1"

    def test_patient_request_from_json(self):
        data = {"name": "Ada", "email": "ada@x.com", "address": "1 Main St", "date_of_birth": "1990-01-01"}

        request = PatientRequest.model_validate(data)

        assert request.email == "ada@x.com"
        assert request.date_of_birth == "1990-01-01"

    def test_patient_request_keeps_date_as_text(self):
        """Test that date parsing is left to the patient service."""
        request = PatientRequest(name="Ada", email="ada@x.com", address="1 Main St", date_of_birth="not a date")
        assert request.date_of_birth == "not a date"

    def test_patient_request_invalid_email(self):
        with pytest.raises(ValidationError):
            PatientRequest(name="Ada", email="ada", address="1 Main St", date_of_birth="1990-01-01")

    def test_patient_request_name_too_long(self):
        with pytest.raises(ValidationError):
            PatientRequest(name="A" * 101, email="ada@x.com", address="1 Main St", date_of_birth="1990-01-01")

    def test_patient_response_from_patient(self):
        patient = Patient(id="p1", name="Ada", email="ada@x.com", address="1 Main St", date_of_birth=date(1990, 1, 1))

        response = PatientResponse.from_patient(patient)

        assert response.model_dump() == {
            "id": "p1",
            "name": "Ada",
            "email": "ada@x.com",
            "address": "1 Main St",
            "date_of_birth": "1990-01-01",
        }

    def test_patient_response_requires_id(self):
        patient = Patient(name="Ada", email="ada@x.com", address="1 Main St", date_of_birth=date(1990, 1, 1))

        with pytest.raises(ValueError):
            PatientResponse.from_patient(patient)


class TestEventModels:
    """Tests for lifecycle event models."""

    def test_patient_created_event(self):
        patient = Patient(id="p1", name="Ada", email="ada@x.com", address="1 Main St", date_of_birth=date(1990, 1, 1))

        event = PatientEvent.patient_created(patient)

        assert event.event_type == "PATIENT_CREATED"
        assert event.patient_id == "p1"
        assert event.email == "ada@x.com"
        assert event.event_id
        assert event.occurred_at.tzinfo is not None

    def test_events_get_distinct_ids(self):
        patient = Patient(id="p1", name="Ada", email="ada@x.com", address="1 Main St", date_of_birth=date(1990, 1, 1))

        assert PatientEvent.patient_created(patient).event_id != PatientEvent.patient_created(patient).event_id


class TestResults:
    """Tests for service outcome types."""

    def test_partial_success_kinds(self):
        assert Failure(FailureKind.BILLING_FAILURE, "billing down", patient_id="p1").is_partial_success
        assert Failure(FailureKind.PUBLISH_FAILURE, "broker down", patient_id="p1").is_partial_success
        assert not Failure(FailureKind.EMAIL_CONFLICT, "taken").is_partial_success
        assert not Failure(FailureKind.STORE_UNAVAILABLE, "down").is_partial_success

    def test_ok_equality(self):
        assert Ok(True) == Ok(True)
        assert Ok(True) != Ok(False)


class TestHealthModels:
    def test_health_response_valid(self):
        now = datetime.now(UTC)
        response = HealthResponse(status="healthy", timestamp=now, version="1.0.0")
        assert response.timestamp == now


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ["DATABASE_URL", "BILLING_SERVICE_URL", "EVENT_STREAM_URL", "PORT", "LOG_LEVEL"]:
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.database_url is None
        assert settings.billing_service_url is None
        assert settings.event_stream_url is None
        assert settings.event_topic == "patient"
        assert settings.port == 4000

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///patients.db")
        monkeypatch.setenv("BILLING_SERVICE_URL", "http://billing:4001")
        monkeypatch.setenv("BILLING_MAX_RETRIES", "0")
        monkeypatch.setenv("EVENT_TOPIC", "patient-events")
        monkeypatch.setenv("PORT", "8080")

        settings = Settings.from_env()

        assert settings.database_url == "sqlite+aiosqlite:///patients.db"
        assert settings.billing_service_url == "http://billing:4001"
        assert settings.billing_max_retries == 0
        assert settings.event_topic == "patient-events"
        assert settings.port == 8080


class TestLogging:
    """Tests for logging setup."""

    def test_module_loggers_follow_configured_level(self):
        logger = get_logger("patient_service.services.patients")

        try:
            setup_logging(LogConfig(level="DEBUG"))
            assert logger.getEffectiveLevel() == logging.DEBUG

            setup_logging(LogConfig(level="warning"))
            assert logger.getEffectiveLevel() == logging.WARNING
        finally:
            setup_logging(LogConfig())

    def test_third_party_loggers_quieted(self):
        setup_logging(LogConfig(level="DEBUG"))
        try:
            assert logging.getLogger("httpx").level == logging.WARNING
            assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        finally:
            setup_logging(LogConfig())
