"""Service configuration loaded from environment variables."""

import os

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings.

    Unset collaborator URLs select the in-memory implementations, which is how
    the service runs locally and in tests.
    """

    database_url: str | None = None
    echo_sql: bool = False

    billing_service_url: str | None = None
    billing_timeout_seconds: float = 5.0
    billing_max_retries: int = 2

    event_stream_url: str | None = None
    event_topic: str = "patient"
    event_timeout_seconds: float = 5.0

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 4000

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""
        env = {
            "database_url": os.getenv("DATABASE_URL"),
            "echo_sql": os.getenv("ECHO_SQL"),
            "billing_service_url": os.getenv("BILLING_SERVICE_URL"),
            "billing_timeout_seconds": os.getenv("BILLING_TIMEOUT_SECONDS"),
            "billing_max_retries": os.getenv("BILLING_MAX_RETRIES"),
            "event_stream_url": os.getenv("EVENT_STREAM_URL"),
            "event_topic": os.getenv("EVENT_TOPIC"),
            "event_timeout_seconds": os.getenv("EVENT_TIMEOUT_SECONDS"),
            "log_level": os.getenv("LOG_LEVEL"),
            "host": os.getenv("HOST"),
            "port": os.getenv("PORT"),
        }
        # Fall back to field defaults for anything not set
        return cls.model_validate({key: value for key, value in env.items() if value})
