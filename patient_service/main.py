"""Main FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI

from patient_service import __version__
from patient_service.api.endpoints import router
from patient_service.config import Settings
from patient_service.dependencies import build_patient_service
from patient_service.services.patients import PatientService
from patient_service.utils.logging import LogConfig, setup_logging


def create_app(settings: Settings | None = None, patient_service: PatientService | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Runtime settings, read from the environment when omitted
        patient_service: Pre-built service; when given, settings do not wire collaborators
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(LogConfig(level=settings.log_level))
        async with AsyncExitStack() as resources:
            app.state.patient_service = patient_service or await build_patient_service(settings, resources)
            yield

    app = FastAPI(
        title="Patient Service",
        description=(
            "Manages patient records, provisioning a billing account and publishing "
            "a lifecycle event for every new patient."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "Patients",
                "description": "Create, list, update and delete patient records.",
            },
            {
                "name": "Health",
                "description": "Service health monitoring and status checks.",
            },
        ],
    )

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    runtime_settings = Settings.from_env()
    uvicorn.run(
        "patient_service.main:app",
        host=runtime_settings.host,
        port=runtime_settings.port,
        log_level=runtime_settings.log_level.lower(),
    )
