from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel
from pydantic import ConfigDict
from starlette.middleware.cors import CORSMiddleware

import settings
from testnetfaucet import api_logger
from testnetfaucet import dependencies
from testnetfaucet.domain.admission.admission_controller import AdmissionController
from testnetfaucet.domain.admission.admission_controller import per_worker_ceiling
from testnetfaucet.repository import connection
from testnetfaucet.routers import main_router
from testnetfaucet.service.error_responses import APIErrorResponse
from testnetfaucet.service.exception_handlers.exception_handlers import (
    custom_exception_handler,
)
from testnetfaucet.service.exception_handlers.exception_handlers import (
    request_validation_exception_handler,
)
from testnetfaucet.service.middleware.admission_middleware import AdmissionMiddleware
from testnetfaucet.service.middleware.main_middleware import MainMiddleware
from testnetfaucet.service.middleware.request_enrichment_middleware import (
    RequestEnrichmentMiddleware,
)

API_TITLE = "Testnet faucet"
API_DESCRIPTION = "Rate limited testnet token faucet"
API_VERSION = "1.0.0"

logger = api_logger.get()


@asynccontextmanager
async def lifespan(_: FastAPI):
    connection.init_defaults()
    dependencies.init_globals()
    logger.info(
        f"Faucet started for network={settings.TESTNET_NAME} "
        f"admission_ceiling={settings.ADMISSION_CEILING_PER_SECOND}/s"
    )
    yield

    # In flight claims finish before the worker exits, see graceful_timeout
    logger.info("Shutdown Signal received. Cleaning up...")
    await dependencies.get_chain_api_repository().close()
    await connection.close_all()
    logger.info("Cleanup complete.")


app = FastAPI(lifespan=lifespan)
app.include_router(main_router.router)


def custom_openapi():
    if not app.openapi_schema:
        app.openapi_schema = get_openapi(
            title=f"{API_TITLE} API",
            version=API_VERSION,
            description=f"{API_DESCRIPTION}, version {API_VERSION}",
            routes=app.routes,
            servers=_get_servers(),
        )
    return app.openapi_schema


def _get_servers():
    base_url = settings.API_BASE_URL.rstrip("/")
    if not settings.is_production():
        base_url = f"{base_url}:{settings.API_PORT}"
    return [{"url": base_url}]


app.openapi = custom_openapi

# Last added middleware runs first: admission, enrichment, main, CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MainMiddleware)
app.add_middleware(RequestEnrichmentMiddleware)
app.add_middleware(
    AdmissionMiddleware,
    admission_controller=AdmissionController(
        per_worker_ceiling(
            settings.ADMISSION_CEILING_PER_SECOND, settings.GUNICORN_WORKERS
        )
    ),
)

# Exception handlers run inside the middlewares
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(APIErrorResponse, custom_exception_handler)
app.add_exception_handler(Exception, custom_exception_handler)


class ApiInfo(BaseModel):
    title: str
    description: str
    version: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": API_TITLE,
                "description": API_DESCRIPTION,
                "version": API_VERSION,
            }
        }
    )


@app.get(
    "/",
    summary="Returns API information",
    description="Returns API information",
    response_description="API title, description and version.",
    response_model=ApiInfo,
)
def root():
    return ApiInfo(title=API_TITLE, description=API_DESCRIPTION, version=API_VERSION)
