import logging
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

load_dotenv("journeyapi/.env")

from journeyapi.config import settings  # noqa: E402
from journeyapi.core.exceptions import BaseAPIException  # noqa: E402
from journeyapi.core.exception_handlers import (  # noqa: E402
    handle_base_api_exception,
    handle_http_exception,
    handle_unexpected_error,
    handle_validation_error,
)
from journeyapi.core.logging_middleware import LoggingMiddleware  # noqa: E402
from journeyapi.database.connection import engine  # noqa: E402
from journeyapi.deps import container  # noqa: E402
from journeyapi.logging_config import setup_logging  # noqa: E402
from journeyapi.models import Base  # noqa: E402
from journeyapi.routers import (  # noqa: E402
    auth_router,
    favorites_router,
    health_router,
    journey_router,
    point_router,
    route_router,
    user_router,
    vendor_router,
)

setup_logging(settings.LOG_LEVEL, sql_echo=settings.DEBUG)
logger = logging.getLogger("journeyapi")


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)
    app.container = container  # type: ignore

    if settings.database_url.startswith("sqlite"):
        # local development has no migration step
        Base.metadata.create_all(bind=engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(BaseAPIException, handle_base_api_exception)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(health_router.router)
    app.include_router(auth_router.router, prefix=settings.API_V1_STR)
    app.include_router(user_router.router, prefix=settings.API_V1_STR)
    app.include_router(vendor_router.router, prefix=settings.API_V1_STR)
    app.include_router(route_router.router, prefix=settings.API_V1_STR)
    app.include_router(journey_router.router, prefix=settings.API_V1_STR)
    app.include_router(point_router.router, prefix=settings.API_V1_STR)
    app.include_router(favorites_router.router, prefix=settings.API_V1_STR)

    logger.info(
        f"{settings.APP_NAME} started (env={settings.ENVIRONMENT}, "
        f"catalog={settings.DATA_BACKEND})"
    )
    return app


app = create_app()

handler = Mangum(app)
