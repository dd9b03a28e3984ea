"""
FastAPI application.
Run with: uvicorn restaurant_app.main:app --host 0.0.0.0 --port 8000
"""
from contextlib import asynccontextmanager
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from restaurant_app import __version__
from restaurant_app.config import settings
from restaurant_app.database import Database
from restaurant_app.middleware.error_handler import add_exception_handlers
from restaurant_app.middleware.request_logging import add_request_logging
from restaurant_app.routers import employee_router, restaurant_router
from restaurant_app.utils.logger import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # A client bound beforehand (tests, embedding) is reused as is
    if not Database.is_connected():
        Database.connect()
    await Database.ping()
    await Database.create_indexes()
    logger.info(f"{settings.APP_NAME} started")

    yield

    Database.close()
    logger.info(f"{settings.APP_NAME} stopped")


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(title=settings.APP_NAME, version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    add_request_logging(app)
    add_exception_handlers(app)

    app.include_router(employee_router)
    app.include_router(restaurant_router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
