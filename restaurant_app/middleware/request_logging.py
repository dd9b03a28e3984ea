"""
Request logging middleware.
Logs every request with its response status and duration.
"""
import logging
import time

from fastapi import FastAPI, Request

from restaurant_app.utils.logger import log_api_request, log_api_response

logger = logging.getLogger(__name__)


def add_request_logging(app: FastAPI) -> None:

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()
        log_api_request(logger, request.method, request.url.path)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        log_api_response(logger, request.method, request.url.path, response.status_code, duration_ms)
        return response
