"""Exception handlers for the non-streaming chat path.

Streamed responses turn errors into SSE error events instead
(``api.streaming``); these handlers cover ``?stream=false``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from openai import APIConnectionError, APIError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register the provider and timeout handlers on *app*."""

    @app.exception_handler(APIConnectionError)
    async def handle_model_unreachable(
        request: Request, exc: APIConnectionError
    ) -> JSONResponse:
        logger.warning("LLM provider unreachable.")
        return JSONResponse(
            status_code=503,
            content={
                "detail": "Model is temporarily unavailable. Please try again later.",
                "code": "MODEL_UNREACHABLE",
            },
            headers={"Retry-After": "5"},
        )

    @app.exception_handler(APIError)
    async def handle_model_error(request: Request, exc: APIError) -> JSONResponse:
        logger.warning("LLM provider error: %s", exc)
        return JSONResponse(
            status_code=502,
            content={"detail": "Model request failed.", "code": "MODEL_ERROR"},
        )

    @app.exception_handler(TimeoutError)
    async def handle_timeout(request: Request, exc: TimeoutError) -> JSONResponse:
        logger.warning("Request timed out.")
        return JSONResponse(
            status_code=504,
            content={"detail": "Request timed out.", "code": "REQUEST_TIMEOUT"},
        )
