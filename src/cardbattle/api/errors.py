"""Translate engine errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from cardbattle.domain.errors import (
    BattleEngineError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    StaleSubmissionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[BattleEngineError], int, str]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (StaleSubmissionError, status.HTTP_409_CONFLICT, "stale_submission"),
    (InvalidTransitionError, status.HTTP_409_CONFLICT, "invalid_transition"),
    (ConflictError, status.HTTP_409_CONFLICT, "conflict"),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY, "validation_error"),
]


def engine_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    for error_type, status_code, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            break
    else:
        status_code, code = status.HTTP_400_BAD_REQUEST, "battle_error"

    logger.info("request rejected (%s): %s", code, exc)
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "error",
            "error": code,
            "detail": str(exc),
            "retryable": isinstance(exc, ConflictError),
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BattleEngineError, engine_error_handler)
