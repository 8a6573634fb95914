"""
Mapping of Postgres errors surfaced by PostgREST to HTTP errors.
"""

import logging
from typing import NoReturn

from fastapi import HTTPException, status
from postgrest.exceptions import APIError

logger = logging.getLogger(__name__)

# SQLSTATE -> (HTTP status, short description)
CONSTRAINT_ERRORS = {
    "23502": (422, "Missing required value"),
    "23503": (409, "Referenced row does not exist"),
    "23505": (409, "Row already exists"),
    "23514": (422, "Value violates a check constraint"),
    "22P02": (422, "Malformed value"),
}


def to_http_exception(error: APIError) -> HTTPException:
    code = getattr(error, "code", None)
    if code in CONSTRAINT_ERRORS:
        status_code, summary = CONSTRAINT_ERRORS[code]
        detail = f"{summary}: {error.message}" if getattr(error, "message", None) else summary
        return HTTPException(status_code=status_code, detail=detail)
    logger.error("Unexpected database error %s: %s", code, error)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Database error")


def raise_for_api_error(error: APIError) -> NoReturn:
    raise to_http_exception(error) from error
