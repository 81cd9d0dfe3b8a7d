from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)


class BaqmanError(Exception):
    """Base class for errors raised by baqman."""


class ConfigError(BaqmanError):
    """Required configuration is missing or invalid."""


class InvalidJobRecordError(BaqmanError, ValueError):
    """A job resource returned by BigQuery could not be normalized."""


class InvalidJobIdError(InvalidJobRecordError):
    """A job identifier is malformed."""


class JobDirectoryError(BaqmanError):
    """A call to the BigQuery jobs API failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class JobNotFoundError(JobDirectoryError):
    """The requested job does not exist in the bound project."""


def status_for(exc: Exception) -> int:
    if isinstance(exc, JobNotFoundError):
        return 404
    if isinstance(exc, InvalidJobIdError):
        return 400
    if isinstance(exc, JobDirectoryError):
        # remote 4xx (bad request, forbidden) are passed through, anything else is a gateway error
        if exc.status_code is not None and 400 <= exc.status_code < 500:
            return exc.status_code
        return 502
    if isinstance(exc, InvalidJobRecordError):
        return 502
    if isinstance(exc, ConfigError):
        return 503
    return 500


def register_error_handlers(app: FastAPI, render_error) -> None:
    """Register handlers for baqman errors on the FastAPI app.

    ``render_error(request, status_code, message)`` renders the HTML error page;
    requests under ``/api/`` get a JSON body instead.
    """

    async def _handler(request: Request, exc: Exception) -> Response:
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        if request.url.path.startswith("/api/"):
            return JSONResponse(status_code=status_code, content={"detail": str(exc)})
        return render_error(request, status_code, str(exc))

    for exc_cls in (JobDirectoryError, InvalidJobRecordError, ConfigError):
        app.add_exception_handler(exc_cls, _handler)
