"""API error mapping

Use case errors reach the client as
{"error": {"code", "message", "reason", "details"}}.
"""

import logging
from typing import Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse
from libs.result import Error

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "validation": status.HTTP_400_BAD_REQUEST,
    "conflict": status.HTTP_409_CONFLICT,
    "unauthorized": status.HTTP_403_FORBIDDEN,
}

STATUS_BY_CODE = {
    "NOTIFICATION_FAILED": status.HTTP_502_BAD_GATEWAY,
}


def error_status(error: Error) -> int:
    """HTTP status for a use case error; errors without a kind are server failures"""
    if error.code in STATUS_BY_CODE:
        return STATUS_BY_CODE[error.code]
    if error.kind:
        return STATUS_BY_KIND.get(error.kind, status.HTTP_400_BAD_REQUEST)
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class ClientError(Exception):
    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or error_status(error)


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error.code} {exc.error.reason}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.error.code}")

    content = {
        "error": {
            "code": exc.error.code,
            "message": exc.error.message,
            "reason": exc.error.reason,
            "details": exc.error.details,
        }
    }
    return JSONResponse(status_code=exc.status_code, content=content)
