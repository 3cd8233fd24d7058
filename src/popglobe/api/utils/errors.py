# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from popglobe.api.models.session_api import ControlResponse, ErrorInfo
from popglobe.errors import ControlError, DatasetLoadError, SessionStateError


def error_response(
    *,
    status_code: int,
    err_type: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    body = ControlResponse(
        status="error",
        error=ErrorInfo(type=err_type, message=message, details=details),
    ).model_dump()
    return JSONResponse(content=body, status_code=status_code)


async def control_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(status_code=400, err_type="control_error", message=str(exc))


async def session_state_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(status_code=409, err_type="session_state", message=str(exc))


async def dataset_load_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(
        status_code=500, err_type="dataset_load_error", message=str(exc)
    )


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    return error_response(
        status_code=422,
        err_type="validation_error",
        message="Invalid request",
        details={"errors": [{k: e.get(k) for k in ("loc", "msg", "type")} for e in errors]},
    )


EXCEPTION_HANDLERS = {
    ControlError: control_error_handler,
    SessionStateError: session_state_handler,
    DatasetLoadError: dataset_load_handler,
    RequestValidationError: validation_error_handler,
}
