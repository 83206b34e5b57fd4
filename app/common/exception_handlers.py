# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import logging
import traceback
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.common import audit
from app.common.errors import AppError
from app.common.responses import fail
from app.common.trace import get_trace_id
from app.domain import messages

logger = logging.getLogger(__name__)


def _err_response(status_code: int, message: str, code: str, **extra: Any) -> JSONResponse:
    trace_id = get_trace_id()
    return JSONResponse(
        status_code=status_code,
        content=fail(message, code=code, trace_id=trace_id, **extra),
        headers={"X-Trace-Id": trace_id},
    )


def _request_details(request: Request) -> Dict[str, Any]:
    return {
        "traceId": get_trace_id(),
        "method": request.method,
        "url": str(request.url.path),
        "params": dict(request.path_params),
        "query": dict(request.query_params),
    }


def _message_for(err: Dict[str, Any], field: str) -> str:
    err_type = err.get("type")
    ctx = err.get("ctx") or {}
    if err_type == "missing":
        return messages.field_required(field)
    if err_type == "value_error" and ctx.get("error") is not None:
        return str(ctx["error"])
    if err_type in ("uuid_parsing", "uuid_type"):
        return messages.INVALID_UUID
    if err_type in ("int_parsing", "int_type", "int_from_float"):
        return messages.must_be_integer(field)
    if err_type in ("decimal_parsing", "decimal_type", "float_parsing", "float_type"):
        return messages.must_be_number(field)
    if err_type == "greater_than_equal" and "ge" in ctx:
        return messages.min_value(field, ctx["ge"])
    if err_type == "less_than_equal" and "le" in ctx:
        return messages.max_value(field, ctx["le"])
    return err.get("msg", messages.INVALID_DATA)


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """pydantic 错误 -> [{field, message}]，常见类型换成 messages 里的提示语"""
    formatted: List[Dict[str, str]] = []
    for err in errors:
        loc = [str(x) for x in err.get("loc", ()) if x not in ("body", "query", "path")]
        field = loc[-1] if loc else "unknown"
        formatted.append({"field": field, "message": _message_for(err, field)})
    return formatted


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    details = {**_request_details(request), "statusCode": exc.status_code, "message": exc.message}
    logger.error(
        "App error [%s] on %s %s: %s", exc.status_code, request.method, request.url.path, exc.message
    )
    logger.error("Details: %s", audit.dumps(details))
    return _err_response(exc.status_code, exc.message, exc.code, detail=exc.detail)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = format_validation_errors(list(exc.errors()))
    logger.warning(
        "Validation failed on %s %s: %s", request.method, request.url.path, audit.dumps(errors)
    )
    return _err_response(400, messages.VALIDATION_ERRORS, "VALIDATION_ERROR", errors=errors)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # noqa: ARG001
    message = exc.detail if isinstance(exc.detail, str) else messages.REQUEST_PROCESSING
    response = _err_response(exc.status_code, message, "HTTP_ERROR")
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    details = {
        **_request_details(request),
        "error": str(exc),
        "type": type(exc).__name__,
        "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    }
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, audit.dumps(details))
    return _err_response(500, messages.REQUEST_PROCESSING, "INTERNAL_ERROR")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
