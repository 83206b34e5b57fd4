# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from app.common import audit
from app.common.rate_limit import FixedWindowRateLimiter
from app.common.responses import fail
from app.common.trace import get_trace_id, new_trace_id, reset_trace_id, set_trace_id
from app.infra.config import Settings

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("app.audit")

TRACE_HEADER = "X-Trace-Id"
REQUEST_ID_HEADER = "X-Request-Id"


class TraceIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = request.headers.get(TRACE_HEADER) or request.headers.get(REQUEST_ID_HEADER) or new_trace_id()
        request.state.trace_id = trace_id
        token = set_trace_id(trace_id)
        # 出异常时不 reset：外层的全局异常处理还要用 trace_id 记日志
        response: Response = await call_next(request)
        response.headers[TRACE_HEADER] = trace_id
        reset_trace_id(token)
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    HEADERS: Dict[str, str] = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "SAMEORIGIN",
        "X-DNS-Prefetch-Control": "off",
        "Referrer-Policy": "no-referrer",
        "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
        "Cross-Origin-Opener-Policy": "same-origin",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response: Response = await call_next(request)
        for name, value in self.HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """按客户端 IP 限流，超限直接返回 429（不进入路由）"""

    def __init__(
        self,
        app: ASGIApp,
        limiter: FixedWindowRateLimiter,
        message: str,
        send_headers: bool = True,
        exempt_paths: Iterable[str] = (),
    ) -> None:
        super().__init__(app)
        self.limiter = limiter
        self.message = message
        self.send_headers = send_headers
        self.exempt_paths = frozenset(exempt_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "OPTIONS" or request.url.path in self.exempt_paths:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        result = self.limiter.hit(client_ip)
        now = self.limiter.now()
        headers: Dict[str, str] = {}
        if self.send_headers:
            headers = {
                "X-RateLimit-Limit": str(result.limit),
                "X-RateLimit-Remaining": str(result.remaining),
                "X-RateLimit-Reset": str(result.retry_after(now)),
            }

        if not result.allowed:
            logger.warning("Rate limit exceeded for %s on %s %s", client_ip, request.method, request.url.path)
            headers["Retry-After"] = str(result.retry_after(now))
            return JSONResponse(
                status_code=429,
                content=fail(self.message, code="TOO_MANY_REQUESTS", trace_id=get_trace_id()),
                headers=headers,
            )

        response: Response = await call_next(request)
        for name, value in headers.items():
            response.headers[name] = value
        return response


class AuditMiddleware(BaseHTTPMiddleware):
    """请求 / 响应审计日志（脱敏后输出）"""

    def __init__(self, app: ASGIApp, excluded_paths: Iterable[str] = ()) -> None:
        super().__init__(app)
        self.excluded_paths = frozenset(excluded_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.excluded_paths:
            return await call_next(request)

        start = time.perf_counter()
        url = str(request.url.path) + (f"?{request.url.query}" if request.url.query else "")
        request_data = await self._request_record(request, url)
        audit_logger.debug("REQUEST: %s %s | Data: %s", request.method, url, audit.dumps(request_data))

        try:
            response: Response = await call_next(request)
        except Exception:
            elapsed = int((time.perf_counter() - start) * 1000)
            record = {**request_data, "statusCode": 500, "responseTime": elapsed}
            audit_logger.error(
                "RESPONSE: %s %s - 500 - %dms | Data: %s", request.method, url, elapsed, audit.dumps(record)
            )
            raise

        response_body: Any = None
        content_type = response.headers.get("content-type", "")
        if content_type.startswith("application/json") or content_type.startswith("text/"):
            raw = b"".join([chunk async for chunk in response.body_iterator])
            response_body = audit.decode_json(raw)
            buffered = Response(content=raw, status_code=response.status_code, background=response.background)
            # raw_headers 保留重复头（多个 Set-Cookie）
            buffered.raw_headers = response.raw_headers
            response = buffered

        elapsed = int((time.perf_counter() - start) * 1000)
        record = {
            **request_data,
            "statusCode": response.status_code,
            "responseTime": elapsed,
            "responseBody": audit.sanitize_response_body(response_body, response.status_code),
            "responseHeaders": audit.sanitize_headers(response.headers),
        }
        audit_logger.log(
            audit.level_for_status(response.status_code),
            "RESPONSE: %s %s - %d - %dms | Data: %s",
            request.method,
            url,
            response.status_code,
            elapsed,
            audit.dumps(record),
        )
        return response

    async def _request_record(self, request: Request, url: str) -> Dict[str, Any]:
        body: Optional[Any] = None
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            body = audit.decode_json(await request.body())
        return {
            "traceId": get_trace_id(),
            "method": request.method,
            "url": url,
            "ip": request.client.host if request.client else "unknown",
            "userAgent": request.headers.get("user-agent"),
            "headers": audit.sanitize_headers(request.headers),
            "body": audit.sanitize_body(body),
            "query": dict(request.query_params),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


def register_middlewares(app: FastAPI, settings: Settings) -> None:
    """请求进入顺序：CORS -> trace -> 安全头 -> 限流 -> 审计 -> 路由

    trace 必须是最外层的 BaseHTTPMiddleware：它的 dispatch 与全局 500 处理在同一个 task 里，
    未捕获异常的日志才能带上 trace_id
    """

    health_paths = {"/health", f"{settings.API_PATH.rstrip('/')}/health"}

    logger.debug("Registering audit middleware")
    app.add_middleware(AuditMiddleware, excluded_paths=health_paths)

    if settings.RATE_LIMIT_ENABLED:
        logger.debug(
            "Registering rate limit middleware: %s requests / %sms",
            settings.RATE_LIMIT_MAX_REQUESTS,
            settings.RATE_LIMIT_WINDOW_MS,
        )
        app.add_middleware(
            RateLimitMiddleware,
            limiter=FixedWindowRateLimiter(
                max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
                window_seconds=settings.RATE_LIMIT_WINDOW_MS / 1000,
            ),
            message=settings.RATE_LIMIT_MESSAGE,
            send_headers=settings.RATE_LIMIT_HEADERS,
            exempt_paths=health_paths,
        )

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(TraceIdMiddleware)

    origins = settings.cors_origins
    logger.debug("CORS allowed origins: %s", ", ".join(origins))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", TRACE_HEADER, REQUEST_ID_HEADER],
        expose_headers=[TRACE_HEADER, "X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
    )
    logger.info("Middlewares registered")
