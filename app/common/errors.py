# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class AppError(Exception):
    """异常统一：code 给调用方判断，message 给人看，status_code 决定 HTTP 状态码"""
    code: str
    message: str
    status_code: int = 400
    detail: Optional[Any] = None
    is_operational: bool = True

    def __str__(self) -> str:
        return self.message


class BadRequestError(AppError):
    def __init__(self, code: str = "BAD_REQUEST", message: str = "invalid input data", detail: Any = None) -> None:
        super().__init__(code=code, message=message, status_code=400, detail=detail)


class UnauthorizedError(AppError):
    def __init__(self, code: str = "UNAUTHORIZED", message: str = "unauthorized", detail: Any = None) -> None:
        super().__init__(code=code, message=message, status_code=401, detail=detail)


class ForbiddenError(AppError):
    def __init__(self, code: str = "FORBIDDEN", message: str = "forbidden", detail: Any = None) -> None:
        super().__init__(code=code, message=message, status_code=403, detail=detail)


class NotFoundError(AppError):
    def __init__(self, code: str = "NOT_FOUND", message: str = "resource not found", detail: Any = None) -> None:
        super().__init__(code=code, message=message, status_code=404, detail=detail)


class ConflictError(AppError):
    def __init__(self, code: str = "CONFLICT", message: str = "conflict in operation", detail: Any = None) -> None:
        super().__init__(code=code, message=message, status_code=409, detail=detail)


class TooManyRequestsError(AppError):
    def __init__(self, code: str = "TOO_MANY_REQUESTS", message: str = "too many requests", detail: Any = None) -> None:
        super().__init__(code=code, message=message, status_code=429, detail=detail)


class InternalServerError(AppError):
    def __init__(
        self,
        code: str = "INTERNAL_ERROR",
        message: str = "internal server error",
        detail: Any = None,
        is_operational: bool = False,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=500,
            detail=detail,
            is_operational=is_operational,
        )
