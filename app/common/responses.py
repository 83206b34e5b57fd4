# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")
M = TypeVar("M")


class ApiResponse(BaseModel, Generic[T]):
    """统一响应信封"""
    success: bool = True
    data: Optional[T] = None
    message: str = ""


class PagedResponse(BaseModel, Generic[T, M]):
    """列表信封：data + 分页信息 meta"""
    success: bool = True
    data: Optional[T] = None
    meta: Optional[M] = None
    message: str = ""


def fail(message: str, **extra: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"success": False, "message": message}
    payload.update({k: v for k, v in extra.items() if v is not None})
    return payload
