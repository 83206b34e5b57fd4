# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import contextvars
import uuid
from contextvars import ContextVar
from typing import Any, Callable, TypeVar

T = TypeVar("T")

_trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="-")


def new_trace_id() -> str:
    return str(uuid.uuid4())


def set_trace_id(trace_id: str) -> contextvars.Token:
    return _trace_id_ctx.set(trace_id or "-")


def reset_trace_id(token: contextvars.Token) -> None:
    _trace_id_ctx.reset(token)


def get_trace_id() -> str:
    return _trace_id_ctx.get() or "-"


def run_with_trace(trace_id: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """在独立的 context 中执行 fn，trace_id 不会泄漏到调用方"""
    ctx = contextvars.copy_context()

    def _run() -> T:
        set_trace_id(trace_id)
        return fn(*args, **kwargs)

    return ctx.run(_run)
