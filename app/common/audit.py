# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""审计日志：请求 / 响应脱敏 + 按状态码选择日志级别"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Mapping

REDACTED = "[REDACTED]"
LARGE_RESPONSE_LIMIT = 1000

SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-api-key", "x-auth-token"})
SENSITIVE_BODY_FIELDS = ("password", "token", "secret", "key", "pin", "cvv", "newPassword")
SENSITIVE_RESPONSE_FIELDS = ("password", "token", "secret", "key", "newPassword")


def sanitize_headers(headers: Mapping[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    for name, value in headers.items():
        sanitized[name] = REDACTED if name.lower() in SENSITIVE_HEADERS and value else value
    return sanitized


def _redact_fields(body: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    sanitized = dict(body)
    for field in fields:
        if sanitized.get(field):
            sanitized[field] = REDACTED
    return sanitized


def sanitize_body(body: Any) -> Any:
    """只处理顶层字段；非 dict 原样返回"""
    if not body or not isinstance(body, dict):
        return body
    return _redact_fields(body, SENSITIVE_BODY_FIELDS)


def sanitize_response_body(body: Any, status_code: int) -> Any:
    # 错误响应保留原文，方便排查
    if status_code >= 400:
        return body
    if isinstance(body, str) and len(body) > LARGE_RESPONSE_LIMIT:
        return f"[LARGE_RESPONSE: {len(body)} characters]"
    if isinstance(body, dict):
        return _redact_fields(body, SENSITIVE_RESPONSE_FIELDS)
    return body


def level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    if status_code >= 300:
        return logging.INFO
    return logging.DEBUG


def decode_json(raw: bytes) -> Any:
    """body 解析失败时退回原始文本"""
    if not raw:
        return None
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        return text


def dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, default=str)
