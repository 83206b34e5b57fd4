# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""校验 / 响应提示语，集中维护"""

from __future__ import annotations

INVALID_UUID = "ID must be a valid UUID"
INVALID_DATA = "Invalid input data"
INVALID_EMAIL = "Email does not have a valid format"
VALIDATION_ERRORS = "Validation errors"
REQUEST_PROCESSING = "Error processing the request"


def field_required(field: str) -> str:
    return f"Field {field} is required"


def field_empty(field: str) -> str:
    return f"Field {field} cannot be empty"


def max_length(field: str, maximum: int) -> str:
    return f"Field {field} cannot exceed {maximum} characters"


def length_range(field: str, minimum: int, maximum: int) -> str:
    return f"Field {field} must be between {minimum} and {maximum} characters"


def must_be_string(field: str) -> str:
    return f"Field {field} must be text"


def must_be_number(field: str) -> str:
    return f"Field {field} must be a number"


def must_be_integer(field: str) -> str:
    return f"Field {field} must be an integer"


def min_value(field: str, minimum: float) -> str:
    return f"Field {field} must be greater than or equal to {minimum}"


def max_value(field: str, maximum: float) -> str:
    return f"Field {field} must be less than or equal to {maximum}"


