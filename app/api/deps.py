# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from fastapi import Path
from fastapi.exceptions import RequestValidationError

from app.application.product.usecase import ProductUsecase
from app.application.user.usecase import UserUsecase
from app.domain import schemas
from app.infra.db import get_db  # noqa: F401

_user_uc_singleton = UserUsecase()
_product_uc_singleton = ProductUsecase()


def get_user_usecase() -> UserUsecase:
    return _user_uc_singleton


def get_product_usecase() -> ProductUsecase:
    return _product_uc_singleton


def valid_email_path(email: str = Path(..., max_length=320)) -> str:
    """路径参数 email：trim + 格式校验 + 小写"""
    try:
        return schemas.normalize_email(email)
    except ValueError as e:
        raise RequestValidationError(
            [{"type": "value_error", "loc": ("path", "email"), "msg": str(e), "input": email}]
        ) from e
