# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from app.domain import messages

EMAIL_MAX_LENGTH = 255
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
PRODUCT_NAME_MAX_LENGTH = 255
PRODUCT_DESCRIPTION_MAX_LENGTH = 2000
BULK_MAX_ITEMS = 100


def normalize_email(value: Any, field: str = "email") -> str:
    """trim + 格式校验 + 小写，与入库时的唯一性比较保持一致"""
    if not isinstance(value, str):
        raise ValueError(messages.must_be_string(field))
    value = value.strip()
    if not value:
        raise ValueError(messages.field_required(field))
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(messages.INVALID_EMAIL) from e
    if len(value) > EMAIL_MAX_LENGTH:
        raise ValueError(messages.max_length(field, EMAIL_MAX_LENGTH))
    return value.lower()


def _clean_text(value: Any, field: str, *, min_len: int, max_len: int) -> str:
    if not isinstance(value, str):
        raise ValueError(messages.must_be_string(field))
    value = value.strip()
    if not value:
        raise ValueError(messages.field_empty(field))
    if not min_len <= len(value) <= max_len:
        if min_len <= 1:
            raise ValueError(messages.max_length(field, max_len))
        raise ValueError(messages.length_range(field, min_len, max_len))
    return value


# ---------- User ----------

class UserCreate(BaseModel):
    email: str
    name: str

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v: Any) -> str:
        return normalize_email(v)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return _clean_text(v, "name", min_len=NAME_MIN_LENGTH, max_len=NAME_MAX_LENGTH)


class UserUpdate(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        if isinstance(v, str) and not v.strip():
            raise ValueError(messages.field_empty("email"))
        return normalize_email(v)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return _clean_text(v, "name", min_len=NAME_MIN_LENGTH, max_len=NAME_MAX_LENGTH)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    created_at: datetime
    updated_at: datetime


# ---------- Product ----------

class ProductCreate(BaseModel):
    name: str
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock: StrictInt = Field(0, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return _clean_text(v, "name", min_len=1, max_len=PRODUCT_NAME_MAX_LENGTH)

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError(messages.must_be_string("description"))
        v = v.strip()
        if len(v) > PRODUCT_DESCRIPTION_MAX_LENGTH:
            raise ValueError(messages.max_length("description", PRODUCT_DESCRIPTION_MAX_LENGTH))
        return v or None


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[StrictInt] = Field(None, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return _clean_text(v, "name", min_len=1, max_len=PRODUCT_NAME_MAX_LENGTH)

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError(messages.must_be_string("description"))
        v = v.strip()
        if len(v) > PRODUCT_DESCRIPTION_MAX_LENGTH:
            raise ValueError(messages.max_length("description", PRODUCT_DESCRIPTION_MAX_LENGTH))
        return v


class ProductBulkCreate(BaseModel):
    products: List[ProductCreate] = Field(..., min_length=1, max_length=BULK_MAX_ITEMS)


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    stock: int
    created_at: datetime
    updated_at: datetime


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int
