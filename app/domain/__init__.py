# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""
领域层：

- models: ORM 实体（User / Product）
- schemas: Pydantic 请求/响应模型（DTO + 字段校验）
- messages: 校验提示语
"""
from . import messages, models, schemas  # noqa: F401

__all__ = ["messages", "models", "schemas"]
