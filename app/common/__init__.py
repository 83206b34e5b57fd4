# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""通用基础设施（错误/日志/trace/审计 等）

约定：
- Router 不写业务逻辑：业务错误统一通过 AppError 抛出，由全局异常处理转为标准响应
- 所有响应统一为 {success, data, message} 信封
- trace_id 通过 middleware 注入，并写入日志，便于线上排障
- 审计日志写入前先脱敏（header / body 中的敏感字段）
"""

from __future__ import annotations
