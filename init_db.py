# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import logging

from app.common.logging import setup_logging
from app.infra.config import settings
from app.infra.db import init_db

logger = logging.getLogger("init_db")


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL, log_path=settings.LOG_PATH, log_name=settings.LOG_NAME)
    logger.info("Creating tables...")
    init_db()
    logger.info("Done.")
