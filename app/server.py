# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import argparse
import logging

import uvicorn

from app.common.logging import log_exception_hooks, setup_logging
from app.infra.config import settings

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description=f"Run the {settings.APP_NAME} HTTP server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=settings.PORT)
    parser.add_argument("--reload", action="store_true", help="auto reload on code change (dev only)")
    args = parser.parse_args()

    setup_logging(settings.LOG_LEVEL, log_path=settings.LOG_PATH, log_name=settings.LOG_NAME)
    log_exception_hooks()

    logger.info("HTTP server starting on %s:%s (env=%s)", args.host, args.port, settings.ENV)
    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
