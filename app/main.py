# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import APIRouter, FastAPI

from app.api import health as health_api, products as products_api, users as users_api
from app.common.exception_handlers import register_exception_handlers
from app.common.logging import setup_logging
from app.common.middlewares import register_middlewares
from app.infra import db as db_infra
from app.infra.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def _build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting %s (env=%s)", settings.APP_NAME, settings.ENV)
        try:
            db_infra.check_connection()
        except Exception:
            logger.exception("Database connection failed")
            raise
        logger.info("Database connection established")

        if settings.DB_AUTO_CREATE:
            db_infra.init_db()
            logger.info("Database tables ensured")

        yield
        logger.info("Shutting down %s", settings.APP_NAME)

    return lifespan


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL, log_path=settings.LOG_PATH, log_name=settings.LOG_NAME)

    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        lifespan=_build_lifespan(settings),
    )

    # ---------- middlewares / handlers ----------

    register_middlewares(app, settings)
    register_exception_handlers(app)

    # ---------- routes ----------

    app.include_router(health_api.router)

    api = APIRouter(prefix=settings.API_PATH.rstrip("/"))
    api.include_router(users_api.router)
    api.include_router(products_api.router)
    app.include_router(api)
    logger.info("Routes registered under %s", settings.API_PATH)

    return app


app = create_app()
