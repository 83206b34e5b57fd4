# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.common.errors import ConflictError, NotFoundError
from app.domain import models, schemas

logger = logging.getLogger(__name__)


class UserUsecase:
    """用户 CRUD；email 全局唯一（入库前已统一小写）"""

    def get_user_by_email(self, db: Session, *, email: str) -> schemas.UserOut:
        logger.debug("Looking up user by email: %s", email)
        user = self._find_by_email(db, email)
        if user is None:
            raise NotFoundError(code="USER_NOT_FOUND", message="User not found")
        return schemas.UserOut.model_validate(user)

    def create_user(self, db: Session, *, req: schemas.UserCreate) -> schemas.UserOut:
        logger.debug("Creating user with email: %s", req.email)
        if self._find_by_email(db, req.email) is not None:
            raise ConflictError(code="EMAIL_ALREADY_EXISTS", message="Email already exists")

        user = models.User(email=req.email, name=req.name)
        db.add(user)
        self._commit_unique(db)
        db.refresh(user)

        logger.info("User created: %s", user.id)
        return schemas.UserOut.model_validate(user)

    def get_user_by_id(self, db: Session, *, user_id: str) -> schemas.UserOut:
        logger.debug("Looking up user by id: %s", user_id)
        return schemas.UserOut.model_validate(self._get_or_404(db, user_id))

    def list_users(self, db: Session) -> List[schemas.UserOut]:
        logger.debug("Listing users")
        stmt = select(models.User).order_by(models.User.created_at.desc(), models.User.id.desc())
        return [schemas.UserOut.model_validate(u) for u in db.scalars(stmt).all()]

    def update_user(self, db: Session, *, user_id: str, req: schemas.UserUpdate) -> schemas.UserOut:
        logger.debug("Updating user: %s", user_id)
        user = self._get_or_404(db, user_id)

        if req.email is not None and req.email != user.email:
            other = self._find_by_email(db, req.email)
            if other is not None and other.id != user.id:
                raise ConflictError(code="EMAIL_ALREADY_EXISTS", message="Email already exists")
            user.email = req.email
        if req.name is not None:
            user.name = req.name

        self._commit_unique(db)
        db.refresh(user)

        logger.info("User updated: %s", user_id)
        return schemas.UserOut.model_validate(user)

    def delete_user(self, db: Session, *, user_id: str) -> None:
        logger.debug("Deleting user: %s", user_id)
        user = self._get_or_404(db, user_id)
        db.delete(user)
        db.commit()
        logger.info("User deleted: %s", user_id)

    @staticmethod
    def _find_by_email(db: Session, email: str) -> models.User | None:
        stmt = select(models.User).where(models.User.email == email)
        return db.scalars(stmt).first()

    @staticmethod
    def _get_or_404(db: Session, user_id: str) -> models.User:
        user = db.get(models.User, user_id)
        if user is None:
            raise NotFoundError(code="USER_NOT_FOUND", message="User not found")
        return user

    @staticmethod
    def _commit_unique(db: Session) -> None:
        # 并发请求可能同时通过上面的检查，唯一索引兜底
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ConflictError(code="EMAIL_ALREADY_EXISTS", message="Email already exists") from e
