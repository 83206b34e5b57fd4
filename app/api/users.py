# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_user_usecase, valid_email_path
from app.application.user.usecase import UserUsecase
from app.common.responses import ApiResponse
from app.domain import schemas


router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=201, response_model=ApiResponse[schemas.UserOut])
def create_user(
    req: schemas.UserCreate,
    db: Session = Depends(get_db),
    uc: UserUsecase = Depends(get_user_usecase),
):
    user = uc.create_user(db, req=req)
    return ApiResponse(data=user, message="User created successfully")


@router.get("", response_model=ApiResponse[List[schemas.UserOut]])
def list_users(
    db: Session = Depends(get_db),
    uc: UserUsecase = Depends(get_user_usecase),
):
    return ApiResponse(data=uc.list_users(db), message="Users retrieved successfully")


@router.get("/email/{email}", response_model=ApiResponse[schemas.UserOut])
def get_user_by_email(
    email: str = Depends(valid_email_path),
    db: Session = Depends(get_db),
    uc: UserUsecase = Depends(get_user_usecase),
):
    user = uc.get_user_by_email(db, email=email)
    return ApiResponse(data=user, message="User retrieved successfully")


@router.get("/{user_id}", response_model=ApiResponse[schemas.UserOut])
def get_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    uc: UserUsecase = Depends(get_user_usecase),
):
    user = uc.get_user_by_id(db, user_id=str(user_id))
    return ApiResponse(data=user, message="User retrieved successfully")


@router.put("/{user_id}", response_model=ApiResponse[schemas.UserOut])
def update_user(
    user_id: uuid.UUID,
    req: schemas.UserUpdate,
    db: Session = Depends(get_db),
    uc: UserUsecase = Depends(get_user_usecase),
):
    user = uc.update_user(db, user_id=str(user_id), req=req)
    return ApiResponse(data=user, message="User updated successfully")


@router.delete("/{user_id}", response_model=ApiResponse[None])
def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    uc: UserUsecase = Depends(get_user_usecase),
):
    uc.delete_user(db, user_id=str(user_id))
    return ApiResponse(message="User deleted successfully")
