# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_product_usecase
from app.application.product.usecase import ProductUsecase
from app.common.responses import ApiResponse, PagedResponse
from app.domain import schemas


router = APIRouter(prefix="/products", tags=["products"])


@router.post("", status_code=201, response_model=ApiResponse[schemas.ProductOut])
def create_product(
    req: schemas.ProductCreate,
    db: Session = Depends(get_db),
    uc: ProductUsecase = Depends(get_product_usecase),
):
    product = uc.create_product(db, req=req)
    return ApiResponse(data=product, message="Product created successfully")


@router.post("/bulk", status_code=201, response_model=ApiResponse[List[schemas.ProductOut]])
def create_products(
    req: schemas.ProductBulkCreate,
    db: Session = Depends(get_db),
    uc: ProductUsecase = Depends(get_product_usecase),
):
    products = uc.create_products(db, items=req.products)
    return ApiResponse(data=products, message="Products created successfully")


@router.get("", response_model=PagedResponse[List[schemas.ProductOut], schemas.PageMeta])
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    name: Optional[str] = Query(None, max_length=255),
    db: Session = Depends(get_db),
    uc: ProductUsecase = Depends(get_product_usecase),
):
    result = uc.list_products(db, page=page, limit=limit, name=name)
    return PagedResponse(data=result.items, meta=result.meta, message="Products retrieved successfully")


@router.get("/{product_id}", response_model=ApiResponse[schemas.ProductOut])
def get_product(
    product_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    uc: ProductUsecase = Depends(get_product_usecase),
):
    product = uc.get_product(db, product_id=product_id)
    return ApiResponse(data=product, message="Product retrieved successfully")


@router.put("/{product_id}", response_model=ApiResponse[schemas.ProductOut])
def update_product(
    req: schemas.ProductUpdate,
    product_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    uc: ProductUsecase = Depends(get_product_usecase),
):
    product = uc.update_product(db, product_id=product_id, req=req)
    return ApiResponse(data=product, message="Product updated successfully")


@router.delete("/{product_id}", response_model=ApiResponse[None])
def delete_product(
    product_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    uc: ProductUsecase = Depends(get_product_usecase),
):
    uc.delete_product(db, product_id=product_id)
    return ApiResponse(message="Product deleted successfully")
