# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.common.errors import BadRequestError, InternalServerError, NotFoundError
from app.domain import models, schemas

logger = logging.getLogger(__name__)


@dataclass
class ProductPage:
    items: List[schemas.ProductOut]
    meta: schemas.PageMeta


def _check_product(name: Optional[str], stock: Optional[int]) -> None:
    """schema 之外再校验一次，service 也可能被脚本直接调用"""
    if name is not None and not name.strip():
        raise BadRequestError(code="PRODUCT_NAME_EMPTY", message="Product name cannot be empty")
    if stock is not None and (isinstance(stock, bool) or not isinstance(stock, int) or stock < 0):
        raise BadRequestError(code="PRODUCT_STOCK_INVALID", message="Stock must be a non-negative integer")


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProductUsecase:
    def create_product(self, db: Session, *, req: schemas.ProductCreate) -> schemas.ProductOut:
        _check_product(req.name, req.stock)
        product = models.Product(
            name=req.name,
            description=req.description,
            price=req.price,
            stock=req.stock,
        )
        try:
            db.add(product)
            db.commit()
            db.refresh(product)
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to create product")
            raise InternalServerError(message="Internal error while creating the product") from e

        logger.info("Product created: %s", product.id)
        return schemas.ProductOut.model_validate(product)

    def create_products(self, db: Session, *, items: List[schemas.ProductCreate]) -> List[schemas.ProductOut]:
        """批量创建：同一事务，任何一条失败全部回滚"""
        for item in items:
            _check_product(item.name, item.stock)

        products = [
            models.Product(name=i.name, description=i.description, price=i.price, stock=i.stock)
            for i in items
        ]
        try:
            db.add_all(products)
            db.commit()
            for p in products:
                db.refresh(p)
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to create %d products", len(products))
            raise InternalServerError(message="Internal error while creating the products") from e

        logger.info("Products created: %d", len(products))
        return [schemas.ProductOut.model_validate(p) for p in products]

    def list_products(
        self,
        db: Session,
        *,
        page: int = 1,
        limit: int = 10,
        name: Optional[str] = None,
    ) -> ProductPage:
        stmt = select(models.Product)
        count_stmt = select(func.count()).select_from(models.Product)
        if name:
            cond = models.Product.name.ilike(f"%{_escape_like(name.strip())}%", escape="\\")
            stmt = stmt.where(cond)
            count_stmt = count_stmt.where(cond)

        stmt = stmt.order_by(models.Product.id.asc()).offset((page - 1) * limit).limit(limit)
        try:
            rows = list(db.scalars(stmt).all())
            total = int(db.scalar(count_stmt) or 0)
        except SQLAlchemyError as e:
            logger.exception("Failed to list products")
            raise InternalServerError(message="Internal error while fetching the products") from e

        return ProductPage(
            items=[schemas.ProductOut.model_validate(p) for p in rows],
            meta=schemas.PageMeta(
                total=total,
                page=page,
                limit=limit,
                total_pages=math.ceil(total / limit) if limit else 0,
            ),
        )

    def get_product(self, db: Session, *, product_id: int) -> schemas.ProductOut:
        return schemas.ProductOut.model_validate(self._get_or_404(db, product_id))

    def update_product(self, db: Session, *, product_id: int, req: schemas.ProductUpdate) -> schemas.ProductOut:
        product = self._get_or_404(db, product_id)
        _check_product(req.name, req.stock)

        if req.name is not None:
            product.name = req.name
        if req.description is not None:
            product.description = req.description or None
        if req.price is not None:
            product.price = req.price
        if req.stock is not None:
            product.stock = req.stock

        try:
            db.commit()
            db.refresh(product)
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to update product %s", product_id)
            raise InternalServerError(message="Internal error while updating the product") from e

        logger.info("Product updated: %s", product_id)
        return schemas.ProductOut.model_validate(product)

    def delete_product(self, db: Session, *, product_id: int) -> None:
        product = self._get_or_404(db, product_id)
        try:
            db.delete(product)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to delete product %s", product_id)
            raise InternalServerError(message="Internal error while deleting the product") from e
        logger.info("Product deleted: %s", product_id)

    @staticmethod
    def _get_or_404(db: Session, product_id: int) -> models.Product:
        try:
            product = db.get(models.Product, product_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch product %s", product_id)
            raise InternalServerError(message="Internal error while fetching the product") from e
        if product is None:
            raise NotFoundError(code="PRODUCT_NOT_FOUND", message="Product not found")
        return product
