# app/modules/products/service.py
from typing import List, Optional
from sqlalchemy.orm import Session
import logging
import math

from .repository import ProductsRepository
from .schemas import (
    ProductCreateRequest, ProductUpdateRequest, ProductInfo, Rating,
    ProductResponse, ProductBatchResponse, ProductListResponse, ProductDeleteResponse
)
from app.core.exceptions import ProductNotFoundError, BusinessRuleError
from app.shared.database.models import Product

logger = logging.getLogger(__name__)

class ProductsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ProductsRepository(db)

    async def create_product(self, product_data: ProductCreateRequest) -> ProductResponse:
        product = self.repository.create_product(product_data.dict())
        logger.info(f"Producto {product.id} creado: '{product.title}' (stock {product.stock})")

        return ProductResponse(
            success=True,
            message="Product created successfully",
            product=self._to_info(product)
        )

    async def create_products_batch(self, products_data: List[ProductCreateRequest]) -> ProductBatchResponse:
        products = self.repository.create_products_batch([p.dict() for p in products_data])
        logger.info(f"{len(products)} productos creados en lote")

        return ProductBatchResponse(
            success=True,
            message=f"{len(products)} products created successfully",
            products=[self._to_info(p) for p in products],
            count=len(products)
        )

    async def get_product(self, product_id: int) -> ProductResponse:
        product = self._get_existing_product(product_id)
        return ProductResponse(
            success=True,
            message="Product retrieved successfully",
            product=self._to_info(product)
        )

    async def list_products(
        self,
        page: int = 1,
        size: int = 20,
        category: Optional[str] = None
    ) -> ProductListResponse:
        products, total = self.repository.get_products(page, size, category)
        return ProductListResponse(
            success=True,
            message="Products retrieved successfully",
            items=[self._to_info(p) for p in products],
            total=total,
            page=page,
            size=size,
            pages=math.ceil(total / size) if total else 0
        )

    async def update_product(self, product_id: int, changes: ProductUpdateRequest) -> ProductResponse:
        """Actualización parcial: los campos no enviados quedan igual"""
        product = self._get_existing_product(product_id)

        updates = changes.dict(exclude_unset=True)
        # None explícito en un campo obligatorio se ignora
        updates = {k: v for k, v in updates.items() if v is not None}

        product = self.repository.update_product(product, updates)
        logger.info(f"Producto {product.id} actualizado: {sorted(updates)}")

        return ProductResponse(
            success=True,
            message="Product updated successfully",
            product=self._to_info(product)
        )

    async def update_stock(self, product_id: int, quantity: int) -> bool:
        if quantity < 0:
            raise BusinessRuleError("Stock must be greater than or equal to 0.", {"stock": quantity})

        updated = self.repository.update_stock(product_id, quantity)
        if not updated:
            raise ProductNotFoundError(product_id)
        return updated

    async def delete_product(self, product_id: int) -> ProductDeleteResponse:
        deleted = self.repository.delete_product(product_id)
        if not deleted:
            raise ProductNotFoundError(product_id)

        logger.info(f"Producto {product_id} eliminado")
        return ProductDeleteResponse(
            success=True,
            message="Product deleted successfully",
            product_id=product_id
        )

    # MÉTODOS PRIVADOS HELPERS

    def _get_existing_product(self, product_id: int) -> Product:
        product = self.repository.get_product_by_id(product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        return product

    def _to_info(self, product: Product) -> ProductInfo:
        return ProductInfo(
            id=product.id,
            title=product.title,
            price=product.price,
            description=product.description,
            category=product.category,
            stock=product.stock,
            image=product.image,
            rating=Rating(rate=product.rating_rate, count=product.rating_count),
            created_at=product.created_at,
            updated_at=product.updated_at
        )
