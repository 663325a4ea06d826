from typing import List, Dict, Any, Optional
from sqlalchemy.orm import Session
import logging

from app.core.exceptions import (
    ProductNotFoundError, InsufficientStockError, StockInconsistencyError
)
from app.shared.database.models import Product

logger = logging.getLogger(__name__)

class InventoryService:
    """Libro de stock de productos: reservar, consumir y restaurar unidades"""

    @staticmethod
    def get_product_for_update(db: Session, product_id: int) -> Optional[Product]:
        """Obtener producto con bloqueo pesimista (SELECT FOR UPDATE donde aplique)"""
        return db.query(Product).filter(
            Product.id == product_id
        ).with_for_update().first()

    @staticmethod
    def validate_and_reserve_stock(
        db: Session,
        items: List[Dict[str, Any]]
    ) -> Dict[int, Product]:
        """
        Validar y reservar stock con bloqueo pesimista.

        Las líneas repetidas del mismo producto se suman antes de comparar
        contra el stock disponible. No modifica nada: si un producto falta o
        no alcanza, se lanza el error antes de tocar el inventario.

        Args:
            db: Sesión de base de datos
            items: Items a validar [{product_id, quantity}]

        Returns:
            Dict[product_id, Product]: Productos bloqueados

        Raises:
            ProductNotFoundError: Si el producto no existe
            InsufficientStockError: Si el stock no alcanza
        """
        requested: Dict[int, int] = {}
        for item in items:
            requested[item['product_id']] = requested.get(item['product_id'], 0) + item['quantity']

        reserved: Dict[int, Product] = {}
        for product_id, quantity in requested.items():
            product = InventoryService.get_product_for_update(db, product_id)
            if not product:
                raise ProductNotFoundError(product_id)

            if product.stock < quantity:
                raise InsufficientStockError(product.title, product.stock, quantity)

            reserved[product_id] = product

        return reserved

    @staticmethod
    def consume_stock(product: Product, quantity: int) -> int:
        """Descontar unidades de un producto ya bloqueado"""
        if product.stock < quantity:
            raise InsufficientStockError(product.title, product.stock, quantity)

        quantity_before = product.stock
        product.stock = quantity_before - quantity
        logger.debug(f"Stock producto {product.id}: {quantity_before} -> {product.stock}")
        return product.stock

    @staticmethod
    def restore_stock(
        db: Session,
        product_id: int,
        quantity: int,
        strict: bool = False,
        sale_id: Optional[int] = None
    ) -> Optional[Product]:
        """
        Devolver unidades al stock de un producto.

        Con strict=True un producto inexistente es una inconsistencia fatal
        para la operación; si no, se registra y se continúa.
        """
        product = InventoryService.get_product_for_update(db, product_id)
        if not product:
            if strict:
                raise StockInconsistencyError(product_id, sale_id)
            logger.warning(
                f"Producto {product_id} no existe; no se restauran {quantity} unidades"
            )
            return None

        quantity_before = product.stock
        product.stock = quantity_before + quantity
        logger.debug(f"Stock producto {product.id}: {quantity_before} -> {product.stock}")
        return product
