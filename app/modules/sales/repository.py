# app/modules/sales/repository.py
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Dict, Any, List, Optional, Tuple
from datetime import datetime
import logging

from app.core.exceptions import (
    DomainError, PersistenceError, ProductNotFoundError, SaleNumberConflictError
)
from app.shared.database.models import Sale, SaleItem
from app.shared.services.inventory_service import InventoryService
from app.shared.services.pricing_service import apply_pricing, recalculate_sale_total

logger = logging.getLogger(__name__)

class SalesRepository:
    def __init__(self, db: Session):
        self.db = db
        self.inventory_service = InventoryService()

    # ==================== CONSULTAS ====================

    def get_sale_by_id(self, sale_id: int, for_update: bool = False) -> Optional[Sale]:
        """Obtener venta con sus items"""
        query = self.db.query(Sale).options(selectinload(Sale.items)).filter(Sale.id == sale_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get_sales(
        self,
        page: int,
        size: int,
        client: Optional[str] = None,
        branch: Optional[str] = None,
        is_cancelled: Optional[bool] = None
    ) -> Tuple[List[Sale], int]:
        """Listado paginado, más recientes primero"""
        query = self.db.query(Sale)
        if client:
            query = query.filter(Sale.client == client)
        if branch:
            query = query.filter(Sale.branch == branch)
        if is_cancelled is not None:
            query = query.filter(Sale.is_cancelled == is_cancelled)

        total = query.count()
        sales = query.options(selectinload(Sale.items)).order_by(
            Sale.sale_date.desc(), Sale.id.desc()
        ).offset((page - 1) * size).limit(size).all()
        return sales, total

    def get_last_sale(self) -> Optional[Sale]:
        """Última venta persistida (por orden de inserción)"""
        return self.db.query(Sale).order_by(Sale.id.desc()).first()

    def get_next_sale_number(self, width: int = 4) -> str:
        """
        Siguiente número de venta: último + 1, con ceros a la izquierda.

        Lectura + incremento sin bloqueo; la restricción UNIQUE de
        sale_number rechaza un duplicado producido por ventas concurrentes.
        """
        last_sale = self.get_last_sale()
        last_number = int(last_sale.sale_number) if last_sale else 0
        return f"{last_number + 1:0{width}d}"

    # ==================== ESCRITURAS ATÓMICAS ====================

    def create_sale_atomic(
        self,
        sale_data: Dict[str, Any],
        sale_number_width: int = 4
    ) -> Sale:
        """
        Crear venta con actualización de inventario en transacción atómica.

        Proceso:
        1. Validar y reservar stock (bloqueo pesimista)
        2. Asignar número de venta
        3. Crear SaleItems con precio y nombre del producto en BD
        4. Descontar stock
        5. Calcular total
        6. Commit único

        Raises:
            ProductNotFoundError / InsufficientStockError: sin cambios en stock
            SaleNumberConflictError: si otra venta tomó el mismo número
        """
        sale_number = None
        try:
            # PASO 1: VALIDAR Y RESERVAR stock
            reserved_products = self.inventory_service.validate_and_reserve_stock(
                self.db, sale_data['items']
            )

            # PASO 2: NÚMERO DE VENTA
            sale_number = self.get_next_sale_number(sale_number_width)

            sale = Sale(
                sale_number=sale_number,
                sale_date=sale_data.get('sale_date') or datetime.now(),
                client=sale_data['client'],
                branch=sale_data['branch'],
                is_cancelled=False
            )

            # PASO 3 y 4: ITEMS con datos REALES de BD + descuento de stock
            for item_data in sale_data['items']:
                product = reserved_products[item_data['product_id']]
                self.inventory_service.consume_stock(product, item_data['quantity'])

                sale_item = SaleItem(product_id=product.id)
                apply_pricing(sale_item, product.price, item_data['quantity'], product.title)
                sale.items.append(sale_item)

            # PASO 5: TOTAL
            recalculate_sale_total(sale)

            # PASO 6: COMMIT ÚNICO
            self.db.add(sale)
            self.db.commit()
            self.db.refresh(sale)

            logger.info(f"Transacción completada - Venta #{sale.sale_number} (id {sale.id})")
            return sale

        except IntegrityError as e:
            self.db.rollback()
            if sale_number and "sale_number" in str(e.orig):
                raise SaleNumberConflictError(sale_number)
            logger.exception("Error de integridad creando venta")
            raise PersistenceError(f"Failed to create sale: {e.orig}")
        except Exception as e:
            self._rollback_and_raise(e, "create sale")

    def update_item_quantity_atomic(self, sale: Sale, item: SaleItem, new_quantity: int) -> Sale:
        """
        Cambiar la cantidad de un item y reconciliar stock.

        Si baja la cantidad se devuelve la diferencia al producto; si sube se
        descuenta la diferencia (con validación de stock disponible).
        """
        try:
            difference = item.quantity - new_quantity

            if difference > 0:
                self.inventory_service.restore_stock(
                    self.db, item.product_id, difference, sale_id=sale.id
                )
            elif difference < 0:
                product = self.inventory_service.get_product_for_update(self.db, item.product_id)
                if not product:
                    raise ProductNotFoundError(item.product_id)
                self.inventory_service.consume_stock(product, -difference)

            apply_pricing(item, item.unit_price, new_quantity)
            recalculate_sale_total(sale)

            self.db.commit()
            self.db.refresh(sale)
            return sale

        except Exception as e:
            self._rollback_and_raise(e, f"update item {item.id}")

    def remove_item_atomic(self, sale: Sale, item: SaleItem) -> Sale:
        """Quitar item de la venta, devolver su stock y recalcular total"""
        try:
            self.inventory_service.restore_stock(
                self.db, item.product_id, item.quantity, sale_id=sale.id
            )

            # delete-orphan elimina la fila del item en el flush
            sale.items.remove(item)
            recalculate_sale_total(sale)

            self.db.commit()
            self.db.refresh(sale)
            return sale

        except Exception as e:
            self._rollback_and_raise(e, f"remove item {item.id}")

    def cancel_sale_atomic(self, sale: Sale) -> Sale:
        """
        Marcar venta como cancelada y devolver el stock de todos sus items.

        Un producto inexistente aborta toda la cancelación.
        """
        try:
            sale.is_cancelled = True

            for item in sale.items:
                self.inventory_service.restore_stock(
                    self.db, item.product_id, item.quantity, strict=True, sale_id=sale.id
                )

            self.db.commit()
            self.db.refresh(sale)
            return sale

        except Exception as e:
            self._rollback_and_raise(e, f"cancel sale {sale.id}")

    def delete_sale(self, sale: Sale) -> bool:
        """Eliminar venta e items (cascade). NO devuelve stock."""
        try:
            self.db.delete(sale)
            self.db.commit()
            return True
        except Exception as e:
            self._rollback_and_raise(e, f"delete sale {sale.id}")

    # MÉTODOS PRIVADOS HELPERS

    def _rollback_and_raise(self, error: Exception, action: str):
        self.db.rollback()

        if isinstance(error, DomainError):
            logger.warning(f"Error de negocio ({action}): {error.message}")
            raise error
        if isinstance(error, SQLAlchemyError):
            logger.exception(f"Error de base de datos ({action})")
            raise PersistenceError(f"Failed to {action}.") from error

        logger.exception(f"Error inesperado ({action})")
        raise error
