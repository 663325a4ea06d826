# app/modules/sales/service.py
from sqlalchemy.orm import Session
from typing import Optional
import logging
import math

from .repository import SalesRepository
from .schemas import (
    SaleCreateRequest, SaleResponse, SaleListResponse, SaleDeleteResponse,
    SaleInfo, SaleItemInfo
)
from app.config.settings import settings
from app.core.exceptions import (
    EmptySaleError, InvalidQuantityError, SaleNotFoundError,
    SaleItemNotFoundError, SaleAlreadyCancelledError
)
from app.shared.database.models import Sale, SaleItem
from app.shared.services.pricing_service import MAX_QUANTITY_PER_PRODUCT


logger = logging.getLogger(__name__)

class SalesService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = SalesRepository(db)
        self.max_quantity = MAX_QUANTITY_PER_PRODUCT

    async def create_sale(self, sale_data: SaleCreateRequest) -> SaleResponse:
        """
        Crear venta completa.

        Responsabilidades:
        - Validar que haya items y cantidades dentro del rango
        - Delegar transacción (stock + items + número) al repository
        - Construir respuesta
        """
        if not sale_data.items:
            raise EmptySaleError()

        for item in sale_data.items:
            self._validate_quantity(item.quantity)

        logger.info(
            f"Iniciando venta - Cliente: {sale_data.client}, "
            f"Sucursal: {sale_data.branch}, Items: {len(sale_data.items)}"
        )

        sale = self.repository.create_sale_atomic(
            sale_data={
                "client": sale_data.client,
                "branch": sale_data.branch,
                "sale_date": sale_data.sale_date,
                "items": [
                    {"product_id": item.product_id, "quantity": item.quantity}
                    for item in sale_data.items
                ]
            },
            sale_number_width=settings.sale_number_width
        )

        logger.info(f"SaleCreated: venta {sale.sale_number} total {sale.total_value}")
        return self._build_response(sale, "Sale created successfully")

    async def get_sale(self, sale_id: int) -> SaleResponse:
        sale = self._get_existing_sale(sale_id)
        return self._build_response(sale, "Sale retrieved successfully")

    async def list_sales(
        self,
        page: int = 1,
        size: int = 20,
        client: Optional[str] = None,
        branch: Optional[str] = None,
        is_cancelled: Optional[bool] = None
    ) -> SaleListResponse:
        sales, total = self.repository.get_sales(page, size, client, branch, is_cancelled)
        return SaleListResponse(
            success=True,
            message="Sales retrieved successfully",
            items=[self._to_info(sale) for sale in sales],
            total=total,
            page=page,
            size=size,
            pages=math.ceil(total / size) if total else 0
        )

    async def update_item_quantity(self, sale_id: int, item_id: int, quantity: int) -> SaleResponse:
        """
        Cancelación parcial: ajustar la cantidad de un item.

        - quantity = 0: se elimina el item y se devuelve todo su stock
        - quantity 1-20: se recalcula precio y se reconcilia el stock
        """
        sale = self._get_open_sale(sale_id)
        sale_item = self._get_sale_item(sale, item_id)

        if quantity == 0:
            removed_quantity = sale_item.quantity
            sale = self.repository.remove_item_atomic(sale, sale_item)
            logger.info(
                f"ItemCancelled: item {item_id} eliminado de la venta {sale.sale_number} "
                f"({removed_quantity} unidades devueltas)"
            )
            return self._build_response(sale, "Sale item removed successfully")

        self._validate_quantity(quantity)

        previous_quantity = sale_item.quantity
        sale = self.repository.update_item_quantity_atomic(sale, sale_item, quantity)
        logger.info(
            f"ItemQuantityChanged: item {item_id} de la venta {sale.sale_number} "
            f"{previous_quantity} -> {quantity}"
        )
        return self._build_response(sale, "Sale item quantity updated successfully")

    async def delete_sale_item(self, sale_id: int, item_id: int) -> SaleResponse:
        """Eliminar un item; se devuelve su stock igual que con cantidad 0"""
        sale = self._get_open_sale(sale_id)
        sale_item = self._get_sale_item(sale, item_id)

        sale = self.repository.remove_item_atomic(sale, sale_item)
        logger.info(f"ItemDeleted: item {item_id} eliminado de la venta {sale.sale_number}")
        return self._build_response(sale, "Sale item deleted successfully")

    async def cancel_sale(self, sale_id: int) -> SaleResponse:
        """Cancelar venta: marca cancelada y devuelve stock de cada item"""
        sale = self._get_open_sale(sale_id)

        sale = self.repository.cancel_sale_atomic(sale)
        logger.info(f"SaleCancelled: venta {sale.sale_number} cancelada, stock restaurado")
        return self._build_response(sale, "Sale cancelled successfully")

    async def delete_sale(self, sale_id: int) -> SaleDeleteResponse:
        """Eliminar venta e items. A diferencia de cancelar, NO devuelve stock."""
        sale = self._get_existing_sale(sale_id)
        sale_number = sale.sale_number

        self.repository.delete_sale(sale)
        logger.info(f"SaleDeleted: venta {sale_number} (id {sale_id}) eliminada")

        return SaleDeleteResponse(
            success=True,
            message="Sale deleted successfully",
            sale_id=sale_id,
            sale_number=sale_number,
            stock_restored=False
        )

    # MÉTODOS PRIVADOS HELPERS

    def _validate_quantity(self, quantity: int) -> None:
        if quantity < 1 or quantity > self.max_quantity:
            raise InvalidQuantityError(quantity, self.max_quantity)

    def _get_existing_sale(self, sale_id: int) -> Sale:
        sale = self.repository.get_sale_by_id(sale_id)
        if not sale:
            raise SaleNotFoundError(sale_id)
        return sale

    def _get_open_sale(self, sale_id: int) -> Sale:
        """Venta existente y no cancelada (las canceladas son inmutables)"""
        sale = self.repository.get_sale_by_id(sale_id, for_update=True)
        if not sale:
            raise SaleNotFoundError(sale_id)
        if sale.is_cancelled:
            raise SaleAlreadyCancelledError(sale_id)
        return sale

    def _get_sale_item(self, sale: Sale, item_id: int) -> SaleItem:
        sale_item = sale.find_item(item_id)
        if not sale_item:
            raise SaleItemNotFoundError(sale.id, item_id)
        return sale_item

    def _to_info(self, sale: Sale) -> SaleInfo:
        return SaleInfo(
            id=sale.id,
            sale_number=sale.sale_number,
            sale_date=sale.sale_date,
            client=sale.client,
            branch=sale.branch,
            is_cancelled=sale.is_cancelled,
            status=sale.status,
            total_value=sale.total_value,
            items_count=len(sale.items),
            items=[
                SaleItemInfo(
                    id=item.id,
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    discount=item.discount,
                    total_value=item.total_value
                )
                for item in sale.items
            ],
            created_at=sale.created_at,
            updated_at=sale.updated_at
        )

    def _build_response(self, sale: Sale, message: str) -> SaleResponse:
        """Construir respuesta estandarizada"""
        return SaleResponse(
            success=True,
            message=message,
            sale=self._to_info(sale)
        )
