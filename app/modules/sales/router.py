# app/modules/sales/router.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from .service import SalesService
from .schemas import (
    SaleCreateRequest, ItemQuantityUpdateRequest,
    SaleResponse, SaleListResponse, SaleDeleteResponse
)

router = APIRouter()

@router.get("/health")
async def sales_health():
    """Health check del módulo de ventas"""
    return {
        "service": "sales",
        "status": "healthy",
        "version": "1.0.0",
        "features": [
            "Registro de ventas con descuento por cantidad",
            "Actualización automática de inventario",
            "Cancelación parcial por item",
            "Cancelación total con devolución de stock",
            "Numeración secuencial de ventas"
        ],
        "discount_tiers": {
            "1-3": "0%",
            "4-9": "10%",
            "10-20": "20%"
        }
    }

@router.post("", response_model=SaleResponse, status_code=201)
async def create_sale(
    sale_data: SaleCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Registrar venta

    **Incluye:**
    - Precio unitario y nombre tomados del producto en BD
    - Descuento por cantidad (4-9: 10%, 10-20: 20%)
    - Descuento de stock de cada producto
    - Número de venta secuencial (0001, 0002, ...)
    """
    service = SalesService(db)
    return await service.create_sale(sale_data)

@router.get("", response_model=SaleListResponse)
async def list_sales(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    client: Optional[str] = Query(None, max_length=100),
    branch: Optional[str] = Query(None, max_length=100),
    is_cancelled: Optional[bool] = Query(None),
    db: Session = Depends(get_db)
):
    """Listar ventas (más recientes primero)"""
    service = SalesService(db)
    return await service.list_sales(
        page=page, size=size, client=client, branch=branch, is_cancelled=is_cancelled
    )

@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(
    sale_id: int,
    db: Session = Depends(get_db)
):
    """Obtener venta con sus items"""
    service = SalesService(db)
    return await service.get_sale(sale_id)

@router.put("/{sale_id}/cancel", response_model=SaleResponse)
async def cancel_sale(
    sale_id: int,
    db: Session = Depends(get_db)
):
    """
    Cancelar venta

    Marca la venta como cancelada y devuelve al stock las unidades de cada
    item. Una venta cancelada no admite más cambios.
    """
    service = SalesService(db)
    return await service.cancel_sale(sale_id)

@router.put("/{sale_id}/items/{item_id}/partial-cancellation", response_model=SaleResponse)
async def update_item_quantity(
    sale_id: int,
    item_id: int,
    request: ItemQuantityUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Cancelación parcial: cambiar cantidad de un item

    - **quantity = 0**: elimina el item y devuelve su stock
    - **quantity 1-20**: recalcula descuento/total y ajusta stock
    """
    service = SalesService(db)
    return await service.update_item_quantity(sale_id, item_id, request.quantity)

@router.delete("/{sale_id}/items/{item_id}", response_model=SaleResponse)
async def delete_sale_item(
    sale_id: int,
    item_id: int,
    db: Session = Depends(get_db)
):
    """Eliminar item de la venta (devuelve su stock)"""
    service = SalesService(db)
    return await service.delete_sale_item(sale_id, item_id)

@router.delete("/{sale_id}", response_model=SaleDeleteResponse)
async def delete_sale(
    sale_id: int,
    db: Session = Depends(get_db)
):
    """Eliminar venta e items. No devuelve stock (usar cancelar para eso)."""
    service = SalesService(db)
    return await service.delete_sale(sale_id)
