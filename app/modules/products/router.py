# app/modules/products/router.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from .service import ProductsService
from .schemas import (
    ProductCreateRequest, ProductUpdateRequest,
    ProductResponse, ProductBatchResponse, ProductListResponse, ProductDeleteResponse
)

router = APIRouter()

@router.get("/health")
async def products_health():
    """Health check del módulo de productos"""
    return {
        "service": "products",
        "status": "healthy",
        "version": "1.0.0",
        "features": [
            "Catálogo de productos",
            "Creación en lote",
            "Actualización parcial",
            "Control de stock"
        ]
    }

@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(
    product_data: ProductCreateRequest,
    db: Session = Depends(get_db)
):
    """Crear un producto en el catálogo"""
    service = ProductsService(db)
    return await service.create_product(product_data)

@router.post("/batch", response_model=ProductBatchResponse, status_code=201)
async def create_products_batch(
    products_data: List[ProductCreateRequest],
    db: Session = Depends(get_db)
):
    """
    Crear varios productos en una sola operación

    **Todo o nada:** si uno falla no se guarda ninguno.
    """
    service = ProductsService(db)
    return await service.create_products_batch(products_data)

@router.get("", response_model=ProductListResponse)
async def list_products(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    category: Optional[str] = Query(None, max_length=100),
    db: Session = Depends(get_db)
):
    """Listar productos paginados, opcionalmente por categoría"""
    service = ProductsService(db)
    return await service.list_products(page=page, size=size, category=category)

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    """Obtener un producto por ID"""
    service = ProductsService(db)
    return await service.get_product(product_id)

@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    changes: ProductUpdateRequest,
    db: Session = Depends(get_db)
):
    """Actualizar parcialmente un producto"""
    service = ProductsService(db)
    return await service.update_product(product_id, changes)

@router.delete("/{product_id}", response_model=ProductDeleteResponse)
async def delete_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    """Eliminar un producto del catálogo"""
    service = ProductsService(db)
    return await service.delete_product(product_id)
