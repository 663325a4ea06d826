# app/modules/sales/__init__.py
"""
Módulo de Ventas - Ciclo de vida de la venta

Este módulo maneja el ciclo completo de ventas incluyendo:
- Registro de ventas con descuento por cantidad
- Numeración secuencial de ventas
- Cancelación parcial (cambio de cantidad / eliminación de items)
- Cancelación total con devolución de stock
- Eliminación de ventas (sin devolución de stock)

Arquitectura:
- router.py: Endpoints de ventas
- service.py: Lógica de negocio de ventas
- repository.py: Acceso a datos y transacciones de ventas
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import SalesService
from .repository import SalesRepository

__all__ = [
    "router",
    "SalesService",
    "SalesRepository"
]
