# app/modules/products/__init__.py
"""
Módulo de Productos - Catálogo

Este módulo maneja el catálogo de productos:
- Alta individual y en lote
- Consulta por ID y listado paginado
- Actualización parcial (incluye stock)
- Eliminación

Arquitectura:
- router.py: Endpoints de productos
- service.py: Lógica de negocio del catálogo
- repository.py: Acceso a datos de productos
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import ProductsService
from .repository import ProductsRepository

__all__ = [
    "router",
    "ProductsService",
    "ProductsRepository"
]
