# app/core/exceptions.py
"""
Errores de dominio de ventas y catálogo.

Cada error lleva su código HTTP y un error_code estable; los handlers
registrados en app.core.middleware los convierten en ErrorResponse.
"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    status_code: int = 400
    error_code: str = "domain_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


# ==================== NOT FOUND ====================

class NotFoundError(DomainError):
    status_code = 404
    error_code = "not_found"


class ProductNotFoundError(NotFoundError):
    error_code = "product_not_found"

    def __init__(self, product_id: int):
        super().__init__(f"Product with ID {product_id} not found.", {"product_id": product_id})
        self.product_id = product_id


class SaleNotFoundError(NotFoundError):
    error_code = "sale_not_found"

    def __init__(self, sale_id: int):
        super().__init__(f"The sale with ID {sale_id} was not found.", {"sale_id": sale_id})
        self.sale_id = sale_id


class SaleItemNotFoundError(NotFoundError):
    error_code = "sale_item_not_found"

    def __init__(self, sale_id: int, item_id: int):
        super().__init__(
            f"The sale item with ID {item_id} was not found in the sale.",
            {"sale_id": sale_id, "item_id": item_id}
        )


# ==================== REGLAS DE NEGOCIO ====================

class BusinessRuleError(DomainError):
    status_code = 400
    error_code = "business_rule_violation"


class EmptySaleError(BusinessRuleError):
    error_code = "empty_sale"

    def __init__(self):
        super().__init__("Sale must contain at least one item.")


class InsufficientStockError(BusinessRuleError):
    error_code = "insufficient_stock"

    def __init__(self, product_title: str, available: int, requested: int):
        super().__init__(
            f"Product '{product_title}' does not have enough stock. "
            f"Available: {available}, Requested: {requested}",
            {"product": product_title, "available": available, "requested": requested}
        )
        self.available = available
        self.requested = requested


class SaleAlreadyCancelledError(BusinessRuleError):
    error_code = "sale_already_cancelled"

    def __init__(self, sale_id: int):
        super().__init__(
            f"The sale with ID {sale_id} is already cancelled. No changes are allowed.",
            {"sale_id": sale_id}
        )


class InvalidQuantityError(BusinessRuleError):
    error_code = "invalid_quantity"

    def __init__(self, quantity: int, max_quantity: int):
        super().__init__(
            f"Invalid quantity: {quantity}. Quantity must be between 1 and {max_quantity}.",
            {"quantity": quantity}
        )


# ==================== CONFLICTOS / PERSISTENCIA ====================

class ConflictError(DomainError):
    status_code = 409
    error_code = "conflict"


class SaleNumberConflictError(ConflictError):
    error_code = "sale_number_conflict"

    def __init__(self, sale_number: str):
        super().__init__(
            f"Sale number {sale_number} was taken by a concurrent sale. Please retry.",
            {"sale_number": sale_number}
        )


class PersistenceError(DomainError):
    status_code = 500
    error_code = "persistence_error"


class StockInconsistencyError(PersistenceError):
    error_code = "stock_inconsistency"

    def __init__(self, product_id: int, sale_id: Optional[int] = None):
        super().__init__(
            f"Product with ID {product_id} referenced by the sale no longer exists; "
            f"stock cannot be restored.",
            {"product_id": product_id, "sale_id": sale_id}
        )
