# app/modules/sales/schemas.py
from pydantic import BaseModel, Field, validator
from typing import List, Optional
from decimal import Decimal
from datetime import datetime
from app.shared.schemas.common import BaseResponse, PaginatedResponse
from app.shared.services.pricing_service import MAX_QUANTITY_PER_PRODUCT

class SaleItemRequest(BaseModel):
    product_id: int = Field(..., gt=0, description="ID del producto")
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY_PER_PRODUCT, description="Cantidad por producto")

    # NO incluir unit_price ni discount - se obtienen del producto en BD

class SaleCreateRequest(BaseModel):
    client: str = Field(..., min_length=1, max_length=100, description="Cliente")
    branch: str = Field(..., min_length=1, max_length=100, description="Sucursal")
    sale_date: Optional[datetime] = Field(None, description="Fecha de venta (por defecto ahora)")
    items: List[SaleItemRequest] = Field(..., description="Items de la venta")

    @validator('client', 'branch')
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError('Field cannot be blank')
        return v.strip()

    @validator('sale_date')
    def validate_sale_date(cls, v):
        if v is None:
            return v
        if v.tzinfo is not None:
            v = v.astimezone().replace(tzinfo=None)
        if v > datetime.now():
            raise ValueError('Sale date cannot be in the future.')
        return v

class ItemQuantityUpdateRequest(BaseModel):
    quantity: int = Field(..., ge=0, le=MAX_QUANTITY_PER_PRODUCT, description="Nueva cantidad; 0 elimina el item")

class SaleItemInfo(BaseModel):
    id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    discount: Decimal
    total_value: Decimal

class SaleInfo(BaseModel):
    id: int
    sale_number: str
    sale_date: datetime
    client: str
    branch: str
    is_cancelled: bool
    status: str
    total_value: Decimal
    items_count: int
    items: List[SaleItemInfo]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class SaleResponse(BaseResponse):
    sale: SaleInfo

class SaleListResponse(PaginatedResponse):
    items: List[SaleInfo]

class SaleDeleteResponse(BaseResponse):
    sale_id: int
    sale_number: str
    stock_restored: bool = False
