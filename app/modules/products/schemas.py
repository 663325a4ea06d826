# app/modules/products/schemas.py
from pydantic import BaseModel, Field, validator
from typing import List, Optional
from decimal import Decimal
from datetime import datetime
from urllib.parse import urlparse
from app.shared.schemas.common import BaseResponse, PaginatedResponse


def _validate_image_url(value: str) -> str:
    parsed = urlparse(value.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError('Image must be a valid URL.')
    return value.strip()


class Rating(BaseModel):
    rate: float = Field(0.0, ge=0, le=5, description="Nota promedio (0-5)")
    count: int = Field(0, ge=0, description="Cantidad de valoraciones")


class ProductCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=100, description="Título del producto")
    price: Decimal = Field(..., gt=0, description="Precio unitario")
    description: str = Field("", max_length=500, description="Descripción")
    category: str = Field(..., min_length=1, max_length=100, description="Categoría")
    stock: int = Field(0, ge=0, description="Unidades disponibles")
    image: str = Field(..., description="URL de la imagen")
    rating: Rating = Field(default_factory=Rating)

    @validator('title', 'category')
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError('Field cannot be blank')
        return v.strip()

    @validator('image')
    def validate_image(cls, v):
        return _validate_image_url(v)


class ProductUpdateRequest(BaseModel):
    """Actualización parcial: solo se aplican los campos enviados"""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = Field(None, max_length=500)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    stock: Optional[int] = Field(None, ge=0)
    image: Optional[str] = None
    rating: Optional[Rating] = None

    @validator('title', 'category')
    def validate_not_blank(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError('Field cannot be blank')
        return v.strip()

    @validator('image')
    def validate_image(cls, v):
        if v is None:
            return v
        return _validate_image_url(v)


class ProductInfo(BaseModel):
    id: int
    title: str
    price: Decimal
    description: str
    category: str
    stock: int
    image: str
    rating: Rating
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductResponse(BaseResponse):
    product: ProductInfo


class ProductBatchResponse(BaseResponse):
    products: List[ProductInfo]
    count: int


class ProductListResponse(PaginatedResponse):
    items: List[ProductInfo]


class ProductDeleteResponse(BaseResponse):
    product_id: int
