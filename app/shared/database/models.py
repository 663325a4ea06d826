# app/shared/database/models.py
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text, Float,
    Numeric, ForeignKey, CheckConstraint, func
)
from sqlalchemy.orm import relationship, declarative_base

from app.shared.services.pricing_service import MAX_QUANTITY_PER_PRODUCT

Base = declarative_base()

# =====================================================
# MIXIN PARA TIMESTAMPS
# =====================================================
class TimestampMixin:
    """Mixin que agrega campos created_at y updated_at"""
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=True, onupdate=func.current_timestamp())


# =====================================================
# CATÁLOGO
# =====================================================

class Product(Base, TimestampMixin):
    """Modelo de Producto"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    description = Column(String(500), nullable=False, default='')
    category = Column(String(100), nullable=False, default='', index=True)
    stock = Column(Integer, nullable=False, default=0)
    image = Column(Text, nullable=False, default='')

    # Rating embebido (promedio 0-5 y cantidad de votos)
    rating_rate = Column(Float, nullable=False, default=0.0)
    rating_count = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint('stock >= 0', name='ck_products_stock_non_negative'),
        CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
    )


# =====================================================
# VENTAS
# =====================================================

class Sale(Base, TimestampMixin):
    """Modelo de Venta"""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    sale_number = Column(String(10), unique=True, nullable=False, index=True)
    sale_date = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    client = Column(String(100), nullable=False)
    branch = Column(String(100), nullable=False)
    is_cancelled = Column(Boolean, nullable=False, default=False)
    total_value = Column(Numeric(12, 2), nullable=False, default=0)

    # Relationships
    items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.id"
    )

    @property
    def status(self) -> str:
        return "cancelled" if self.is_cancelled else "open"

    def find_item(self, item_id: int):
        """Buscar item por id dentro de la venta"""
        return next((item for item in self.items if item.id == item_id), None)


class SaleItem(Base):
    """Modelo de Item de Venta"""
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    # Referencia débil: el producto pertenece al catálogo, no a la venta
    product_id = Column(Integer, nullable=False, index=True)
    product_name = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    total_value = Column(Numeric(12, 2), nullable=False)

    __table_args__ = (
        CheckConstraint(
            f'quantity >= 1 AND quantity <= {MAX_QUANTITY_PER_PRODUCT}',
            name='ck_sale_items_quantity_range'
        ),
    )

    # Relationships
    sale = relationship("Sale", back_populates="items")
