# app/modules/products/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Dict, Any, List, Optional, Tuple
import logging

from app.shared.database.models import Product

logger = logging.getLogger(__name__)

class ProductsRepository:
    def __init__(self, db: Session):
        self.db = db

    def _build_product(self, product_data: Dict[str, Any]) -> Product:
        rating = product_data.get('rating') or {}
        return Product(
            title=product_data['title'],
            price=product_data['price'],
            description=product_data.get('description', ''),
            category=product_data['category'],
            stock=product_data.get('stock', 0),
            image=product_data['image'],
            rating_rate=rating.get('rate', 0.0),
            rating_count=rating.get('count', 0)
        )

    def create_product(self, product_data: Dict[str, Any]) -> Product:
        """Crear producto"""
        try:
            product = self._build_product(product_data)
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
            return product
        except Exception:
            self.db.rollback()
            raise

    def create_products_batch(self, products_data: List[Dict[str, Any]]) -> List[Product]:
        """Crear varios productos en una sola transacción (todo o nada)"""
        try:
            products = [self._build_product(data) for data in products_data]
            self.db.add_all(products)
            self.db.commit()
            for product in products:
                self.db.refresh(product)
            return products
        except Exception:
            self.db.rollback()
            raise

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_products(
        self,
        page: int,
        size: int,
        category: Optional[str] = None
    ) -> Tuple[List[Product], int]:
        """Listado paginado con filtro opcional por categoría"""
        query = self.db.query(Product)
        if category:
            query = query.filter(func.lower(Product.category) == category.lower())

        total = query.count()
        products = query.order_by(Product.id).offset((page - 1) * size).limit(size).all()
        return products, total

    def update_product(self, product: Product, changes: Dict[str, Any]) -> Product:
        """Aplicar cambios parciales sobre el producto"""
        try:
            rating = changes.pop('rating', None)
            for field, value in changes.items():
                setattr(product, field, value)
            if rating is not None:
                product.rating_rate = rating.get('rate', product.rating_rate)
                product.rating_count = rating.get('count', product.rating_count)

            self.db.commit()
            self.db.refresh(product)
            return product
        except Exception:
            self.db.rollback()
            raise

    def update_stock(self, product_id: int, quantity: int) -> bool:
        """Fijar el stock de un producto; False si no existe"""
        product = self.get_product_by_id(product_id)
        if not product:
            return False

        try:
            product.stock = quantity
            self.db.commit()
            return True
        except Exception:
            self.db.rollback()
            raise

    def delete_product(self, product_id: int) -> bool:
        product = self.get_product_by_id(product_id)
        if not product:
            return False

        try:
            self.db.delete(product)
            self.db.commit()
            return True
        except Exception:
            self.db.rollback()
            raise
