"""Fixtures compartidos: SQLite en memoria, sesión y cliente HTTP."""

import os

# Debe fijarse antes de importar app.config.settings
os.environ["DATABASE_URL"] = "sqlite://"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.config.database import SessionLocal, engine, get_db
from app.main import app
from app.shared.database.models import Base, Product


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    # Sin "with": no se ejecuta el lifespan (init_db) contra la BD real
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_product(db):
    def _make(title="Cerveza Pilsen", price="10.00", stock=50, category="beverages"):
        product = Product(
            title=title,
            price=Decimal(price),
            description=f"{title} description",
            category=category,
            stock=stock,
            image="https://example.com/image.png",
            rating_rate=4.5,
            rating_count=10,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def stock_of(db):
    """Stock actual leído de la BD, no del identity map."""
    def _stock(product_id):
        db.expire_all()
        return db.get(Product, product_id).stock

    return _stock
