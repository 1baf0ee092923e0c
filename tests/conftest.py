import os

# przed importem storefront - settings czytaja env przy imporcie
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.data import models  # noqa: F401
from storefront.data.database import Base, get_db
from storefront.data.models.product import ProductModel
from storefront.data.models.user import UserModel
from storefront.main import create_app


def enable_foreign_keys(engine):
    # sqlite domyslnie ignoruje FK, postgres nie
    @event.listens_for(engine, "connect")
    def _fk_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_foreign_keys(engine)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    app = create_app(with_lifespan=False)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c


def make_user(db, user_id=1, name="Alice"):
    user = UserModel(id=user_id, name=name)
    db.add(user)
    db.commit()
    return user


def make_product(db, name="Keyboard", price="10.00", stock=10, category="electronics", **kwargs):
    product = ProductModel(
        name=name,
        description=kwargs.pop("description", f"{name} description"),
        price=Decimal(price),
        stock=stock,
        category=category,
        **kwargs,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    # odpiete od sesji, zeby pozniejsze commity nie wygaszaly atrybutow
    db.expunge(product)
    return product


def set_stock(db, product_id, stock):
    product = db.get(ProductModel, product_id)
    product.stock = stock
    db.commit()


def get_stock(db, product_id):
    db.expire_all()
    return db.get(ProductModel, product_id).stock
