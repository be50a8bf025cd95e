import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("TESTING", "true")
os.environ.pop("REDIS_URL", None)

import uuid
from datetime import date, datetime
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from app.core.cache import CacheManager, MemoryCacheBackend
from app.core.config import settings
from app.core.constants import GenderEnum, OrderStatusEnum, RoleEnum
from app.core.database import Base
from app.models.order import Order, OrderItem
from app.models.product import Product, ProductPhoto
from app.models.user import User
from app.schemas.product import ProductPhoto as ProductPhotoSchema
from app.utils import deps as deps_utils
import main

test_db_url = settings.TEST_DATABASE_URL or "sqlite:///./test.db"

@pytest.fixture(scope="session")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(test_db_url)
    yield engine
    engine.dispose()
    if test_db_url == "sqlite:///./test.db" and os.path.exists("./test.db"):
        os.remove("./test.db")

@pytest.fixture(scope="function")
def db_session(database_engine):
    Base.metadata.drop_all(bind=database_engine)
    Base.metadata.create_all(bind=database_engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()

@pytest.fixture
def memory_backend():
    return MemoryCacheBackend()

@pytest.fixture
def cache(memory_backend):
    return CacheManager(memory_backend)

@pytest.fixture(scope="function")
def client(db_session, cache):
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_cache] = lambda: cache
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()

@pytest.fixture
def fake_cloudinary():
    """Blob storage stand-in: every upload gets a fresh public id."""
    def upload(file, resource_type="image"):
        public_id = f"products/{uuid.uuid4().hex}"
        return ProductPhotoSchema(public_id=public_id, url=f"https://res.cloudinary.test/{public_id}.jpg")

    with patch("app.services.product.cloudinary_service.upload_image", side_effect=upload) as upload_mock, \
            patch("app.services.product.cloudinary_service.delete_images") as delete_mock:
        yield {"upload": upload_mock, "delete": delete_mock}

@pytest.fixture
def user_factory(db_session):
    def create_user(
        role: RoleEnum = RoleEnum.USER,
        gender: GenderEnum = GenderEnum.MALE,
        dob: date = date(1995, 6, 15),
        created_at: datetime = None,
        **kwargs,
    ) -> User:
        user_id = kwargs.pop("id", f"uid-{uuid.uuid4().hex[:12]}")
        user = User(
            id=user_id,
            name=kwargs.pop("name", "Test User"),
            email=kwargs.pop("email", f"{user_id}@test.com"),
            photo=kwargs.pop("photo", "https://photos.test/avatar.png"),
            role=role,
            gender=gender,
            dob=dob,
            **kwargs,
        )
        if created_at is not None:
            user.created_at = created_at
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return create_user

@pytest.fixture
def admin_user(user_factory):
    return user_factory(role=RoleEnum.ADMIN, name="Admin")

@pytest.fixture
def product_factory(db_session):
    def create_product(
        name: str = "Laptop",
        price: float = 1000,
        stock: int = 10,
        category: str = "electronics",
        created_at: datetime = None,
        **kwargs,
    ) -> Product:
        product = Product(name=name, price=price, stock=stock, category=category, **kwargs)
        product.photos = [ProductPhoto(public_id=f"products/{uuid.uuid4().hex}", url="https://res.cloudinary.test/p.jpg")]
        if created_at is not None:
            product.created_at = created_at
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product
    return create_product

@pytest.fixture
def order_factory(db_session):
    def create_order(
        user: User,
        products=(),
        total: float = 100,
        discount: float = 0,
        tax: float = 0,
        shipping_charges: float = 0,
        status: OrderStatusEnum = OrderStatusEnum.PROCESSING,
        created_at: datetime = None,
    ) -> Order:
        order = Order(
            user_id=user.id,
            shipping_info={
                "address": "1 Main St",
                "city": "Pune",
                "state": "MH",
                "country": "India",
                "pin_code": "411001",
            },
            subtotal=total,
            tax=tax,
            shipping_charges=shipping_charges,
            discount=discount,
            total=total,
            status=status,
        )
        order.order_items = [
            OrderItem(product_id=p.id, name=p.name, photo="https://res.cloudinary.test/p.jpg", price=p.price, quantity=1)
            for p in products
        ]
        if created_at is not None:
            order.created_at = created_at
        db_session.add(order)
        db_session.commit()
        db_session.refresh(order)
        return order
    return create_order

@pytest.fixture
def order_payload():
    def build(user_id: str, items, total: float = 1100, **overrides) -> dict:
        payload = {
            "shipping_info": {
                "address": "1 Main St",
                "city": "Pune",
                "state": "MH",
                "country": "India",
                "pin_code": "411001",
            },
            "order_items": items,
            "user": user_id,
            "subtotal": total,
            "tax": 0,
            "shipping_charges": 0,
            "discount": 0,
            "total": total,
        }
        payload.update(overrides)
        return payload
    return build
