"""Imports every mapped class so string relationships resolve and metadata is complete."""
from app.core.database import Base
from app.models.user import User
from app.models.product import Product, ProductPhoto
from app.models.review import Review
from app.models.order import Order, OrderItem
from app.models.coupon import Coupon

__all__ = ["Base", "User", "Product", "ProductPhoto", "Review", "Order", "OrderItem", "Coupon"]
