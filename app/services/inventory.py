"""Stock adjustment and rating recomputation.

Both are sequential best-effort operations with no concurrency control:
two requests reducing the same product can race on read-modify-write.
"""
from typing import Iterable
import logging

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.crud.product import product as crud_product
from app.crud.review import review as crud_review
from app.schemas.order import StockLine
from app.schemas.review import RatingSummary

logger = logging.getLogger(__name__)


def reduce_stock(db: Session, lines: Iterable[StockLine]) -> None:
    """Decrement stock line by line, committing each line.

    A missing product aborts the remaining lines; lines already applied
    stay applied.
    """
    for line in lines:
        product = crud_product.get(db, id=line.product_id)
        if not product:
            raise NotFoundError(f"Product {line.product_id} not found")
        product.stock -= line.quantity
        crud_product.save(db, db_obj=product)
        logger.info(f"Reduced stock of product {product.id} by {line.quantity} to {product.stock}")


def compute_ratings(db: Session, product_id: int) -> RatingSummary:
    ratings = crud_review.get_ratings(db, product_id=product_id)
    count = len(ratings)
    average = sum(ratings) // count if count else 0
    return RatingSummary(num_of_reviews=count, ratings=average)
