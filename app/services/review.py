from typing import List
import logging

from sqlalchemy.orm import Session

from app.core.cache import CacheManager
from app.core.cache_config import CACHE_KEYS
from app.core.exceptions import NotFoundError, UnauthorizedError
from app.crud.product import product as crud_product
from app.crud.review import review as crud_review
from app.crud.user import user as crud_user
from app.models.product import Product
from app.schemas.review import Review, ReviewCreate
from app.services.cache_service import read_through
from app.services.inventory import compute_ratings
from app.utils.cache_invalidation import CacheInvalidator, ProductMutation, AdminMutation, ReviewMutation

logger = logging.getLogger(__name__)


class ReviewService:

    async def get_product_reviews(self, db: Session, cache: CacheManager, product_id: int) -> List[dict]:
        def load():
            reviews = crud_review.get_by_product(db, product_id=product_id)
            return [Review.model_validate(r).model_dump(mode="json") for r in reviews]

        return await read_through(cache, CACHE_KEYS["reviews"].format(product_id), load)

    def _get_user(self, db: Session, user_id: str):
        user = crud_user.get(db, id=user_id) if user_id else None
        if not user:
            raise NotFoundError("Not logged in")
        return user

    def _refresh_ratings(self, db: Session, product: Product) -> None:
        summary = compute_ratings(db, product_id=product.id)
        crud_product.update(db, db_obj=product, obj_in={
            "ratings": summary.ratings,
            "num_of_reviews": summary.num_of_reviews,
        })

    async def _invalidate(self, cache: CacheManager, product_id: int) -> None:
        await CacheInvalidator(cache).invalidate(
            ProductMutation(product_id), AdminMutation(), ReviewMutation(product_id)
        )

    async def upsert_review(
        self, db: Session, cache: CacheManager, product_id: int, user_id: str, review_in: ReviewCreate
    ) -> dict:
        """One review per (user, product): a second submission edits the first."""
        user = self._get_user(db, user_id)

        product = crud_product.get(db, id=product_id)
        if not product:
            raise NotFoundError("Product not found")

        existing = crud_review.get_by_user_and_product(db, user_id=user.id, product_id=product.id)
        if existing:
            review = crud_review.update(db, db_obj=existing, obj_in=review_in.model_dump())
            logger.info(f"User {user.id} updated review {review.id} on product {product.id}")
        else:
            review = crud_review.create(db, obj_in={
                **review_in.model_dump(),
                "user_id": user.id,
                "product_id": product.id,
            })
            logger.info(f"User {user.id} reviewed product {product.id}")

        self._refresh_ratings(db, product)
        await self._invalidate(cache, product.id)
        return Review.model_validate(review).model_dump(mode="json")

    async def delete_review(self, db: Session, cache: CacheManager, review_id: int, user_id: str) -> None:
        user = self._get_user(db, user_id)

        review = crud_review.get(db, id=review_id)
        if not review:
            raise NotFoundError("Review not found")

        if review.user_id != user.id:
            raise UnauthorizedError("Not authorized")

        product_id = review.product_id
        crud_review.delete(db, db_obj=review)

        product = crud_product.get(db, id=product_id)
        if product:
            self._refresh_ratings(db, product)

        await self._invalidate(cache, product_id)


review_service = ReviewService()
