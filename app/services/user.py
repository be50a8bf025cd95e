from typing import List, Tuple
import logging

from sqlalchemy.orm import Session

from app.core.cache import CacheManager
from app.core.exceptions import NotFoundError, ValidationFailureError
from app.crud.product import product as crud_product
from app.crud.user import user as crud_user
from app.models.user import User
from app.schemas.user import UserCreate
from app.services.inventory import compute_ratings
from app.utils.cache_invalidation import CacheInvalidator, AdminMutation, ProductMutation, ReviewMutation

logger = logging.getLogger(__name__)


class UserService:

    async def register_user(self, db: Session, cache: CacheManager, user_in: UserCreate) -> Tuple[User, bool]:
        """Return the user and whether it was newly created."""
        existing = crud_user.get(db, id=user_in.id)
        if existing:
            return existing, False

        if crud_user.get_by_email(db, email=user_in.email):
            raise ValidationFailureError("Email already registered")

        new_user = crud_user.create(db, obj_in=user_in.model_dump())
        logger.info(f"Registered user {new_user.id}")

        await CacheInvalidator(cache).invalidate(AdminMutation())
        return new_user, True

    def get_all_users(self, db: Session) -> List[User]:
        return crud_user.find(db)

    def get_user(self, db: Session, user_id: str) -> User:
        found = crud_user.get(db, id=user_id)
        if not found:
            raise NotFoundError("Invalid Id")
        return found

    async def delete_user(self, db: Session, cache: CacheManager, user_id: str) -> User:
        found = self.get_user(db, user_id)
        reviewed_product_ids = sorted({r.product_id for r in found.reviews})

        # Reviews are removed with the user
        crud_user.delete(db, db_obj=found)
        for product_id in reviewed_product_ids:
            product = crud_product.get(db, id=product_id)
            if product:
                summary = compute_ratings(db, product_id=product_id)
                crud_product.update(db, db_obj=product, obj_in={
                    "ratings": summary.ratings,
                    "num_of_reviews": summary.num_of_reviews,
                })
        logger.info(f"Deleted user {user_id}")

        events = [AdminMutation()]
        if reviewed_product_ids:
            events.append(ProductMutation(reviewed_product_ids))
            events.extend(ReviewMutation(product_id) for product_id in reviewed_product_ids)
        await CacheInvalidator(cache).invalidate(*events)
        return found


user_service = UserService()
