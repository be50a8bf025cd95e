from typing import List, Optional
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.models.review import Review
from app.schemas.review import ReviewCreate


class CRUDReview(CRUDBase[Review, ReviewCreate, ReviewCreate]):

    def _query_with_user(self, db: Session):
        return db.query(Review).options(selectinload(Review.user))

    def get(self, db: Session, id: int) -> Optional[Review]:
        return self._query_with_user(db).filter(Review.id == id).first()

    def get_by_user_and_product(self, db: Session, user_id: str, product_id: int) -> Optional[Review]:
        return (
            db.query(Review)
            .filter(Review.user_id == user_id)
            .filter(Review.product_id == product_id)
            .first()
        )

    def get_by_product(self, db: Session, product_id: int) -> List[Review]:
        return (
            self._query_with_user(db)
            .filter(Review.product_id == product_id)
            .order_by(Review.updated_at.desc(), Review.id.desc())
            .all()
        )

    def get_ratings(self, db: Session, product_id: int) -> List[int]:
        rows = db.query(Review.rating).filter(Review.product_id == product_id).all()
        return [rating for (rating,) in rows]


review = CRUDReview(Review)
