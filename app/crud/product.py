from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, selectinload

from app.core.constants import SortOrderEnum
from app.crud.base import CRUDBase
from app.models.product import Product, ProductPhoto
from app.schemas.product import ProductCreate, ProductUpdate


class CRUDProduct(CRUDBase[Product, ProductCreate, ProductUpdate]):

    def _query_with_photos(self, db: Session):
        return db.query(Product).options(selectinload(Product.photos))

    def get(self, db: Session, id: int) -> Optional[Product]:
        return self._query_with_photos(db).filter(Product.id == id).first()

    def get_all(self, db: Session) -> List[Product]:
        return self._query_with_photos(db).order_by(Product.id).all()

    def get_latest(self, db: Session, limit: int) -> List[Product]:
        return (
            self._query_with_photos(db)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .limit(limit)
            .all()
        )

    def search(
        self,
        db: Session,
        *,
        search: Optional[str] = None,
        max_price: Optional[float] = None,
        category: Optional[str] = None,
        sort: Optional[SortOrderEnum] = None,
        skip: int = 0,
        limit: int = 8,
    ) -> Tuple[List[Product], int]:
        query = self._query_with_photos(db)
        if search:
            query = query.filter(Product.name.ilike(f"%{search}%"))
        if max_price is not None:
            query = query.filter(Product.price <= max_price)
        if category:
            query = query.filter(Product.category == category)

        total = query.count()

        if sort == SortOrderEnum.ASC:
            query = query.order_by(Product.price.asc(), Product.id)
        elif sort == SortOrderEnum.DESC:
            query = query.order_by(Product.price.desc(), Product.id)
        else:
            query = query.order_by(Product.id)

        return query.offset(skip).limit(limit).all(), total

    def create_with_photos(self, db: Session, *, obj_in: ProductCreate) -> Product:
        data = obj_in.model_dump(exclude={"photos"})
        db_obj = Product(**data)
        db_obj.photos = [ProductPhoto(public_id=p.public_id, url=p.url) for p in obj_in.photos]
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def replace_photos(self, db_obj: Product, photos) -> None:
        db_obj.photos = [ProductPhoto(public_id=p.public_id, url=p.url) for p in photos]


product = CRUDProduct(Product)
