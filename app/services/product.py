import math
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from app.core.cache import CacheManager
from app.core.cache_config import CACHE_KEYS
from app.core.config import settings
from app.core.constants import SortOrderEnum
from app.core.exceptions import NotFoundError, ValidationFailureError
from app.crud.product import product as crud_product
from app.schemas.product import Product, ProductBase, ProductCreate, ProductUpdate, ProductSearchResult
from app.services.cache_service import read_through
from app.services.cloudinary import cloudinary_service
from app.utils.cache_invalidation import CacheInvalidator, ProductMutation, AdminMutation, ReviewMutation

logger = logging.getLogger(__name__)


def serialize_product(product) -> dict:
    return Product.model_validate(product).model_dump(mode="json")


def normalize_category(category: str) -> str:
    return category.strip().lower()


class ProductService:

    async def get_latest_products(self, db: Session, cache: CacheManager) -> List[dict]:
        def load():
            products = crud_product.get_latest(db, limit=settings.LATEST_PRODUCTS_LIMIT)
            return [serialize_product(p) for p in products]

        return await read_through(cache, CACHE_KEYS["latest_products"], load)

    async def get_categories(self, db: Session, cache: CacheManager) -> List[str]:
        return await read_through(
            cache, CACHE_KEYS["categories"], lambda: crud_product.distinct(db, "category")
        )

    async def get_admin_products(self, db: Session, cache: CacheManager) -> List[dict]:
        def load():
            return [serialize_product(p) for p in crud_product.get_all(db)]

        return await read_through(cache, CACHE_KEYS["all_products"], load)

    async def get_product(self, db: Session, cache: CacheManager, product_id: int) -> dict:
        def load():
            product = crud_product.get(db, id=product_id)
            if not product:
                raise NotFoundError("Product not found")
            return serialize_product(product)

        return await read_through(cache, CACHE_KEYS["product"].format(product_id), load)

    def search_products(
        self,
        db: Session,
        *,
        search: Optional[str] = None,
        price: Optional[float] = None,
        category: Optional[str] = None,
        sort: Optional[SortOrderEnum] = None,
        page: int = 1,
    ) -> ProductSearchResult:
        limit = settings.PRODUCT_PER_PAGE
        page = max(page, 1)
        products, total = crud_product.search(
            db,
            search=search,
            max_price=price,
            category=normalize_category(category) if category else None,
            sort=sort,
            skip=(page - 1) * limit,
            limit=limit,
        )
        return ProductSearchResult(
            products=[Product.model_validate(p) for p in products],
            total_page=math.ceil(total / limit),
        )

    def _validate_photos(self, photos: List[bytes]) -> None:
        if not photos:
            raise ValidationFailureError("Please add atleast 1 photo")
        if len(photos) > settings.MAX_PRODUCT_PHOTOS:
            raise ValidationFailureError(f"You can only upload {settings.MAX_PRODUCT_PHOTOS} photos")

    async def create_product(
        self, db: Session, cache: CacheManager, product_in: ProductBase, photos: List[bytes]
    ) -> dict:
        self._validate_photos(photos)
        if not product_in.name.strip() or not product_in.category.strip():
            raise ValidationFailureError("Please enter all fields")

        uploaded = cloudinary_service.upload_images(photos)
        product = crud_product.create_with_photos(db, obj_in=ProductCreate(
            **product_in.model_dump(exclude={"category"}),
            category=normalize_category(product_in.category),
            photos=uploaded,
        ))
        logger.info(f"Created product {product.id}")

        await CacheInvalidator(cache).invalidate(ProductMutation(), AdminMutation())
        return serialize_product(product)

    async def update_product(
        self,
        db: Session,
        cache: CacheManager,
        product_id: int,
        product_in: ProductUpdate,
        photos: Optional[List[bytes]] = None,
    ) -> dict:
        product = crud_product.get(db, id=product_id)
        if not product:
            raise NotFoundError("Product not found")

        if photos:
            self._validate_photos(photos)
            uploaded = cloudinary_service.upload_images(photos)
            cloudinary_service.delete_images([photo.public_id for photo in product.photos])
            crud_product.replace_photos(product, uploaded)

        update_data = product_in.model_dump(exclude_unset=True, exclude_none=True)
        if "category" in update_data:
            update_data["category"] = normalize_category(update_data["category"])
        product = crud_product.update(db, db_obj=product, obj_in=update_data)
        logger.info(f"Updated product {product.id}")

        await CacheInvalidator(cache).invalidate(ProductMutation(product_id), AdminMutation())
        return serialize_product(product)

    async def delete_product(self, db: Session, cache: CacheManager, product_id: int) -> None:
        product = crud_product.get(db, id=product_id)
        if not product:
            raise NotFoundError("Product not found")

        cloudinary_service.delete_images([photo.public_id for photo in product.photos])
        crud_product.delete(db, db_obj=product)
        logger.info(f"Deleted product {product_id}")

        # Its reviews go with it
        await CacheInvalidator(cache).invalidate(
            ProductMutation(product_id), AdminMutation(), ReviewMutation(product_id)
        )


product_service = ProductService()
