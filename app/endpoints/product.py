from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.core.cache import CacheManager
from app.core.constants import SortOrderEnum
from app.schemas.product import Product, ProductBase, ProductSearchResult, ProductUpdate
from app.schemas.response import APIResponse
from app.schemas.review import Review, ReviewCreate
from app.services.product import product_service
from app.services.review import review_service
from app.utils import deps

router = APIRouter()


async def _read_photos(photos: Optional[List[UploadFile]]) -> List[bytes]:
    return [await photo.read() for photo in photos or []]


@router.post(
    "/new",
    response_model=APIResponse[Product],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.require_admin)],
)
async def create_product(
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
    name: str = Form(...),
    price: float = Form(..., gt=0),
    stock: int = Form(..., ge=0),
    category: str = Form(...),
    description: Optional[str] = Form(None),
    photos: Optional[List[UploadFile]] = File(None),
):
    product_in = ProductBase(name=name, price=price, stock=stock, category=category, description=description)
    product = await product_service.create_product(db, cache, product_in=product_in, photos=await _read_photos(photos))
    return APIResponse(message="Product created successfully", data=product)


@router.get("/latest", response_model=APIResponse[List[Product]])
async def get_latest_products(
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    products = await product_service.get_latest_products(db, cache)
    return APIResponse(message="Latest products retrieved successfully", data=products)


@router.get("/categories", response_model=APIResponse[List[str]])
async def get_categories(
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    categories = await product_service.get_categories(db, cache)
    return APIResponse(message="Categories retrieved successfully", data=categories)


@router.get(
    "/admin-products",
    response_model=APIResponse[List[Product]],
    dependencies=[Depends(deps.require_admin)],
)
async def get_admin_products(
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    products = await product_service.get_admin_products(db, cache)
    return APIResponse(message="Products retrieved successfully", data=products)


@router.get("/all", response_model=APIResponse[ProductSearchResult])
def search_products(
    db: Session = Depends(deps.get_db),
    search: Optional[str] = None,
    price: Optional[float] = Query(None, gt=0),
    category: Optional[str] = None,
    sort: Optional[SortOrderEnum] = None,
    page: int = Query(1, ge=1),
):
    """Filtered, paginated product listing. Not cached."""
    result = product_service.search_products(
        db, search=search, price=price, category=category, sort=sort, page=page
    )
    return APIResponse(message="Products retrieved successfully", data=result)


@router.get("/reviews/{product_id}", response_model=APIResponse[List[Review]])
async def get_product_reviews(
    product_id: int,
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    reviews = await review_service.get_product_reviews(db, cache, product_id=product_id)
    return APIResponse(message="Reviews retrieved successfully", data=reviews)


@router.post("/review/new/{product_id}", response_model=APIResponse[Review])
async def upsert_review(
    product_id: int,
    review_in: ReviewCreate,
    id: Optional[str] = Query(None, description="ID of the reviewing user"),
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    review = await review_service.upsert_review(db, cache, product_id=product_id, user_id=id, review_in=review_in)
    return APIResponse(message="Review saved successfully", data=review)


@router.delete("/review/{review_id}", response_model=APIResponse[None])
async def delete_review(
    review_id: int,
    id: Optional[str] = Query(None, description="ID of the review's author"),
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    await review_service.delete_review(db, cache, review_id=review_id, user_id=id)
    return APIResponse(message="Review deleted successfully")


@router.get("/{product_id}", response_model=APIResponse[Product])
async def get_product(
    product_id: int,
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    product = await product_service.get_product(db, cache, product_id=product_id)
    return APIResponse(message="Product retrieved successfully", data=product)


@router.put("/{product_id}", response_model=APIResponse[Product], dependencies=[Depends(deps.require_admin)])
async def update_product(
    product_id: int,
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
    name: Optional[str] = Form(None),
    price: Optional[float] = Form(None, gt=0),
    stock: Optional[int] = Form(None, ge=0),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    photos: Optional[List[UploadFile]] = File(None),
):
    product_in = ProductUpdate(name=name, price=price, stock=stock, category=category, description=description)
    product = await product_service.update_product(
        db, cache, product_id=product_id, product_in=product_in, photos=await _read_photos(photos)
    )
    return APIResponse(message="Product updated successfully", data=product)


@router.delete("/{product_id}", response_model=APIResponse[None], dependencies=[Depends(deps.require_admin)])
async def delete_product(
    product_id: int,
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    await product_service.delete_product(db, cache, product_id=product_id)
    return APIResponse(message="Product deleted successfully")
