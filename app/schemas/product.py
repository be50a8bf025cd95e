from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime


class ProductPhoto(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    public_id: str
    url: str


class ProductBase(BaseModel):
    name: str
    price: float = Field(..., gt=0)
    stock: int = Field(..., ge=0)
    category: str
    description: Optional[str] = None


class ProductCreate(ProductBase):
    photos: List[ProductPhoto] = []


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    stock: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None
    description: Optional[str] = None


class Product(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    ratings: float = 0
    num_of_reviews: int = 0
    photos: List[ProductPhoto] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductSearchResult(BaseModel):
    products: List[Product]
    total_page: int
