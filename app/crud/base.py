from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from sqlalchemy.orm import Session
from app.core.database import Base
import app.models.registry  # noqa: F401

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Primary store access for one collection. No business rules live here."""

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def _query(self, db: Session, filters: Optional[Dict[str, Any]] = None):
        query = db.query(self.model)
        if filters:
            query = query.filter_by(**filters)
        return query

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.get(self.model, id)

    def find(
        self, db: Session, filters: Optional[Dict[str, Any]] = None, *, skip: int = 0, limit: Optional[int] = None
    ) -> List[ModelType]:
        query = self._query(db, filters).order_by(self.model.id)
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count(self, db: Session, filters: Optional[Dict[str, Any]] = None) -> int:
        return self._query(db, filters).count()

    def distinct(self, db: Session, field: str) -> List[Any]:
        column = getattr(self.model, field)
        return [value for (value,) in db.query(column).distinct().order_by(column).all()]

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]], commit: bool = True) -> ModelType:
        obj_in_data = obj_in if isinstance(obj_in, dict) else jsonable_encoder(obj_in)
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        db.flush() # Populate ID
        if commit:
            db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(
        self, db: Session, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        return self.save(db, db_obj=db_obj)

    def save(self, db: Session, *, db_obj: ModelType) -> ModelType:
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: ModelType) -> ModelType:
        db.delete(db_obj)
        db.commit()
        return db_obj
