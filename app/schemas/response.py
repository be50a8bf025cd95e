from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional, Any, Dict

DataType = TypeVar("DataType")

class APIResponse(BaseModel, Generic[DataType]):
    """Envelope for every successful response."""
    message: str = Field(..., description="Human-readable outcome, e.g. 'Welcome, Alice'.")
    data: Optional[DataType] = Field(None, description="Payload; omitted for deletes.")

class ErrorDetail(BaseModel):
    code: str = Field(..., description="Machine code such as NOT_FOUND or CACHE_UNAVAILABLE")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Validation errors or other context")

class ErrorResponse(BaseModel):
    """Body returned by every exception handler."""
    error: ErrorDetail
    timestamp: str = Field(..., description="ISO 8601 UTC timestamp")
    path: str = Field(..., description="Request URL that failed")
    request_id: Optional[str] = Field(None, description="Matches the X-Request-ID response header")
