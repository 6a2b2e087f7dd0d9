"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, validator

T = TypeVar("T")

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"


class BookRequest(BaseModel):
    """Request body for creating or replacing a book."""
    name: str = Field(..., min_length=1, max_length=100, description="Book title")
    price: Decimal = Field(..., ge=Decimal("1.00"), le=Decimal("9999.99"), decimal_places=2, description="Book price")
    category: str = Field(..., min_length=1, max_length=100, description="Book category")
    author: str = Field(..., min_length=1, max_length=100, description="Book author")

    @validator('name', 'category', 'author')
    def validate_not_blank(cls, v):
        """Reject values made of whitespace only."""
        if not v.strip():
            raise ValueError('Field must not be blank')
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "1984",
                "price": 9.99,
                "category": "Dystopian",
                "author": "George Orwell"
            }
        }
    }


class BookResponse(BaseModel):
    """Book response model for API."""
    id: str = Field(..., description="Unique book identifier")
    name: str = Field(..., description="Book title")
    price: Decimal = Field(..., description="Book price")
    category: str = Field(..., description="Book category")
    author: str = Field(..., description="Book author")


class ServiceError(str, Enum):
    """Reason a service operation did not succeed."""
    NOT_FOUND = "not_found"
    STORAGE_FAILURE = "storage_failure"


class ServiceResponse(BaseModel, Generic[T]):
    """
    Uniform envelope returned by every BooksService operation.

    ``error`` is set exactly when ``success`` is false, so callers can tell a
    missing record from an unreachable store without parsing ``message``.
    """
    data: Optional[T] = Field(None, description="Operation payload")
    success: bool = Field(True, description="Whether the operation succeeded")
    message: Optional[str] = Field(None, description="Human-readable outcome")
    error: Optional[ServiceError] = Field(None, description="Failure reason")

    @classmethod
    def ok(cls, data: Optional[T] = None, message: Optional[str] = None) -> "ServiceResponse[T]":
        return cls(data=data, success=True, message=message)

    @classmethod
    def fail(cls, error: ServiceError, message: str) -> "ServiceResponse[T]":
        return cls(data=None, success=False, message=message, error=error)

    @property
    def not_found(self) -> bool:
        return self.error == ServiceError.NOT_FOUND


BookEnvelope = ServiceResponse[BookResponse]
BookListEnvelope = ServiceResponse[List[BookResponse]]
RemoveEnvelope = ServiceResponse[bool]


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
    cache_status: str = Field(..., description="Cache connection status")
