"""
Pydantic Schemas for Request/Response Validation

Documents are schema-flexible: request models only insist on the fields a
route depends on and keep every other field the client sends.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class FlexibleDocument(BaseModel):
    """Base for request bodies stored as-is."""
    model_config = ConfigDict(extra="allow")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class UserCreate(FlexibleDocument):
    """User profile sent on first sign-in."""
    email: str = Field(..., min_length=1, examples=["guest@bistro.com"])
    name: Optional[str] = Field(None, examples=["Jane Guest"])


class MenuItemCreate(FlexibleDocument):
    name: str = Field(..., min_length=1, examples=["Caesar Salad"])
    price: float = Field(..., allow_inf_nan=False, examples=[12.5])
    category: Optional[str] = Field(None, examples=["salad"])
    recipe: Optional[str] = None
    image: Optional[str] = None


class CartItemCreate(FlexibleDocument):
    email: str = Field(..., min_length=1, examples=["guest@bistro.com"])
    menuId: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None
    price: Optional[float] = Field(None, examples=[12.5])


class PaymentIntentRequest(BaseModel):
    price: float = Field(..., allow_inf_nan=False, examples=[19.99])


class PaymentCreate(FlexibleDocument):
    """Completed payment recorded after client-side confirmation."""
    email: str = Field(..., min_length=1)
    price: float = Field(..., allow_inf_nan=False, examples=[19.99])
    transactionId: Optional[str] = None
    date: Optional[datetime] = None
    cartIds: list[str] = Field(default_factory=list)
    menuItemIds: list[str] = Field(default_factory=list)
    status: str = Field(default="pending")


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class TokenResponse(BaseModel):
    token: str


class AdminStatusResponse(BaseModel):
    admin: bool


class ClientSecretResponse(BaseModel):
    clientSecret: str


class UserCreateResponse(BaseModel):
    message: Optional[str] = None
    insertedId: Optional[str] = None


class InsertResponse(BaseModel):
    acknowledged: bool
    insertedId: str


class DeleteResponse(BaseModel):
    acknowledged: bool
    deletedCount: int


class UpdateResponse(BaseModel):
    acknowledged: bool
    matchedCount: int
    modifiedCount: int
    upsertedId: Optional[str] = None


class StatsResponse(BaseModel):
    users: int
    menuItem: int
    orders: int
    revenue: float


class ErrorResponse(BaseModel):
    """Standard error response."""
    message: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    payment_service: str
    timestamp: datetime
