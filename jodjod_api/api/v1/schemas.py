"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class CreateUserRequest(BaseModel):
    """Request body for POST /v1/users/create"""

    firstname: str = Field(..., min_length=1)
    lastname: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class CreateUserResponse(BaseModel):
    user_id: int


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str


class RegenTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class RegenTokenResponse(BaseModel):
    access_token: str


class UserResponse(BaseModel):
    """Public user profile"""

    user_id: int
    firstname: str
    lastname: str
    email: str


class UpdateInfoRequest(BaseModel):
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    email: Optional[str] = None


class UpdatePasswordRequest(BaseModel):
    user_id: int
    password: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    message: str


class SaveTransactionRequest(BaseModel):
    """Request body for POST /v1/transactions/save/manual"""

    spender_id: int
    date: Optional[datetime] = None
    amount: float
    category: Optional[str] = None
    transaction_type: str = Field(..., min_length=1)
    note: Optional[str] = Field(None, max_length=255)
    image_url: Optional[str] = None


class UpdateTransactionRequest(BaseModel):
    """Partial update; omitted or empty fields are left unchanged"""

    date: Optional[datetime] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    transaction_type: Optional[str] = None
    note: Optional[str] = Field(None, max_length=255)


class SaveTransactionResponse(BaseModel):
    transaction_id: int


class TransactionItem(BaseModel):
    """Transaction row in detail, category, and period listings"""

    id: int
    date: datetime
    amount: float
    category: str
    image_url: Optional[str] = None


class TransactionListItem(TransactionItem):
    """Transaction row in the unfiltered listing"""

    transaction_type: str


class SummaryResponse(BaseModel):
    total_amount: float
    average_amount_per_day: float
    total_transaction: int


class BalanceResponse(BaseModel):
    total_amount_earned: float
    total_amount_spent: float
    total_amount_saved: float
