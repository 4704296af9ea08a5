"""
ZAP Confeitaria - Transaction Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date as date_type, datetime

from app.models.transaction import TransactionType


class TransactionCreate(BaseModel):
    type: TransactionType
    description: str = Field(..., min_length=1, max_length=500)
    amount: float = Field(..., gt=0)
    date: date_type = Field(default_factory=date_type.today)
    # Quando ausente, é extraída do prefixo da descrição ("Insumos - Farinha")
    category: Optional[str] = Field(None, max_length=50)
    order_id: Optional[str] = None

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Descrição é obrigatória")
        return v


class TransactionUpdate(BaseModel):
    type: Optional[TransactionType] = None
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    amount: Optional[float] = Field(None, gt=0)
    date: Optional[date_type] = None
    category: Optional[str] = Field(None, max_length=50)

    @field_validator("type", "description", "amount", "date")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Campo obrigatório não pode ser nulo")
        return v


class TransactionResponse(BaseModel):
    id: str
    order_id: Optional[str] = None
    type: TransactionType
    category: Optional[str] = None
    description: str
    amount: float
    date: date_type
    is_automatic: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
