"""
ZAP Confeitaria - Product Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime

from app.models.product import UnitType


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    emoji: Optional[str] = Field(None, max_length=16)
    color: Optional[str] = Field(None, max_length=30)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    emoji: Optional[str] = Field(None, max_length=16)
    color: Optional[str] = Field(None, max_length=30)
    display_order: Optional[int] = Field(None, ge=0)

    @field_validator("name", "display_order")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Campo obrigatório não pode ser nulo")
        return v


class CategoryResponse(BaseModel):
    id: str
    name: str
    emoji: Optional[str] = None
    color: Optional[str] = None
    display_order: int = 0

    class Config:
        from_attributes = True


class CategoryReorderRequest(BaseModel):
    """Ids das categorias na nova ordem"""
    category_ids: List[str] = Field(..., min_length=1)


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: Optional[str] = None
    cost_price: float = Field(0, ge=0)
    sale_price: float = Field(0, ge=0)
    unit_type: UnitType = UnitType.UNIT
    photo_url: Optional[str] = Field(None, max_length=500)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: Optional[str] = None
    cost_price: Optional[float] = Field(None, ge=0)
    sale_price: Optional[float] = Field(None, ge=0)
    unit_type: Optional[UnitType] = None
    photo_url: Optional[str] = Field(None, max_length=500)

    @field_validator("name", "cost_price", "sale_price", "unit_type")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Campo obrigatório não pode ser nulo")
        return v


class ProductResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    category: Optional[CategoryResponse] = None
    cost_price: float = 0
    sale_price: float = 0
    unit_type: str = UnitType.UNIT.value
    photo_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
