"""
ZAP Confeitaria - Profile Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from app.models.order import OrderStatus


class ProfileUpdate(BaseModel):
    company_name: Optional[str] = Field(None, max_length=255)
    pix_key: Optional[str] = Field(None, max_length=255)
    bank_details: Optional[str] = None
    include_terms_in_pdf: Optional[bool] = None
    custom_terms: Optional[str] = None
    hidden_kanban_columns: Optional[List[OrderStatus]] = None
    order_number_start: Optional[int] = Field(None, ge=1)
    pwa_install_suggested: Optional[bool] = None
    google_review_url: Optional[str] = Field(None, max_length=500)

    @field_validator("include_terms_in_pdf", "hidden_kanban_columns", "order_number_start", "pwa_install_suggested")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Campo obrigatório não pode ser nulo")
        return v


class ProfileResponse(BaseModel):
    id: str
    user_id: str
    company_name: Optional[str] = None
    logo_url: Optional[str] = None
    pix_key: Optional[str] = None
    bank_details: Optional[str] = None
    include_terms_in_pdf: bool = True
    custom_terms: Optional[str] = None
    hidden_kanban_columns: List[str] = []
    order_number_start: int = 1
    pwa_install_suggested: bool = False
    google_review_url: Optional[str] = None

    class Config:
        from_attributes = True
