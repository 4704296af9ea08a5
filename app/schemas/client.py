"""
ZAP Confeitaria - Client Schemas
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import date, datetime


class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[EmailStr] = None
    birthday: Optional[date] = None
    cpf_cnpj: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Nome é obrigatório")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def empty_email_as_none(cls, v):
        return v or None


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[EmailStr] = None
    birthday: Optional[date] = None
    cpf_cnpj: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def empty_email_as_none(cls, v):
        return v or None


class ClientResponse(BaseModel):
    id: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    birthday: Optional[date] = None
    cpf_cnpj: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
