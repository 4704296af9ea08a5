"""
ZAP Confeitaria - Order Schemas
"""
from pydantic import BaseModel, Field, model_validator
from typing import List, Literal, Optional
from datetime import date, datetime

from app.models.order import OrderStatus, PaymentMethod
from app.models.product import UnitType


class OrderItemInput(BaseModel):
    """Item do pedido. Sem product_id = item adicional avulso"""
    product_id: Optional[str] = None
    product_name: str = Field(..., min_length=1, max_length=255)
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    unit_type: UnitType = UnitType.UNIT
    is_gift: bool = False


class OrderCreate(BaseModel):
    client_id: Optional[str] = None
    delivery_date: Optional[date] = None
    delivery_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    delivery_address: Optional[str] = None
    delivery_fee: float = Field(0, ge=0)
    notes: Optional[str] = None
    items: List[OrderItemInput] = Field(default_factory=list)


class OrderUpdate(BaseModel):
    client_id: Optional[str] = None
    delivery_date: Optional[date] = None
    delivery_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    delivery_address: Optional[str] = None
    delivery_fee: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    # Quando enviado, substitui todos os itens
    items: Optional[List[OrderItemInput]] = None


class PaymentInfo(BaseModel):
    """Forma de pagamento e taxa cobrada pela operadora"""
    method: PaymentMethod
    fee_type: Literal["value", "percentage"] = "value"
    fee: float = Field(0, ge=0)

    @model_validator(mode="after")
    def check_percentage(self):
        if self.fee_type == "percentage" and self.fee > 100:
            raise ValueError("Percentual da taxa deve ser no máximo 100")
        return self


class StatusUpdate(BaseModel):
    status: OrderStatus
    # Pagamento na entrega (usado quando o destino é "delivered")
    payment: Optional[PaymentInfo] = None


class DepositUpdate(BaseModel):
    paid: bool
    # Padrão: 50% do total
    amount: Optional[float] = Field(None, gt=0)
    payment: Optional[PaymentInfo] = None


class FullPaymentRequest(PaymentInfo):
    pass


class OrderItemResponse(BaseModel):
    id: str
    product_id: Optional[str] = None
    product_name: str
    quantity: float
    unit_price: float
    unit_type: Optional[str] = None
    is_gift: bool = False
    is_additional: bool = False
    subtotal: float = 0


class OrderResponse(BaseModel):
    id: str
    order_number: Optional[int] = None
    display_number: str = ""
    client_id: Optional[str] = None
    client: Optional[dict] = None
    status: OrderStatus
    delivery_date: Optional[date] = None
    delivery_time: Optional[str] = None
    delivery_address: Optional[str] = None
    delivery_fee: float = 0
    total_amount: float = 0
    deposit_paid: bool = False
    deposit_amount: Optional[float] = None
    full_payment_received: bool = False
    payment_method: Optional[str] = None
    payment_fee: float = 0
    notes: Optional[str] = None
    items: List[OrderItemResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WhatsAppTemplateResponse(BaseModel):
    type: str
    label: str
    message: str
    url: Optional[str] = None


class WhatsAppResponse(BaseModel):
    phone: Optional[str] = None
    templates: List[WhatsAppTemplateResponse]
