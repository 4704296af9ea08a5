"""
ZAP Confeitaria - Order Models
Pedidos (orçamentos e encomendas) e seus itens
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Boolean, Date, DateTime, Text, Integer, Float, ForeignKey
from sqlalchemy.orm import relationship

from app.database import Base


class OrderStatus(str, Enum):
    """Etapas do pedido (colunas do Kanban)"""
    QUOTE = "quote"                        # Orçamento
    AWAITING_DEPOSIT = "awaiting_deposit"  # Aguardando sinal
    IN_PRODUCTION = "in_production"        # Em produção
    READY = "ready"                        # Pronto
    DELIVERED = "delivered"                # Entregue
    CANCELLED = "cancelled"                # Cancelado


class PaymentMethod(str, Enum):
    """Forma de pagamento do cliente"""
    PIX = "pix"
    CREDIT_CARD = "credit_card"
    LINK = "link"


def format_order_number(order_number) -> str:
    """Número do pedido para exibição (#0001)"""
    if order_number is None:
        return ""
    return f"#{int(order_number):04d}"


class Order(Base):
    """Pedido de um cliente"""
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="SET NULL"), index=True)

    order_number = Column(Integer, index=True)
    status = Column(String(20), default=OrderStatus.QUOTE.value, nullable=False, index=True)

    # Entrega
    delivery_date = Column(Date, index=True)
    delivery_time = Column(String(5))
    delivery_address = Column(Text)
    delivery_fee = Column(Float, default=0)

    # Valores
    total_amount = Column(Float, default=0)
    deposit_paid = Column(Boolean, default=False)
    deposit_amount = Column(Float)
    full_payment_received = Column(Boolean, default=False)
    payment_method = Column(String(20))
    payment_fee = Column(Float, default=0)

    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    client = relationship("Client", lazy="selectin")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
        lazy="selectin"
    )

    @property
    def client_name(self) -> str:
        return self.client.name if self.client else "Cliente"

    @property
    def display_number(self) -> str:
        return format_order_number(self.order_number)

    def to_dict(self):
        return {
            "id": self.id,
            "order_number": self.order_number,
            "display_number": self.display_number,
            "client_id": self.client_id,
            "client": self.client.to_dict() if self.client else None,
            "status": self.status,
            "delivery_date": self.delivery_date.isoformat() if self.delivery_date else None,
            "delivery_time": self.delivery_time,
            "delivery_address": self.delivery_address,
            "delivery_fee": self.delivery_fee or 0,
            "total_amount": self.total_amount or 0,
            "deposit_paid": bool(self.deposit_paid),
            "deposit_amount": self.deposit_amount,
            "full_payment_received": bool(self.full_payment_received),
            "payment_method": self.payment_method,
            "payment_fee": self.payment_fee or 0,
            "notes": self.notes,
            "items": [item.to_dict() for item in self.items],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None
        }


class OrderItem(Base):
    """Item do pedido (produto do cardápio ou item adicional avulso)"""
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    # Sem produto = item adicional
    product_id = Column(String(36), ForeignKey("products.id", ondelete="SET NULL"))

    product_name = Column(String(255), nullable=False)
    quantity = Column(Float, nullable=False, default=1)
    unit_price = Column(Float, nullable=False, default=0)
    unit_type = Column(String(10), default="unit")
    is_gift = Column(Boolean, default=False)
    position = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)

    order = relationship("Order", back_populates="items")

    @property
    def subtotal(self) -> float:
        return (self.quantity or 0) * (self.unit_price or 0)

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "unit_type": self.unit_type,
            "is_gift": bool(self.is_gift),
            "is_additional": self.product_id is None,
            "subtotal": self.subtotal
        }
