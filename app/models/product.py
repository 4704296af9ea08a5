"""
ZAP Confeitaria - Product Models
Produtos e categorias do cardápio
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, Text, Integer, Float, ForeignKey
from sqlalchemy.orm import relationship

from app.database import Base


class UnitType(str, Enum):
    """Unidade de venda"""
    UNIT = "unit"
    KG = "kg"
    CENTO = "cento"


class ProductCategory(Base):
    """Categoria de produtos (Bolos, Doces, ...)"""
    __tablename__ = "product_categories"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    emoji = Column(String(16))
    color = Column(String(30))
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "emoji": self.emoji,
            "color": self.color,
            "display_order": self.display_order
        }


class Product(Base):
    """Produto vendido pela confeitaria"""
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("product_categories.id", ondelete="SET NULL"), index=True)

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    cost_price = Column(Float, default=0)
    sale_price = Column(Float, default=0)
    unit_type = Column(String(10), default=UnitType.UNIT.value)
    photo_url = Column(String(500))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    category = relationship("ProductCategory", lazy="selectin")

    def to_dict(self):
        return {
            "id": self.id,
            "category_id": self.category_id,
            "category": self.category.to_dict() if self.category else None,
            "name": self.name,
            "description": self.description,
            "cost_price": self.cost_price or 0,
            "sale_price": self.sale_price or 0,
            "unit_type": self.unit_type,
            "photo_url": self.photo_url,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
