"""
ZAP Confeitaria - Client Model
Clientes da confeitaria
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Date, DateTime, Text, ForeignKey

from app.database import Base


class Client(Base):
    """Cliente que faz encomendas"""
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False, index=True)
    phone = Column(String(30))
    email = Column(String(255))
    birthday = Column(Date)
    cpf_cnpj = Column(String(20))
    address = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "birthday": self.birthday.isoformat() if self.birthday else None,
            "cpf_cnpj": self.cpf_cnpj,
            "address": self.address,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None
        }
