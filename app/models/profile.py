"""
ZAP Confeitaria - Profile Model
Dados da empresa usados em orçamentos, PDFs e mensagens
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Text, Integer, ForeignKey, JSON
from sqlalchemy.orm import relationship

from app.database import Base


class Profile(Base):
    """Perfil da confeitaria (um por conta)"""
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    company_name = Column(String(255))
    logo_url = Column(String(500))
    pix_key = Column(String(255))
    bank_details = Column(Text)

    # Orçamento em PDF
    include_terms_in_pdf = Column(Boolean, default=True)
    custom_terms = Column(Text)

    # Preferências
    hidden_kanban_columns = Column(JSON, default=list)
    order_number_start = Column(Integer, default=1)
    pwa_install_suggested = Column(Boolean, default=False)
    google_review_url = Column(String(500))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="profile")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "company_name": self.company_name,
            "logo_url": self.logo_url,
            "pix_key": self.pix_key,
            "bank_details": self.bank_details,
            "include_terms_in_pdf": self.include_terms_in_pdf,
            "custom_terms": self.custom_terms,
            "hidden_kanban_columns": self.hidden_kanban_columns or [],
            "order_number_start": self.order_number_start,
            "pwa_install_suggested": self.pwa_install_suggested,
            "google_review_url": self.google_review_url,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None
        }
