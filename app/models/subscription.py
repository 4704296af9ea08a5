"""
ZAP Confeitaria - Subscription Model
Assinatura da plataforma (sincronizada com o Stripe)
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.database import Base


class SubscriptionStatus(str, Enum):
    """Status da assinatura (mesmos valores do Stripe)"""
    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    INCOMPLETE = "incomplete"
    UNPAID = "unpaid"
    INACTIVE = "inactive"


class PlanType(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Subscription(Base):
    """Assinatura de uma conta"""
    __tablename__ = "subscriptions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    stripe_customer_id = Column(String(255), index=True)
    stripe_subscription_id = Column(String(255), index=True)
    status = Column(String(20), default=SubscriptionStatus.INCOMPLETE.value)
    plan_type = Column(String(10))
    current_period_start = Column(DateTime)
    current_period_end = Column(DateTime)
    cancel_at_period_end = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="subscription")

    @property
    def is_active(self) -> bool:
        """Assinatura válida (ativa ou em trial e dentro do período)"""
        if self.status not in (SubscriptionStatus.ACTIVE.value, SubscriptionStatus.TRIALING.value):
            return False
        if self.current_period_end and self.current_period_end < datetime.utcnow():
            return False
        return True

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "stripe_customer_id": self.stripe_customer_id,
            "stripe_subscription_id": self.stripe_subscription_id,
            "status": self.status,
            "plan_type": self.plan_type,
            "current_period_start": self.current_period_start.isoformat() if self.current_period_start else None,
            "current_period_end": self.current_period_end.isoformat() if self.current_period_end else None,
            "cancel_at_period_end": bool(self.cancel_at_period_end),
            "is_active": self.is_active
        }
