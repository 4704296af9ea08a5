"""
ZAP Confeitaria - Admin API
Visão geral das contas da plataforma
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from app.database import get_db
from app.models import User, SubscriptionStatus
from app.api.auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users")
async def list_users(
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """Lista as contas com empresa e situação da assinatura"""
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    users = result.scalars().all()

    logger.info(f"Admin {admin.email} listou {len(users)} contas")

    return {
        "users": [
            {
                "id": u.id,
                "email": u.email,
                "full_name": u.full_name,
                "is_active": u.is_active,
                "created_at": u.created_at.isoformat() if u.created_at else None,
                "last_login_at": u.last_login_at.isoformat() if u.last_login_at else None,
                "company_name": u.profile.company_name if u.profile else None,
                "subscription_status": u.subscription.status if u.subscription else SubscriptionStatus.INACTIVE.value,
                "plan_type": u.subscription.plan_type if u.subscription else None,
                "current_period_end": (
                    u.subscription.current_period_end.isoformat()
                    if u.subscription and u.subscription.current_period_end else None
                ),
                "cancel_at_period_end": bool(u.subscription.cancel_at_period_end) if u.subscription else False,
                "stripe_customer_id": u.subscription.stripe_customer_id if u.subscription else None,
            }
            for u in users
        ]
    }
