"""
ZAP Confeitaria - Notifications API
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.database import get_db
from app.models import Client, Order, User
from app.schemas import NotificationsResponse
from app.api.auth import require_subscription
from app.services.notifications import build_notifications

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationsResponse)
async def get_notifications(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Aniversários, entregas dos próximos 7 dias e sinais em atraso"""
    result = await db.execute(
        select(Client).where(Client.user_id == user.id, Client.birthday.isnot(None))
    )
    clients = result.scalars().all()

    result = await db.execute(select(Order).where(Order.user_id == user.id))
    orders = result.scalars().all()

    return build_notifications(clients, orders)
