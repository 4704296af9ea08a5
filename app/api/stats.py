"""
ZAP Confeitaria - Statistics API
Números do dashboard da confeitaria
"""
from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.database import get_db
from app.models import Order, OrderStatus, Client, Product, Transaction, User
from app.api.auth import require_subscription
from app.services import finance

router = APIRouter(prefix="/stats", tags=["Statistics"])


@router.get("/dashboard")
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Estatísticas para o dashboard"""
    today = date.today()
    closed = (OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value)

    result = await db.execute(
        select(Order.status, Order.total_amount, Order.deposit_paid, Order.full_payment_received, Order.delivery_date)
        .where(Order.user_id == user.id)
    )
    orders = result.all()

    active_orders = [o for o in orders if o.status not in closed]

    # Sinal pendente: orçamento ou aguardando sinal, sem nenhum pagamento
    pending_deposit = [
        o for o in active_orders
        if o.status in (OrderStatus.QUOTE.value, OrderStatus.AWAITING_DEPOSIT.value)
        and not o.deposit_paid
        and not o.full_payment_received
    ]

    orders_by_status = {s.value: 0 for s in OrderStatus}
    for o in orders:
        orders_by_status[o.status] = orders_by_status.get(o.status, 0) + 1

    # Totais do mês
    rng = finance.period_range("month", today)
    result = await db.execute(
        select(Transaction).where(
            Transaction.user_id == user.id,
            Transaction.date >= rng.start,
            Transaction.date <= rng.end
        )
    )
    month_totals = finance.totals(result.scalars().all())

    result = await db.execute(select(func.count(Client.id)).where(Client.user_id == user.id))
    total_clients = result.scalar() or 0

    result = await db.execute(select(func.count(Product.id)).where(Product.user_id == user.id))
    total_products = result.scalar() or 0

    return {
        "orders": {
            "total": len(orders),
            "active": len(active_orders),
            "by_status": orders_by_status,
            "deliveries_today": sum(1 for o in active_orders if o.delivery_date == today),
            "fully_paid": sum(1 for o in active_orders if o.full_payment_received),
        },
        "pending_deposits": {
            "count": len(pending_deposit),
            "amount": round(sum((o.total_amount or 0) / 2 for o in pending_deposit), 2),
        },
        "month": {
            "label": rng.label,
            "income": round(month_totals["total_income"], 2),
            "expenses": round(month_totals["total_expenses"], 2),
            "balance": round(month_totals["balance"], 2),
        },
        "clients": {"total": total_clients},
        "products": {"total": total_products},
    }
