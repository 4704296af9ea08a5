"""
ZAP Confeitaria - Finances API
Resumo financeiro, comparação mensal e produtos mais vendidos
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.database import get_db
from app.models import Transaction, Order, Product, User
from app.schemas import FinanceSummaryResponse, MonthComparisonResponse, TopProduct
from app.api.auth import require_subscription
from app.services import finance

router = APIRouter(prefix="/finances", tags=["Finances"])


async def load_finance_data(db: AsyncSession, user_id: str):
    """Lançamentos, pedidos (com itens) e produtos da conta"""
    result = await db.execute(select(Transaction).where(Transaction.user_id == user_id))
    transactions = list(result.scalars().all())

    result = await db.execute(select(Order).where(Order.user_id == user_id))
    orders = list(result.scalars().all())

    result = await db.execute(select(Product).where(Product.user_id == user_id))
    products = list(result.scalars().all())

    return transactions, orders, products


def resolve_period(period: str, year: Optional[int], month: Optional[int]) -> finance.PeriodRange:
    if (year is None) != (month is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Informe ano e mês juntos"
        )
    try:
        return finance.period_range(period, year=year, month=month)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.get("/summary", response_model=FinanceSummaryResponse)
async def get_finance_summary(
    period: str = Query("month"),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Totais, lucro bruto e despesas por categoria do período"""
    rng = resolve_period(period, year, month)
    transactions, orders, products = await load_finance_data(db, user.id)

    summary = finance.summarize(transactions, orders, products, rng)

    return {
        "period": period,
        "period_label": summary["period_label"],
        "period_dates": summary["period_dates"],
        "totals": summary["totals"],
        "gross_profit": summary["gross_profit"],
        "expenses_by_category": summary["expenses_by_category"],
    }


@router.get("/month-comparison", response_model=MonthComparisonResponse)
async def get_month_comparison(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Mês escolhido (padrão: atual) contra o mês anterior"""
    today = date.today()
    result = await db.execute(select(Transaction).where(Transaction.user_id == user.id))

    return finance.month_comparison(
        result.scalars().all(),
        year or today.year,
        month or today.month
    )


@router.get("/top-products", response_model=List[TopProduct])
async def get_top_products(
    period: str = Query("month"),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    limit: int = Query(5, ge=1, le=50),
    sort_by: str = Query("revenue", pattern="^(revenue|quantity|orders)$"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Produtos mais vendidos nos pedidos entregues do período"""
    rng = resolve_period(period, year, month)
    result = await db.execute(select(Order).where(Order.user_id == user.id))

    delivered = finance.delivered_orders(result.scalars().all(), rng)
    return finance.top_products(delivered, limit=limit, sort_by=sort_by)
