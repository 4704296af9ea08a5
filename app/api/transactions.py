"""
ZAP Confeitaria - Transactions API
Lançamentos manuais de receitas e despesas
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.database import get_db
from app.models import Transaction, TransactionType, Order, User
from app.schemas import TransactionCreate, TransactionUpdate, TransactionResponse
from app.api.auth import require_subscription
from app.services.finance import KNOWN_CATEGORIES, parse_category, period_range

router = APIRouter(prefix="/transactions", tags=["Transactions"])


def _resolve_category(category: Optional[str], description: str) -> Optional[str]:
    """Categoria informada ou extraída do prefixo da descrição"""
    if category:
        if category not in KNOWN_CATEGORIES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Categoria inválida: {category}"
            )
        return category
    return parse_category(description)[0]


async def _get_transaction(db: AsyncSession, user: User, transaction_id: str) -> Transaction:
    result = await db.execute(
        select(Transaction).where(
            Transaction.id == transaction_id,
            Transaction.user_id == user.id
        )
    )
    transaction = result.scalar_one_or_none()

    if not transaction:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lançamento não encontrado"
        )

    return transaction


@router.get("", response_model=List[TransactionResponse])
async def list_transactions(
    type: Optional[TransactionType] = Query(None),
    period: Optional[str] = Query(None, pattern="^(week|month|year|all)$"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    category: Optional[str] = Query(None),
    order_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Lista lançamentos, mais recentes primeiro"""
    query = select(Transaction).where(Transaction.user_id == user.id)

    if type:
        query = query.where(Transaction.type == type.value)

    if period:
        rng = period_range(period)
        start_date = start_date or rng.start
        end_date = end_date or rng.end

    if start_date:
        query = query.where(Transaction.date >= start_date)
    if end_date:
        query = query.where(Transaction.date <= end_date)

    if category:
        query = query.where(Transaction.category == category)

    if order_id:
        query = query.where(Transaction.order_id == order_id)

    query = query.order_by(Transaction.date.desc(), Transaction.created_at.desc())

    result = await db.execute(query)
    return [t.to_dict() for t in result.scalars().all()]


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    request: TransactionCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Cria lançamento manual"""
    if request.order_id:
        result = await db.execute(
            select(Order.id).where(Order.id == request.order_id, Order.user_id == user.id)
        )
        if result.scalar_one_or_none() is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Pedido inválido"
            )

    transaction = Transaction(
        user_id=user.id,
        order_id=request.order_id,
        type=request.type.value,
        category=_resolve_category(request.category, request.description),
        description=request.description,
        amount=round(request.amount, 2),
        date=request.date
    )
    db.add(transaction)
    await db.commit()
    await db.refresh(transaction)

    return transaction.to_dict()


@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: str,
    request: TransactionUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Atualiza lançamento"""
    transaction = await _get_transaction(db, user, transaction_id)

    update_data = request.model_dump(exclude_unset=True)
    if update_data.get("type") is not None:
        update_data["type"] = update_data["type"].value
    if update_data.get("amount") is not None:
        update_data["amount"] = round(update_data["amount"], 2)

    for field, value in update_data.items():
        setattr(transaction, field, value)

    if "category" in update_data:
        transaction.category = _resolve_category(update_data["category"], transaction.description)
    elif "description" in update_data:
        transaction.category = parse_category(transaction.description)[0] or transaction.category

    await db.commit()
    await db.refresh(transaction)

    return transaction.to_dict()


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Remove lançamento"""
    transaction = await _get_transaction(db, user, transaction_id)

    await db.delete(transaction)
    await db.commit()

    return {"message": "Lançamento removido com sucesso"}
