"""
ZAP Confeitaria - Orders API
Pedidos, etapas do Kanban, sinal, pagamentos e mensagens de WhatsApp
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_

from app.database import get_db
from app.models import Order, Client, User
from app.schemas import (
    OrderCreate,
    OrderUpdate,
    OrderResponse,
    StatusUpdate,
    DepositUpdate,
    FullPaymentRequest,
    TransactionResponse,
    WhatsAppResponse
)
from app.models.order import OrderStatus
from app.api.auth import require_subscription
from app.services import order_lifecycle
from app.services.order_lifecycle import OrderLifecycleError
from app.services.whatsapp import (
    TEMPLATES,
    available_templates,
    order_context,
    process_template,
    whatsapp_link,
    whatsapp_phone
)

router = APIRouter(prefix="/orders", tags=["Orders"])


async def _get_order(db: AsyncSession, user: User, order_id: str) -> Order:
    order = await order_lifecycle.get_order(db, user.id, order_id)

    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Pedido não encontrado"
        )

    return order


def _business_error(e: OrderLifecycleError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(e)
    )


@router.get("", response_model=List[OrderResponse])
async def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    client_id: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(200, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Lista pedidos (filtro por etapa, cliente ou nome do cliente)"""
    query = select(Order).where(Order.user_id == user.id)

    if status_filter:
        query = query.where(Order.status == status_filter.value)

    if client_id:
        query = query.where(Order.client_id == client_id)

    if search:
        query = query.outerjoin(Client, Order.client_id == Client.id).where(
            or_(
                Client.name.ilike(f"%{search}%"),
                Order.notes.ilike(f"%{search}%")
            )
        )

    query = query.order_by(Order.delivery_date.is_(None), Order.delivery_date, Order.created_at.desc())
    query = query.offset(skip).limit(limit)

    result = await db.execute(query)
    orders = result.scalars().all()

    return [o.to_dict() for o in orders]


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Retorna um pedido com cliente e itens"""
    order = await _get_order(db, user, order_id)
    return order.to_dict()


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    request: OrderCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Cria pedido na etapa de orçamento"""
    try:
        order = await order_lifecycle.create_order(db, user.id, request)
    except OrderLifecycleError as e:
        raise _business_error(e)

    return order.to_dict()


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: str,
    request: OrderUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Atualiza dados e itens do pedido (total recalculado)"""
    order = await _get_order(db, user, order_id)

    try:
        order = await order_lifecycle.update_order(db, order, request)
    except OrderLifecycleError as e:
        raise _business_error(e)

    return order.to_dict()


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    request: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Move o pedido de etapa (cancelar remove os lançamentos do pedido)"""
    order = await _get_order(db, user, order_id)

    try:
        order = await order_lifecycle.update_status(db, order, request.status, request.payment)
    except OrderLifecycleError as e:
        raise _business_error(e)

    return order.to_dict()


@router.post("/{order_id}/deposit", response_model=OrderResponse)
async def set_order_deposit(
    order_id: str,
    request: DepositUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Marca ou desmarca o sinal"""
    order = await _get_order(db, user, order_id)

    try:
        order = await order_lifecycle.set_deposit(
            db, order, request.paid, amount=request.amount, payment=request.payment
        )
    except OrderLifecycleError as e:
        raise _business_error(e)

    return order.to_dict()


@router.post("/{order_id}/full-payment", response_model=OrderResponse)
async def mark_full_payment(
    order_id: str,
    request: FullPaymentRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Registra pagamento integral antecipado"""
    order = await _get_order(db, user, order_id)

    try:
        order = await order_lifecycle.mark_full_payment(db, order, request)
    except OrderLifecycleError as e:
        raise _business_error(e)

    return order.to_dict()


@router.delete("/{order_id}/full-payment", response_model=OrderResponse)
async def undo_full_payment(
    order_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Desfaz o pagamento integral"""
    order = await _get_order(db, user, order_id)

    try:
        order = await order_lifecycle.undo_full_payment(db, order)
    except OrderLifecycleError as e:
        raise _business_error(e)

    return order.to_dict()


@router.delete("/{order_id}")
async def delete_order(
    order_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Remove o pedido, seus itens e lançamentos"""
    order = await _get_order(db, user, order_id)
    await order_lifecycle.delete_order(db, order)

    return {"message": "Pedido removido com sucesso"}


@router.get("/{order_id}/transactions", response_model=List[TransactionResponse])
async def get_order_transactions(
    order_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Lançamentos financeiros gerados pelo pedido"""
    order = await _get_order(db, user, order_id)
    transactions = await order_lifecycle.order_transactions(db, order)

    return [t.to_dict() for t in transactions]


@router.get("/{order_id}/whatsapp", response_model=WhatsAppResponse)
async def get_order_whatsapp(
    order_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Mensagens prontas para a etapa atual, com link wa.me do cliente"""
    order = await _get_order(db, user, order_id)

    phone = order.client.phone if order.client else None
    context = order_context(order, user.profile)

    templates = []
    for template_type in available_templates(
        order.status,
        bool(order.deposit_paid),
        bool(order.full_payment_received)
    ):
        message = process_template(template_type, context)
        templates.append({
            "type": template_type,
            "label": TEMPLATES[template_type]["label"],
            "message": message,
            "url": whatsapp_link(phone, message),
        })

    return {"phone": whatsapp_phone(phone), "templates": templates}
