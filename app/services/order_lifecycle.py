"""
ZAP Confeitaria - Order Lifecycle Service
Regras do ciclo de vida do pedido e lançamentos financeiros automáticos.

Todas as funções apenas fazem flush: o commit é feito uma única vez pelo
get_db no final da requisição, então pedido, itens e lançamentos são
gravados juntos ou nada é gravado.
"""
import logging
import math
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import (
    Client,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    Profile,
    Transaction,
    TransactionType,
    TransactionCategory,
    format_order_number,
)
from app.schemas.order import OrderCreate, OrderUpdate, OrderItemInput, PaymentInfo

logger = logging.getLogger(__name__)

METHOD_LABELS = {
    "pix": "Pix",
    "credit_card": "Cartão",
    "link": "Link",
}

# Etapas a partir das quais o pagamento move o pedido para produção
PRE_PRODUCTION = (OrderStatus.QUOTE.value, OrderStatus.AWAITING_DEPOSIT.value)


class OrderLifecycleError(Exception):
    """Operação não permitida no estado atual do pedido"""
    pass


def compute_total(items: Iterable, delivery_fee: Optional[float] = 0) -> float:
    """Total = soma dos itens que não são brinde + taxa de entrega"""
    items_total = sum(
        (item.quantity or 0) * (item.unit_price or 0)
        for item in items
        if not item.is_gift
    )
    return round(items_total + (delivery_fee or 0), 2)


def compute_fee(base: float, fee_type: str, fee: float) -> float:
    """Taxa da operadora: valor fixo ou percentual sobre a base"""
    if not fee:
        return 0.0
    if fee_type == "percentage":
        return round(base * fee / 100, 2)
    return round(fee, 2)


def method_label(method) -> str:
    if method is None:
        return ""
    value = method.value if hasattr(method, "value") else method
    return METHOD_LABELS.get(value, "")


def _method_suffix(payment: Optional[PaymentInfo]) -> str:
    label = method_label(payment.method) if payment else ""
    return f" ({label})" if label else ""


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


async def get_order(db: AsyncSession, user_id: str, order_id: str) -> Optional[Order]:
    """Busca pedido da conta (None se não existir ou for de outra conta)"""
    result = await db.execute(
        select(Order).where(Order.id == order_id, Order.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def next_order_number(db: AsyncSession, user_id: str) -> int:
    """Próximo número: maior existente + 1, respeitando o início configurado no perfil"""
    result = await db.execute(
        select(func.max(Order.order_number)).where(Order.user_id == user_id)
    )
    max_number = result.scalar()

    result = await db.execute(
        select(Profile.order_number_start).where(Profile.user_id == user_id)
    )
    start = result.scalar() or 1

    sequential = (max_number + 1) if max_number else 1
    return max(sequential, start)


async def _check_client(db: AsyncSession, user_id: str, client_id: Optional[str]):
    if not client_id:
        return
    result = await db.execute(
        select(Client.id).where(Client.id == client_id, Client.user_id == user_id)
    )
    if result.scalar_one_or_none() is None:
        raise OrderLifecycleError("Cliente não encontrado")


async def _build_items(db: AsyncSession, user_id: str, items: List[OrderItemInput]) -> List[OrderItem]:
    product_ids = {i.product_id for i in items if i.product_id}
    if product_ids:
        result = await db.execute(
            select(Product.id).where(Product.id.in_(product_ids), Product.user_id == user_id)
        )
        found = set(result.scalars().all())
        missing = product_ids - found
        if missing:
            raise OrderLifecycleError("Produto não encontrado")

    return [
        OrderItem(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            unit_type=item.unit_type.value,
            is_gift=item.is_gift,
            position=position,
        )
        for position, item in enumerate(items)
    ]


async def _reload(db: AsyncSession, order: Order) -> Order:
    await db.flush()
    await db.refresh(order, attribute_names=["client", "items"])
    return order


async def create_order(db: AsyncSession, user_id: str, data: OrderCreate) -> Order:
    """Cria pedido como orçamento, com número sequencial e total calculado"""
    await _check_client(db, user_id, data.client_id)
    items = await _build_items(db, user_id, data.items)

    order = Order(
        user_id=user_id,
        client_id=data.client_id,
        order_number=await next_order_number(db, user_id),
        status=OrderStatus.QUOTE.value,
        delivery_date=data.delivery_date,
        delivery_time=data.delivery_time or None,
        delivery_address=data.delivery_address or None,
        delivery_fee=data.delivery_fee or 0,
        total_amount=compute_total(data.items, data.delivery_fee),
        deposit_paid=False,
        full_payment_received=False,
        payment_fee=0,
        notes=data.notes or None,
        items=items,
    )
    db.add(order)
    await _reload(db, order)

    logger.info(f"Pedido {order.display_number} criado (total {order.total_amount:.2f})")
    return order


async def update_order(db: AsyncSession, order: Order, data: OrderUpdate) -> Order:
    """Atualiza dados do pedido; itens enviados substituem os atuais"""
    update_data = data.model_dump(exclude_unset=True, exclude={"items"})

    if "client_id" in update_data:
        await _check_client(db, order.user_id, update_data["client_id"])

    for field, value in update_data.items():
        setattr(order, field, value)

    if data.items is not None:
        order.items = await _build_items(db, order.user_id, data.items)
        order.total_amount = compute_total(data.items, order.delivery_fee)
    else:
        order.total_amount = compute_total(order.items, order.delivery_fee)

    await _reload(db, order)
    logger.info(f"Pedido {order.display_number} atualizado (total {order.total_amount:.2f})")
    return order


async def _delete_postings(db: AsyncSession, order: Order, *categories: TransactionCategory) -> int:
    query = delete(Transaction).where(Transaction.order_id == order.id)
    if categories:
        query = query.where(
            Transaction.is_automatic.is_(True),
            Transaction.category.in_([c.value for c in categories])
        )
    result = await db.execute(query)
    return result.rowcount or 0


def _post_income(db: AsyncSession, order: Order, category: TransactionCategory, description: str, amount: float) -> Transaction:
    transaction = Transaction(
        user_id=order.user_id,
        order_id=order.id,
        type=TransactionType.INCOME.value,
        category=category.value,
        description=description,
        amount=round(amount, 2),
        date=date.today(),
        is_automatic=True,
    )
    db.add(transaction)
    logger.info(f"Pedido {order.display_number}: receita '{description}' {transaction.amount:.2f}")
    return transaction


async def update_status(
    db: AsyncSession,
    order: Order,
    target: OrderStatus,
    payment: Optional[PaymentInfo] = None
) -> Order:
    """
    Move o pedido para outra etapa.

    - cancelled: remove todos os lançamentos do pedido e zera sinal/pagamentos
    - saindo de delivered: remove o lançamento de pagamento final
    - entrando em delivered sem pagamento total: lança o pagamento final
      (total - sinal, descontada a taxa da forma de pagamento)
    """
    target = OrderStatus(target)
    previous = order.status

    if target.value == previous:
        return order

    if target == OrderStatus.CANCELLED:
        removed = await _delete_postings(db, order)
        order.status = target.value
        order.deposit_paid = False
        order.deposit_amount = None
        order.full_payment_received = False
        order.payment_method = None
        order.payment_fee = 0
        await db.flush()
        logger.info(f"Pedido {order.display_number} cancelado ({removed} lançamento(s) removido(s))")
        return order

    if previous == OrderStatus.DELIVERED.value:
        await _delete_postings(db, order, TransactionCategory.PAGAMENTO_FINAL)

    order.status = target.value

    total = order.total_amount or 0
    if target == OrderStatus.DELIVERED and not order.full_payment_received and total > 0:
        deposit = order.deposit_amount if order.deposit_amount is not None else total / 2
        remaining = total - deposit
        if remaining > 0:
            fee = compute_fee(remaining, payment.fee_type, payment.fee) if payment else 0
            _post_income(
                db,
                order,
                TransactionCategory.PAGAMENTO_FINAL,
                f"Pagamento Final{_method_suffix(payment)} - {order.client_name}",
                remaining - fee,
            )
        else:
            logger.warning(f"Pedido {order.display_number} entregue sem saldo restante")

    await db.flush()
    logger.info(f"Pedido {order.display_number}: {previous} -> {target.value}")
    return order


async def set_deposit(
    db: AsyncSession,
    order: Order,
    paid: bool,
    amount: Optional[float] = None,
    payment: Optional[PaymentInfo] = None
) -> Order:
    """Marca ou desmarca o sinal (padrão 50% do total) e lança a receita"""
    if order.status == OrderStatus.CANCELLED.value:
        raise OrderLifecycleError("Pedido cancelado não recebe sinal")

    # Um único lançamento de sinal por pedido
    await _delete_postings(db, order, TransactionCategory.SINAL)

    if not paid:
        order.deposit_paid = False
        order.deposit_amount = None
        await db.flush()
        logger.info(f"Pedido {order.display_number}: sinal desmarcado")
        return order

    total = order.total_amount or 0
    deposit = amount if amount is not None else round(total / 2, 2)
    if total > 0 and deposit > total:
        raise OrderLifecycleError("Valor do sinal maior que o total do pedido")

    order.deposit_paid = True
    order.deposit_amount = deposit if deposit > 0 else None

    if order.status in PRE_PRODUCTION:
        logger.info(f"Pedido {order.display_number}: {order.status} -> {OrderStatus.IN_PRODUCTION.value}")
        order.status = OrderStatus.IN_PRODUCTION.value

    if deposit > 0:
        percentage = _round_half_up(deposit / total * 100) if total > 0 else 50
        fee = compute_fee(deposit, payment.fee_type, payment.fee) if payment else 0
        _post_income(
            db,
            order,
            TransactionCategory.SINAL,
            f"Sinal {percentage}%{_method_suffix(payment)} - {order.client_name}",
            deposit - fee,
        )

    await db.flush()
    return order


async def mark_full_payment(db: AsyncSession, order: Order, payment: PaymentInfo) -> Order:
    """Registra pagamento integral antecipado (saldo restante menos a taxa)"""
    if order.status == OrderStatus.CANCELLED.value:
        raise OrderLifecycleError("Pedido cancelado não recebe pagamento")
    if order.full_payment_received:
        raise OrderLifecycleError("Pagamento total já registrado")

    total = order.total_amount or 0
    if order.deposit_paid and order.deposit_amount:
        remaining = total - order.deposit_amount
    else:
        remaining = total

    fee = compute_fee(remaining, payment.fee_type, payment.fee)
    method = payment.method.value

    order.full_payment_received = True
    order.payment_method = method
    order.payment_fee = fee

    if order.status in PRE_PRODUCTION:
        logger.info(f"Pedido {order.display_number}: {order.status} -> {OrderStatus.IN_PRODUCTION.value}")
        order.status = OrderStatus.IN_PRODUCTION.value

    number = f" {format_order_number(order.order_number)}" if order.order_number else ""
    _post_income(
        db,
        order,
        TransactionCategory.PAGAMENTO_TOTAL,
        f"Pagamento Total ({method_label(method)}) - {order.client_name}{number}",
        remaining - fee,
    )

    await db.flush()
    return order


async def undo_full_payment(db: AsyncSession, order: Order) -> Order:
    """Desfaz o pagamento total e remove seu lançamento"""
    if not order.full_payment_received:
        raise OrderLifecycleError("Pedido não possui pagamento total registrado")

    await _delete_postings(db, order, TransactionCategory.PAGAMENTO_TOTAL)
    order.full_payment_received = False
    order.payment_method = None
    order.payment_fee = 0

    await db.flush()
    logger.info(f"Pedido {order.display_number}: pagamento total desfeito")
    return order


async def delete_order(db: AsyncSession, order: Order) -> None:
    """Remove lançamentos, itens e o pedido"""
    removed = await _delete_postings(db, order)
    await db.delete(order)
    await db.flush()
    logger.info(f"Pedido {order.display_number} removido ({removed} lançamento(s))")


async def order_transactions(db: AsyncSession, order: Order) -> List[Transaction]:
    """Lançamentos vinculados ao pedido, do mais antigo para o mais recente"""
    result = await db.execute(
        select(Transaction)
        .where(Transaction.order_id == order.id, Transaction.user_id == order.user_id)
        .order_by(Transaction.created_at, Transaction.date)
    )
    return list(result.scalars().all())
