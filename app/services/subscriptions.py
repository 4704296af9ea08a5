"""
ZAP Confeitaria - Subscription Service
Sincronização da assinatura local com o Stripe (webhook e verificação)
"""
import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import stripe
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models import User, Subscription, SubscriptionStatus, PlanType

logger = logging.getLogger(__name__)

UNSUBSCRIBED = {
    "subscribed": False,
    "plan_type": None,
    "subscription_end": None,
    "cancel_at_period_end": False,
}


class WebhookConfigError(Exception):
    """Segredo do webhook não configurado"""
    pass


def _configure():
    stripe.api_key = settings.STRIPE_SECRET_KEY


def _get(obj: Any, *keys, default=None):
    """Acesso encadeado tolerante (dict ou StripeObject)"""
    current = obj
    for key in keys:
        try:
            current = current[key]
        except (KeyError, IndexError, TypeError):
            return default
        if current is None:
            return default
    return current


def _timestamp(value) -> Optional[datetime]:
    if not value or not isinstance(value, (int, float)) or value <= 0:
        return None
    return datetime.utcfromtimestamp(value)


def plan_type_of(subscription) -> str:
    interval = _get(subscription, "items", "data", 0, "price", "recurring", "interval")
    return PlanType.YEARLY.value if interval == "year" else PlanType.MONTHLY.value


def period_of(subscription) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Período atual (no nível da assinatura ou do primeiro item, conforme a versão da API)"""
    start = _get(subscription, "current_period_start") or _get(subscription, "items", "data", 0, "current_period_start")
    end = _get(subscription, "current_period_end") or _get(subscription, "items", "data", 0, "current_period_end")
    return _timestamp(start), _timestamp(end)


def construct_event(payload: bytes, signature: Optional[str]) -> Dict:
    """
    Verifica a assinatura do webhook e retorna o evento como dict.

    Raises:
        WebhookConfigError: segredo não configurado
        ValueError: payload inválido
        stripe.SignatureVerificationError: assinatura inválida
    """
    if not settings.STRIPE_WEBHOOK_SECRET:
        raise WebhookConfigError("STRIPE_WEBHOOK_SECRET não configurado")
    stripe.Webhook.construct_event(payload, signature, settings.STRIPE_WEBHOOK_SECRET)
    return json.loads(payload)


def retrieve_subscription(subscription_id: str):
    _configure()
    return stripe.Subscription.retrieve(subscription_id)


def find_customer_subscription(email: str) -> Tuple[Optional[str], Optional[Any]]:
    """(customer_id, assinatura ativa) do cliente Stripe com este email"""
    _configure()
    customers = stripe.Customer.list(email=email, limit=1)
    data = _get(customers, "data", default=[])
    if not data:
        return None, None

    customer_id = data[0]["id"]
    subscriptions = stripe.Subscription.list(customer=customer_id, status="active", limit=1)
    active = _get(subscriptions, "data", default=[])
    return customer_id, (active[0] if active else None)


async def _by_stripe_id(db: AsyncSession, subscription_id: Optional[str]) -> Optional[Subscription]:
    if not subscription_id:
        return None
    result = await db.execute(
        select(Subscription).where(Subscription.stripe_subscription_id == subscription_id)
    )
    return result.scalar_one_or_none()


async def upsert_subscription(db: AsyncSession, user_id: str, **fields) -> Subscription:
    """Cria ou atualiza a assinatura da conta (uma por usuário)"""
    result = await db.execute(select(Subscription).where(Subscription.user_id == user_id))
    subscription = result.scalar_one_or_none()

    if not subscription:
        subscription = Subscription(user_id=user_id)
        db.add(subscription)

    for field, value in fields.items():
        setattr(subscription, field, value)

    await db.flush()
    return subscription


async def handle_checkout_completed(db: AsyncSession, session: Dict):
    if session.get("mode") != "subscription" or not session.get("subscription"):
        logger.info(f"Checkout {session.get('id')} ignorado (não é assinatura)")
        return

    email = session.get("customer_email") or _get(session, "customer_details", "email")
    if not email:
        logger.warning(f"Checkout {session.get('id')} sem email do cliente")
        return

    result = await db.execute(select(User).where(User.email == email.lower()))
    user = result.scalar_one_or_none()
    if not user:
        logger.warning(f"Checkout {session.get('id')}: usuário {email} não encontrado")
        return

    stripe_subscription = retrieve_subscription(session["subscription"])
    start, end = period_of(stripe_subscription)
    plan_type = plan_type_of(stripe_subscription)

    await upsert_subscription(
        db,
        user.id,
        stripe_customer_id=session.get("customer"),
        stripe_subscription_id=stripe_subscription["id"],
        status=SubscriptionStatus.ACTIVE.value,
        plan_type=plan_type,
        current_period_start=start,
        current_period_end=end,
        cancel_at_period_end=bool(_get(stripe_subscription, "cancel_at_period_end", default=False)),
    )
    logger.info(f"Assinatura criada/atualizada: usuário {user.id} plano {plan_type}")


async def handle_subscription_updated(db: AsyncSession, stripe_subscription: Dict):
    subscription = await _by_stripe_id(db, stripe_subscription.get("id"))
    if not subscription:
        logger.warning(f"Assinatura {stripe_subscription.get('id')} não encontrada")
        return

    start, end = period_of(stripe_subscription)
    subscription.status = stripe_subscription.get("status") or subscription.status
    subscription.plan_type = plan_type_of(stripe_subscription)
    subscription.current_period_start = start
    subscription.current_period_end = end
    subscription.cancel_at_period_end = bool(stripe_subscription.get("cancel_at_period_end"))
    await db.flush()
    logger.info(f"Assinatura atualizada: usuário {subscription.user_id} status {subscription.status}")


async def handle_subscription_deleted(db: AsyncSession, stripe_subscription: Dict):
    subscription = await _by_stripe_id(db, stripe_subscription.get("id"))
    if not subscription:
        logger.warning(f"Assinatura {stripe_subscription.get('id')} não encontrada")
        return

    subscription.status = SubscriptionStatus.CANCELED.value
    subscription.cancel_at_period_end = False
    await db.flush()
    logger.info(f"Assinatura cancelada: usuário {subscription.user_id}")


def _invoice_subscription_id(invoice: Dict) -> Optional[str]:
    return invoice.get("subscription") or _get(invoice, "parent", "subscription_details", "subscription")


async def handle_invoice_paid(db: AsyncSession, invoice: Dict):
    subscription = await _by_stripe_id(db, _invoice_subscription_id(invoice))
    if not subscription:
        return

    stripe_subscription = retrieve_subscription(subscription.stripe_subscription_id)
    start, end = period_of(stripe_subscription)
    subscription.status = SubscriptionStatus.ACTIVE.value
    subscription.current_period_start = start
    subscription.current_period_end = end
    await db.flush()
    logger.info(f"Assinatura renovada: usuário {subscription.user_id}")


async def handle_invoice_failed(db: AsyncSession, invoice: Dict):
    subscription = await _by_stripe_id(db, _invoice_subscription_id(invoice))
    if not subscription:
        return

    subscription.status = SubscriptionStatus.PAST_DUE.value
    await db.flush()
    logger.warning(f"Pagamento da assinatura falhou: usuário {subscription.user_id}")


EVENT_HANDLERS = {
    "checkout.session.completed": handle_checkout_completed,
    "customer.subscription.updated": handle_subscription_updated,
    "customer.subscription.deleted": handle_subscription_deleted,
    "invoice.payment_succeeded": handle_invoice_paid,
    "invoice.payment_failed": handle_invoice_failed,
}


async def handle_event(db: AsyncSession, event: Dict) -> bool:
    """Processa o evento; retorna False para tipos não tratados"""
    event_type = event.get("type")
    logger.info(f"Stripe webhook: {event_type} ({event.get('id')})")

    handler = EVENT_HANDLERS.get(event_type)
    if not handler:
        logger.info(f"Evento não tratado: {event_type}")
        return False

    await handler(db, _get(event, "data", "object", default={}))
    return True


async def check_subscription(db: AsyncSession, user: User) -> Dict:
    """Consulta o Stripe pelo email do usuário e atualiza a assinatura local"""
    if not settings.STRIPE_SECRET_KEY:
        raise WebhookConfigError("STRIPE_SECRET_KEY não configurado")

    customer_id, stripe_subscription = find_customer_subscription(user.email)
    if not customer_id:
        return dict(UNSUBSCRIBED)

    if not stripe_subscription:
        await upsert_subscription(
            db,
            user.id,
            stripe_customer_id=customer_id,
            status=SubscriptionStatus.INACTIVE.value,
        )
        return dict(UNSUBSCRIBED)

    start, end = period_of(stripe_subscription)
    plan_type = plan_type_of(stripe_subscription)
    cancel_at_period_end = bool(_get(stripe_subscription, "cancel_at_period_end", default=False))

    await upsert_subscription(
        db,
        user.id,
        stripe_customer_id=customer_id,
        stripe_subscription_id=stripe_subscription["id"],
        status=SubscriptionStatus.ACTIVE.value,
        plan_type=plan_type,
        current_period_start=start,
        current_period_end=end,
        cancel_at_period_end=cancel_at_period_end,
    )

    return {
        "subscribed": True,
        "plan_type": plan_type,
        "subscription_end": end.isoformat() if end else None,
        "cancel_at_period_end": cancel_at_period_end,
    }
