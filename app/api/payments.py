"""
ZAP Confeitaria - Payments API
Webhook do Stripe e consulta de assinatura
"""
from fastapi import APIRouter, Depends, HTTPException, status, Request, Header
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import stripe
import logging

from app.database import get_db
from app.models import User
from app.core.error_notifier import notify_on_error
from app.api.auth import get_current_user
from app.services import subscriptions
from app.services.subscriptions import WebhookConfigError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/stripe-webhook")
@notify_on_error("WEBHOOK_ERROR", "/api/payments/stripe-webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    db: AsyncSession = Depends(get_db)
):
    """
    Recebe eventos do Stripe.
    Assinatura ausente ou inválida: 400. Segredo não configurado: 500.
    Eventos não tratados são apenas confirmados.
    """
    if not stripe_signature:
        logger.warning("Webhook sem header stripe-signature")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Assinatura ausente"
        )

    payload = await request.body()

    try:
        event = subscriptions.construct_event(payload, stripe_signature)
    except WebhookConfigError as e:
        logger.error(str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook não configurado"
        )
    except stripe.SignatureVerificationError as e:
        logger.warning(f"Assinatura do webhook inválida: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Assinatura inválida"
        )
    except ValueError as e:
        logger.warning(f"Payload do webhook inválido: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Payload inválido"
        )

    handled = await subscriptions.handle_event(db, event)

    return {"received": True, "handled": handled, "type": event.get("type")}


@router.get("/check-subscription")
async def check_subscription(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Consulta a assinatura no Stripe e sincroniza a cópia local"""
    try:
        return await subscriptions.check_subscription(db, current_user)
    except WebhookConfigError as e:
        logger.error(str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Stripe não configurado"
        )
    except stripe.StripeError as e:
        logger.error(f"Erro ao consultar assinatura no Stripe: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Erro ao consultar assinatura"
        )
