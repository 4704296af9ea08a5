"""
ZAP Confeitaria - WhatsApp Templates
Mensagens prontas por etapa do pedido e links wa.me
"""
import re
from typing import Dict, List, Optional
from urllib.parse import quote

from app.models.order import OrderStatus, format_order_number
from app.utils.formatting import format_currency, format_long_date, first_name

DEFAULT_REVIEW_URL = "https://g.page/r/CQjuiJbRcD4-EAE/review"

TEMPLATES: Dict[str, Dict[str, str]] = {
    "quote": {
        "label": "Enviar Orçamento",
        "template": (
            "Olá [Nome]! 😊\n\n"
            "Segue o orçamento do pedido [Pedido] para entrega em [DataEntrega].\n\n"
            "Valor total: [Valor]\n\n"
            "Qualquer dúvida, estou à disposição!"
        ),
    },
    "birthday": {
        "label": "Feliz Aniversário",
        "template": (
            "Olá [Nome]! 🎂\n\n"
            "A [NomeEmpresa] deseja um Feliz Aniversário! "
            "Que seu dia seja tão doce quanto nossas delícias!\n\n"
            "Um grande abraço! 🎉"
        ),
    },
    "deposit_collection": {
        "label": "Cobrar Sinal",
        "template": (
            "Olá [Nome]! 👋\n\n"
            "Estou passando para lembrar sobre o sinal de 50% do pedido [Pedido], "
            "no valor de [ValorSinal].\n\n"
            "Assim que confirmado, inicio a produção para entrega em [DataEntrega].\n\n"
            "Obrigada! 💕"
        ),
    },
    "order_confirmed": {
        "label": "Confirmar Pgto Sinal",
        "template": (
            "Olá [Nome]! ✨\n\n"
            "Seu pedido [Pedido] está confirmado! 🎉\n"
            "Obrigada pelo pagamento do sinal.\n"
            "📅 Entrega: [DataEntrega]\n"
            "[InfoPagamento]\n\n"
            "Vamos preparar tudo com carinho! Qualquer dúvida, estou à disposição.\n\n"
            "Obrigada pela preferência! 💕"
        ),
    },
    "payment_thanks": {
        "label": "Agradecer Pgto 100%",
        "template": (
            "Olá [Nome]! 💚\n\n"
            "Muito obrigada pelo pagamento do pedido [Pedido]! ✅\n\n"
            "Valor recebido: [Valor]\n\n"
            "Seu pedido está confirmado para [DataEntrega]. Qualquer novidade, aviso por aqui!\n\n"
            "Obrigada pela confiança! 🎂"
        ),
    },
    "pickup_ready": {
        "label": "Pronto para Retirada",
        "template": (
            "Olá [Nome]! ✨\n\n"
            "Seu pedido [Pedido] está pronto para retirada!\n\n"
            "📍 Retirada: [DataEntrega]\n"
            "[InfoPagamento]\n\n"
            "Aguardamos você! 🎂"
        ),
    },
    "out_for_delivery": {
        "label": "Saiu para Entrega",
        "template": (
            "Olá [Nome]! 🚗\n\n"
            "Seu pedido [Pedido] saiu para entrega!\n\n"
            "📍 Endereço: [EnderecoEntrega]\n"
            "🕐 Previsão: [DataEntrega]\n"
            "[InfoPagamento]\n\n"
            "Em breve estaremos aí! 🎂"
        ),
    },
    "review_request": {
        "label": "Pedir Avaliação",
        "template": (
            "Olá [Nome]! 😊\n\n"
            "Muito obrigada por escolher a [NomeEmpresa]! 💕\n\n"
            "Ficamos muito felizes em fazer parte do seu momento especial. "
            "Se você gostou do nosso trabalho, ficaríamos muito gratos se pudesse "
            "deixar uma avaliação no Google:\n\n"
            "👉 [LinkAvaliacao]\n\n"
            "Sua opinião é muito importante para nós! ⭐\n\n"
            "Obrigada pela confiança e até a próxima! 🎂"
        ),
    },
}


def format_delivery_date(delivery_date, delivery_time: Optional[str] = None) -> str:
    if not delivery_date:
        return "a definir"
    formatted = format_long_date(delivery_date)
    if delivery_time:
        return f"{formatted} às {delivery_time[:5]}"
    return formatted


def process_template(template_type: str, context: Dict) -> str:
    """
    Substitui os marcadores do template pelos dados do contexto.

    Chaves do contexto: client_name, company_name, order_number, total_amount,
    deposit_amount, remaining_amount, delivery_date, delivery_time,
    delivery_address, full_payment_received, google_review_url
    """
    if template_type not in TEMPLATES:
        raise ValueError(f"Template inválido: {template_type}")

    total = context.get("total_amount") or 0
    remaining = context.get("remaining_amount") or total / 2

    if context.get("full_payment_received"):
        payment_info = "✅ Pagamento confirmado!"
    else:
        payment_info = f"💰 Valor restante: {format_currency(remaining)}"

    replacements = {
        "[Nome]": first_name(context.get("client_name")),
        "[NomeEmpresa]": context.get("company_name") or "nossa confeitaria",
        "[Pedido]": format_order_number(context.get("order_number")) if context.get("order_number") else "",
        "[Valor]": format_currency(total),
        "[ValorSinal]": format_currency(context.get("deposit_amount") or total / 2),
        "[ValorRestante]": format_currency(remaining),
        "[DataEntrega]": format_delivery_date(context.get("delivery_date"), context.get("delivery_time")),
        "[EnderecoEntrega]": context.get("delivery_address") or "endereço combinado",
        "[LinkAvaliacao]": context.get("google_review_url") or DEFAULT_REVIEW_URL,
        "[InfoPagamento]": payment_info,
    }

    message = TEMPLATES[template_type]["template"]
    for marker, value in replacements.items():
        message = message.replace(marker, value)
    return message


def available_templates(status: str, deposit_paid: bool = False, full_payment_received: bool = False) -> List[str]:
    """Templates que fazem sentido para a etapa atual do pedido"""
    closed = (OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value)
    templates = []

    if status not in (OrderStatus.READY.value,) + closed:
        templates.append("quote")

    if not deposit_paid and not full_payment_received and status not in closed:
        templates.append("deposit_collection")

    if (deposit_paid or full_payment_received) and status not in closed:
        templates.append("order_confirmed")

    if full_payment_received and status not in closed:
        templates.append("payment_thanks")

    if status in (OrderStatus.IN_PRODUCTION.value, OrderStatus.READY.value):
        templates.append("pickup_ready")
        templates.append("out_for_delivery")

    if status == OrderStatus.DELIVERED.value:
        templates.append("review_request")

    return templates


def order_context(order, profile=None) -> Dict:
    """Contexto de template a partir do pedido e do perfil da confeitaria"""
    total = order.total_amount or 0
    deposit = order.deposit_amount if order.deposit_amount is not None else total / 2
    return {
        "client_name": order.client.name if order.client else None,
        "company_name": profile.company_name if profile else None,
        "order_number": order.order_number,
        "total_amount": total,
        "deposit_amount": deposit,
        "remaining_amount": total - deposit,
        "delivery_date": order.delivery_date,
        "delivery_time": order.delivery_time,
        "delivery_address": order.delivery_address,
        "full_payment_received": bool(order.full_payment_received),
        "google_review_url": profile.google_review_url if profile else None,
    }


def whatsapp_phone(phone: Optional[str]) -> Optional[str]:
    """Só dígitos, com DDI 55 quando ausente"""
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        return None
    return digits if digits.startswith("55") else f"55{digits}"


def whatsapp_link(phone: Optional[str], message: Optional[str] = None) -> Optional[str]:
    formatted = whatsapp_phone(phone)
    if not formatted:
        return None
    url = f"https://wa.me/{formatted}"
    if message:
        url += f"?text={quote(message, safe='')}"
    return url
