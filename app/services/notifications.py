"""
ZAP Confeitaria - Notifications Service
Lembretes de aniversários, entregas próximas e sinais em atraso
"""
from datetime import date
from typing import Dict, Iterable, List, Optional

from app.models.order import OrderStatus, format_order_number

WINDOW_DAYS = 7
OVERDUE_DEPOSIT_DAYS = 7
OVERDUE_DEPOSIT_HIGH_DAYS = 14

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

MONTH_ABBR = ["jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez"]


def _short_date(value: date) -> str:
    return f"{value.day:02d} de {MONTH_ABBR[value.month - 1]}"


def _priority(days_until: int) -> str:
    if days_until <= 1:
        return "high"
    if days_until <= 3:
        return "medium"
    return "low"


def _when(prefix: str, days_until: int, target: date, today_suffix: str) -> str:
    if days_until == 0:
        return f"{prefix} é hoje!{today_suffix}"
    if days_until == 1:
        return f"{prefix} é amanhã!"
    if days_until <= 3:
        return f"{prefix} em {days_until} dias"
    return f"{prefix} em {days_until} dias ({_short_date(target)})"


def _birthday_in_year(birthday: date, year: int) -> date:
    try:
        return birthday.replace(year=year)
    except ValueError:
        # 29/02 em ano não bissexto
        return date(year, 2, 28)


def next_birthday(birthday: date, today: date) -> date:
    """Próximo aniversário a partir de hoje (inclusive)"""
    this_year = _birthday_in_year(birthday, today.year)
    if this_year < today:
        return _birthday_in_year(birthday, today.year + 1)
    return this_year


def birthday_notifications(clients: Iterable, today: date) -> List[Dict]:
    notifications = []
    for client in clients:
        if not client.birthday:
            continue
        upcoming = next_birthday(client.birthday, today)
        days_until = (upcoming - today).days
        if days_until > WINDOW_DAYS:
            continue
        notifications.append({
            "id": f"birthday-{client.id}",
            "type": "birthday",
            "title": client.name,
            "message": _when("Aniversário", days_until, upcoming, " 🎂"),
            "date": upcoming,
            "priority": _priority(days_until),
            "client_id": client.id,
            "order_id": None,
        })
    return notifications


def _client_name(order, default: str) -> str:
    return order.client.name if order.client else default


def delivery_notifications(orders: Iterable, today: date) -> List[Dict]:
    skipped = (OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value)
    notifications = []
    for order in orders:
        if not order.delivery_date or order.status in skipped:
            continue
        days_until = (order.delivery_date - today).days
        if days_until < 0 or days_until > WINDOW_DAYS:
            continue
        notifications.append({
            "id": f"delivery-{order.id}",
            "type": "delivery",
            "title": f"Pedido - {_client_name(order, 'Cliente não definido')}",
            "message": _when("Entrega", days_until, order.delivery_date, " 📦"),
            "date": order.delivery_date,
            "priority": _priority(days_until),
            "client_id": order.client_id,
            "order_id": order.id,
        })
    return notifications


def overdue_deposit_notifications(orders: Iterable, today: date) -> List[Dict]:
    waiting = (OrderStatus.QUOTE.value, OrderStatus.AWAITING_DEPOSIT.value)
    notifications = []
    for order in orders:
        if order.status not in waiting or order.deposit_paid or order.full_payment_received:
            continue
        if not order.created_at:
            continue
        created = order.created_at.date()
        age = (today - created).days
        if age < OVERDUE_DEPOSIT_DAYS:
            continue
        label = f"Pedido {format_order_number(order.order_number)}" if order.order_number else "Pedido"
        notifications.append({
            "id": f"pending_deposit-{order.id}",
            "type": "pending_deposit",
            "title": f"Sinal pendente - {_client_name(order, 'Cliente')}",
            "message": f"{label} aguardando sinal há {age} dias",
            "date": created,
            "priority": "high" if age >= OVERDUE_DEPOSIT_HIGH_DAYS else "medium",
            "client_id": order.client_id,
            "order_id": order.id,
        })
    return notifications


def build_notifications(clients: Iterable, orders: Iterable, today: Optional[date] = None) -> Dict:
    """
    Lista de lembretes ordenada por prioridade (high, medium, low) e data,
    com contadores total e de alta prioridade.
    """
    today = today or date.today()
    orders = list(orders)

    notifications = (
        birthday_notifications(clients, today)
        + delivery_notifications(orders, today)
        + overdue_deposit_notifications(orders, today)
    )
    notifications.sort(key=lambda n: (PRIORITY_ORDER[n["priority"]], n["date"]))

    return {
        "notifications": notifications,
        "total_count": len(notifications),
        "high_priority_count": sum(1 for n in notifications if n["priority"] == "high"),
    }
