"""
ZAP Confeitaria - Testes dos lembretes
"""
from datetime import date, datetime, timedelta
from types import SimpleNamespace

from app.services.notifications import build_notifications, next_birthday

TODAY = date(2025, 3, 5)


def client(name, birthday, id_="c1"):
    return SimpleNamespace(id=id_, name=name, birthday=birthday)


def order(id_, status="quote", delivery_date=None, created_days_ago=0,
          deposit_paid=False, full_payment_received=False, client_name="Maria"):
    created = datetime(TODAY.year, TODAY.month, TODAY.day, 10, 0) - timedelta(days=created_days_ago)
    return SimpleNamespace(
        id=id_,
        order_number=7,
        status=status,
        delivery_date=delivery_date,
        created_at=created,
        deposit_paid=deposit_paid,
        full_payment_received=full_payment_received,
        client_id="c1" if client_name else None,
        client=SimpleNamespace(name=client_name) if client_name else None,
    )


def test_next_birthday_leap_day():
    assert next_birthday(date(2000, 2, 29), date(2025, 1, 10)) == date(2025, 2, 28)
    assert next_birthday(date(1990, 1, 2), TODAY) == date(2026, 1, 2)


def test_birthday_today_is_high_priority():
    result = build_notifications([client("Maria", date(1990, 3, 5))], [], today=TODAY)

    assert result["total_count"] == 1
    assert result["high_priority_count"] == 1
    notification = result["notifications"][0]
    assert notification["type"] == "birthday"
    assert notification["message"] == "Aniversário é hoje! 🎂"


def test_birthday_window():
    clients = [
        client("Ana", date(1990, 3, 8), "c1"),
        client("Bia", date(1990, 3, 12), "c2"),
        client("Carla", date(1990, 3, 13), "c3"),
        client("Dora", None, "c4"),
    ]
    result = build_notifications(clients, [], today=TODAY)

    by_title = {n["title"]: n for n in result["notifications"]}
    assert set(by_title) == {"Ana", "Bia"}
    assert by_title["Ana"]["priority"] == "medium"
    assert by_title["Bia"]["priority"] == "low"
    assert by_title["Bia"]["message"] == "Aniversário em 7 dias (12 de mar)"


def test_deliveries_skip_closed_and_past_orders():
    orders = [
        order("o1", status="in_production", delivery_date=TODAY + timedelta(days=1)),
        order("o2", status="delivered", delivery_date=TODAY),
        order("o3", status="cancelled", delivery_date=TODAY),
        order("o4", status="ready", delivery_date=TODAY - timedelta(days=1)),
        order("o5", status="ready", delivery_date=TODAY + timedelta(days=2), client_name=None),
    ]
    result = build_notifications([], orders, today=TODAY)

    deliveries = [n for n in result["notifications"] if n["type"] == "delivery"]
    assert [n["order_id"] for n in deliveries] == ["o1", "o5"]
    assert deliveries[0]["message"] == "Entrega é amanhã!"
    assert deliveries[1]["title"] == "Pedido - Cliente não definido"
    assert deliveries[1]["priority"] == "medium"


def test_overdue_deposits():
    orders = [
        order("o1", created_days_ago=8),
        order("o2", status="awaiting_deposit", created_days_ago=15),
        order("o3", created_days_ago=3),
        order("o4", created_days_ago=20, deposit_paid=True),
        order("o5", status="in_production", created_days_ago=20),
    ]
    result = build_notifications([], orders, today=TODAY)

    pending = {n["order_id"]: n for n in result["notifications"] if n["type"] == "pending_deposit"}
    assert set(pending) == {"o1", "o2"}
    assert pending["o1"]["priority"] == "medium"
    assert pending["o2"]["priority"] == "high"
    assert pending["o2"]["message"] == "Pedido #0007 aguardando sinal há 15 dias"


def test_sorted_by_priority_then_date():
    clients = [client("Ana", date(1990, 3, 11), "c1")]
    orders = [
        order("o1", status="ready", delivery_date=TODAY),
        order("o2", status="ready", delivery_date=TODAY + timedelta(days=3)),
    ]
    result = build_notifications(clients, orders, today=TODAY)

    assert [n["priority"] for n in result["notifications"]] == ["high", "medium", "low"]
