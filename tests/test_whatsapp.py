"""
ZAP Confeitaria - Testes dos templates de WhatsApp
"""
from datetime import date

import pytest

from app.services.whatsapp import (
    available_templates,
    process_template,
    whatsapp_link,
    whatsapp_phone,
)


def test_phone_gets_country_code():
    assert whatsapp_phone("(11) 98765-4321") == "5511987654321"
    assert whatsapp_phone("55 11 98765-4321") == "5511987654321"
    assert whatsapp_phone("") is None


def test_link_encodes_message():
    assert whatsapp_link("11987654321", "Olá Maria!") == "https://wa.me/5511987654321?text=Ol%C3%A1%20Maria%21"
    assert whatsapp_link(None, "Oi") is None


def test_deposit_collection_message():
    message = process_template("deposit_collection", {
        "client_name": "Maria da Silva",
        "order_number": 12,
        "total_amount": 200,
        "delivery_date": date(2025, 3, 5),
        "delivery_time": "14:30",
    })

    assert message.startswith("Olá Maria!")
    assert "#0012" in message
    assert "R$ 100,00" in message
    assert "05 de março às 14:30" in message


def test_payment_info_placeholder():
    pending = process_template("pickup_ready", {"client_name": "Ana", "total_amount": 300, "remaining_amount": 150})
    assert "💰 Valor restante: R$ 150,00" in pending

    paid = process_template("pickup_ready", {"client_name": "Ana", "total_amount": 300, "full_payment_received": True})
    assert "✅ Pagamento confirmado!" in paid


def test_defaults_for_missing_data():
    message = process_template("review_request", {})
    assert message.startswith("Olá Cliente!")
    assert "nossa confeitaria" in message
    assert "https://g.page/" in message


def test_unknown_template():
    with pytest.raises(ValueError):
        process_template("promo", {})


@pytest.mark.parametrize("status,deposit_paid,full_paid,expected", [
    ("quote", False, False, ["quote", "deposit_collection"]),
    ("in_production", True, False, ["quote", "order_confirmed", "pickup_ready", "out_for_delivery"]),
    ("ready", True, True, ["order_confirmed", "payment_thanks", "pickup_ready", "out_for_delivery"]),
    ("delivered", True, False, ["review_request"]),
    ("cancelled", False, False, []),
])
def test_available_templates(status, deposit_paid, full_paid, expected):
    assert available_templates(status, deposit_paid, full_paid) == expected
