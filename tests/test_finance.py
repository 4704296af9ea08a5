"""
ZAP Confeitaria - Testes das agregações financeiras
"""
from datetime import date, datetime
from types import SimpleNamespace

import pytest

from app.services import finance


def tx(type_, amount, day, description="", category=None):
    return SimpleNamespace(
        type=type_,
        amount=amount,
        date=day,
        description=description,
        category=category,
        created_at=datetime(day.year, day.month, day.day, 12, 0),
    )


def item(name, quantity, price, product_id=None, is_gift=False):
    return SimpleNamespace(
        product_name=name,
        quantity=quantity,
        unit_price=price,
        product_id=product_id,
        is_gift=is_gift,
    )


def order(id_, total, items, status="delivered", delivery_date=None, client="Maria"):
    return SimpleNamespace(
        id=id_,
        order_number=1,
        total_amount=total,
        items=items,
        status=status,
        delivery_date=delivery_date,
        updated_at=datetime(2025, 3, 10, 9, 0),
        client=SimpleNamespace(name=client) if client else None,
    )


class TestParseCategory:
    def test_known_prefix(self):
        assert finance.parse_category("Insumos - Farinha e açúcar") == ("Insumos", "Farinha e açúcar")

    def test_no_prefix(self):
        assert finance.parse_category("Pedido avulso") == (None, "Pedido avulso")

    def test_unknown_prefix_keeps_description(self):
        assert finance.parse_category("Feira - barraca") == (None, "Feira - barraca")

    def test_splits_on_first_separator(self):
        assert finance.parse_category("Embalagens - Caixa - kraft") == ("Embalagens", "Caixa - kraft")

    def test_automatic_postings(self):
        assert finance.parse_category("Sinal 50% (Pix) - Maria") == ("Sinal", "Maria")
        assert finance.parse_category("Pagamento Final - Maria") == ("Pagamento Final", "Maria")
        assert finance.parse_category("Pagamento Total (Cartão) - Ana #0003") == ("Pagamento Total", "Ana #0003")

    def test_empty(self):
        assert finance.parse_category(None) == (None, "")

    def test_prefix_must_match_exactly(self):
        assert finance.parse_category(" Insumos - Farinha") == (None, " Insumos - Farinha")


class TestPeriodRange:
    def test_week_starts_on_sunday(self):
        # 2025-03-05 é quarta-feira
        rng = finance.period_range("week", today=date(2025, 3, 5))
        assert rng.start == date(2025, 3, 2)
        assert rng.end == date(2025, 3, 8)

    def test_week_on_sunday(self):
        rng = finance.period_range("week", today=date(2025, 3, 2))
        assert rng.start == date(2025, 3, 2)

    def test_month(self):
        rng = finance.period_range("month", today=date(2024, 2, 10))
        assert (rng.start, rng.end) == (date(2024, 2, 1), date(2024, 2, 29))
        assert rng.label == "Este mês"

    def test_selected_month(self):
        rng = finance.period_range(year=2025, month=3)
        assert (rng.start, rng.end) == (date(2025, 3, 1), date(2025, 3, 31))
        assert rng.label == "Março de 2025"

    def test_all_has_no_bounds(self):
        rng = finance.period_range("all")
        assert rng.start is None and rng.end is None

    def test_invalid(self):
        with pytest.raises(ValueError):
            finance.period_range("decade")


def test_totals():
    transactions = [
        tx("income", 100, date(2025, 3, 1)),
        tx("income", 50.5, date(2025, 3, 2)),
        tx("expense", 30, date(2025, 3, 3)),
    ]
    assert finance.totals(transactions) == {
        "total_income": 150.5,
        "total_expenses": 30,
        "balance": 120.5,
    }


class TestGrossProfit:
    def test_no_orders(self):
        result = finance.gross_profit([], [])
        assert result["revenue"] == 0
        assert result["profit"] == 0
        assert result["margin"] == 0
        assert result["orders"] == []

    def test_costs_skip_gifts_and_additional_items(self):
        products = [SimpleNamespace(id="p1", cost_price=20)]
        orders = [order("o1", 200, [
            item("Bolo", 2, 80, product_id="p1"),
            item("Bolo", 1, 80, product_id="p1", is_gift=True),
            item("Vela", 1, 40),
        ])]

        result = finance.gross_profit(orders, products)

        assert result["revenue"] == 200
        assert result["costs"] == 40
        assert result["profit"] == 160
        assert result["margin"] == pytest.approx(80.0)
        assert result["orders"][0]["client_name"] == "Maria"

    def test_removed_product_costs_nothing(self):
        orders = [order("o1", 100, [item("Bolo", 1, 100, product_id="gone")])]
        assert finance.gross_profit(orders, [])["costs"] == 0


def test_delivered_orders_fall_back_to_updated_at():
    rng = finance.period_range(year=2025, month=3)
    orders = [
        order("o1", 100, [], delivery_date=date(2025, 3, 20)),
        order("o2", 100, []),
        order("o3", 100, [], delivery_date=date(2025, 4, 1)),
        order("o4", 100, [], status="ready", delivery_date=date(2025, 3, 20)),
    ]
    assert [o.id for o in finance.delivered_orders(orders, rng)] == ["o1", "o2"]


def test_expenses_by_category():
    transactions = [
        tx("expense", 60, date(2025, 3, 1), "Farinha", category="Insumos"),
        tx("expense", 20, date(2025, 3, 2), "Embalagens - Caixas"),
        tx("expense", 20, date(2025, 3, 3), "Conserto da batedeira"),
        tx("income", 500, date(2025, 3, 3), "Venda Avulsa - Brigadeiros"),
    ]

    result = finance.expenses_by_category(transactions)

    assert [c["category"] for c in result] == ["Insumos", "Embalagens", "Outros"]
    by_name = {c["category"]: c for c in result}
    assert by_name["Insumos"]["percentage"] == pytest.approx(60.0)
    assert by_name["Outros"]["amount"] == 20
    assert sum(c["percentage"] for c in result) == pytest.approx(100.0)


def test_month_comparison():
    transactions = [
        tx("income", 200, date(2025, 3, 10)),
        tx("expense", 50, date(2025, 3, 11)),
        tx("income", 100, date(2025, 2, 10)),
    ]

    result = finance.month_comparison(transactions, 2025, 3)

    assert result["current"]["label"] == "Março de 2025"
    assert result["previous"]["label"] == "Fevereiro de 2025"
    assert result["current"]["profit"] == 150
    assert result["income_variation"] == pytest.approx(100.0)
    # Mês anterior sem despesas
    assert result["expenses_variation"] == 100.0


def test_month_comparison_january_wraps_year():
    result = finance.month_comparison([], 2025, 1)
    assert result["previous"]["label"] == "Dezembro de 2024"
    assert result["profit_variation"] == 0.0


def test_top_products():
    orders = [
        order("o1", 0, [item("Bolo", 1, 150), item("Brigadeiro", 50, 2)]),
        order("o2", 0, [item("Brigadeiro", 100, 2), item("Bolo", 1, 150, is_gift=True)]),
    ]

    by_revenue = finance.top_products(orders)
    assert [p["product_name"] for p in by_revenue] == ["Brigadeiro", "Bolo"]
    assert by_revenue[0]["revenue"] == 300
    assert by_revenue[0]["order_count"] == 2
    assert by_revenue[1]["order_count"] == 1

    assert finance.top_products(orders, limit=1, sort_by="quantity")[0]["product_name"] == "Brigadeiro"

    with pytest.raises(ValueError):
        finance.top_products(orders, sort_by="price")


def test_summarize_rounds_and_sorts():
    rng = finance.period_range(year=2025, month=3)
    transactions = [
        tx("income", 10.005, date(2025, 3, 1)),
        tx("expense", 3.333, date(2025, 3, 5), "Insumos - Ovos"),
        tx("income", 99, date(2025, 4, 1)),
    ]

    result = finance.summarize(transactions, [], [], rng)

    assert result["period_label"] == "Março de 2025"
    assert result["period_dates"] == {"start": "2025-03-01", "end": "2025-03-31"}
    assert [t.date for t in result["transactions"]] == [date(2025, 3, 5), date(2025, 3, 1)]
    assert result["totals"]["total_expenses"] == 3.33
    assert result["expenses_by_category"][0]["percentage"] == 100.0
    assert result["gross_profit"]["margin"] == 0
