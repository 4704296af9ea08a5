"""
ZAP Confeitaria - Testes dos geradores de PDF
"""
from datetime import date
from types import SimpleNamespace

from app.utils.quoteGenerator import (
    DEFAULT_TERMS,
    generate_quote_pdf,
    quote_file_name,
    quote_totals,
    terms_lines,
)
from app.utils.financeReportGenerator import (
    generate_finance_report_pdf,
    period_text,
    report_file_name,
)


def item(name, quantity, price, is_gift=False, product_id="p1", unit_type="unit"):
    return SimpleNamespace(
        product_name=name,
        quantity=quantity,
        unit_price=price,
        unit_type=unit_type,
        is_gift=is_gift,
        product_id=product_id,
        subtotal=quantity * price,
    )


def make_order(**overrides):
    data = dict(
        id="o1",
        client=SimpleNamespace(name="Maria da Silva", phone="(11) 98765-4321"),
        delivery_date=date(2025, 3, 5),
        delivery_time="14:00",
        delivery_address="Rua das Flores, 10",
        delivery_fee=15,
        total_amount=215,
        notes="Sem lactose",
        items=[
            item("Bolo de chocolate", 1, 150),
            item("Brigadeiro", 0.5, 100, unit_type="cento"),
            item("Bolo de cenoura", 1, 80, is_gift=True),
            item("Topo de bolo", 1, 0, product_id=None),
        ],
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def make_profile(**overrides):
    data = dict(
        company_name="Doces da Ana",
        pix_key="ana@doces.com",
        bank_details="Banco X\nAg 0001",
        include_terms_in_pdf=True,
        custom_terms=None,
        logo_url=None,
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def test_quote_totals_discount_gifts():
    totals = quote_totals(make_order())
    assert totals == {"full_subtotal": 280, "gift_discount": 80, "subtotal": 200}


def test_quote_file_name():
    assert quote_file_name(make_order(), today=date(2025, 3, 1)) == "orcamento-maria-da-silva-2025-03-01.pdf"
    assert quote_file_name(make_order(client=None), today=date(2025, 3, 1)) == "orcamento-cliente-2025-03-01.pdf"


def test_terms_lines():
    assert terms_lines(make_profile(include_terms_in_pdf=False)) == []
    assert terms_lines(make_profile()) == ["TERMOS DE SERVIÇO:"] + DEFAULT_TERMS
    assert terms_lines(None) == ["TERMOS DE SERVIÇO:"] + DEFAULT_TERMS
    assert terms_lines(make_profile(custom_terms="Linha 1\n\nLinha 2")) == ["TERMOS DE SERVIÇO:", "Linha 1", "Linha 2"]


async def test_generate_quote_pdf():
    pdf = await generate_quote_pdf(make_order(), make_profile())
    assert pdf.startswith(b"%PDF")


async def test_generate_quote_pdf_without_profile():
    pdf = await generate_quote_pdf(make_order(client=None, delivery_date=None, notes=None, items=[]))
    assert pdf.startswith(b"%PDF")


def test_period_text():
    assert period_text("Este mês", "01/03/2025", "31/03/2025") == "Este mês (01/03/2025 - 31/03/2025)"
    assert period_text("Hoje", "05/03/2025", "05/03/2025") == "Hoje"
    assert period_text("Todo o período", None, None) == "Todo o período"


def test_report_file_name():
    assert report_file_name("month", today=date(2025, 3, 5)) == "relatorio-financeiro-month-2025-03-05.pdf"


async def test_generate_finance_report_pdf():
    transactions = [
        {"date": "2025-03-%02d" % (i % 28 + 1), "type": "income" if i % 2 else "expense",
         "description": f"Lançamento {i}", "amount": 10 + i}
        for i in range(30)
    ]
    report = {
        "period_label": "Este mês",
        "period_dates": {"start": "01/03/2025", "end": "31/03/2025"},
        "summary": {
            "balance": -50,
            "total_income": 100,
            "total_expenses": 150,
            "gross_profit": {"profit": 40, "margin": 40},
        },
        "transactions": transactions,
        "expenses_by_category": [{"category": "Insumos", "amount": 150, "percentage": 100}],
    }

    pdf = await generate_finance_report_pdf(report, "Doces da Ana")
    assert pdf.startswith(b"%PDF")
