"""
ZAP Confeitaria - Finance Service
Agregações financeiras: totais, lucro bruto, despesas por categoria,
comparação mensal e produtos mais vendidos.

Funções puras: recebem lançamentos, pedidos e produtos já carregados.
"""
import calendar
from collections import namedtuple
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from app.models.order import OrderStatus
from app.models.transaction import TransactionCategory, TransactionType, EXPENSE_CATEGORIES

MONTH_NAMES = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
]

PERIOD_LABELS = {
    "week": "Esta semana",
    "month": "Este mês",
    "year": "Este ano",
    "all": "Todo o período",
}

KNOWN_CATEGORIES = [c.value for c in TransactionCategory]
EXPENSE_CATEGORY_NAMES = [c.value for c in EXPENSE_CATEGORIES]

# Lançamentos automáticos têm sufixo antes do " - " ("Sinal 50%", "Pagamento Final (Pix)")
AUTOMATIC_CATEGORIES = [
    TransactionCategory.SINAL.value,
    TransactionCategory.PAGAMENTO_FINAL.value,
    TransactionCategory.PAGAMENTO_TOTAL.value,
]

PeriodRange = namedtuple("PeriodRange", ["start", "end", "label"])


def period_range(
    period: str = "month",
    today: Optional[date] = None,
    year: Optional[int] = None,
    month: Optional[int] = None
) -> PeriodRange:
    """
    Intervalo de datas (inclusivo) do período.
    Com year/month informados, usa o mês escolhido. Semana começa no domingo.
    "all" não tem limites (start e end None).
    """
    today = today or date.today()

    if year and month:
        last_day = calendar.monthrange(year, month)[1]
        return PeriodRange(
            date(year, month, 1),
            date(year, month, last_day),
            f"{MONTH_NAMES[month - 1]} de {year}"
        )

    if period == "week":
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        return PeriodRange(start, start + timedelta(days=6), PERIOD_LABELS["week"])

    if period == "month":
        last_day = calendar.monthrange(today.year, today.month)[1]
        return PeriodRange(
            today.replace(day=1),
            today.replace(day=last_day),
            PERIOD_LABELS["month"]
        )

    if period == "year":
        return PeriodRange(date(today.year, 1, 1), date(today.year, 12, 31), PERIOD_LABELS["year"])

    if period == "all":
        return PeriodRange(None, None, PERIOD_LABELS["all"])

    raise ValueError(f"Período inválido: {period}")


def in_range(value: Optional[date], rng: PeriodRange) -> bool:
    if value is None:
        return rng.start is None and rng.end is None
    if rng.start and value < rng.start:
        return False
    if rng.end and value > rng.end:
        return False
    return True


def filter_transactions(transactions: Iterable, rng: PeriodRange) -> list:
    return [t for t in transactions if in_range(t.date, rng)]


def totals(transactions: Iterable) -> Dict[str, float]:
    """Receitas, despesas e saldo"""
    total_income = 0.0
    total_expenses = 0.0
    for t in transactions:
        if t.type == TransactionType.INCOME.value:
            total_income += t.amount or 0
        elif t.type == TransactionType.EXPENSE.value:
            total_expenses += t.amount or 0

    return {
        "total_income": total_income,
        "total_expenses": total_expenses,
        "balance": total_income - total_expenses,
    }


def order_period_date(order) -> Optional[date]:
    """Data usada para situar um pedido entregue no período"""
    if order.delivery_date:
        return order.delivery_date
    if order.updated_at:
        return order.updated_at.date()
    return None


def delivered_orders(orders: Iterable, rng: PeriodRange) -> list:
    return [
        o for o in orders
        if o.status == OrderStatus.DELIVERED.value and in_range(order_period_date(o), rng)
    ]


def gross_profit(orders: Iterable, products: Iterable) -> Dict:
    """
    Lucro bruto dos pedidos entregues.
    Custo = custo do produto x quantidade dos itens que não são brinde;
    item adicional ou produto removido tem custo zero.
    """
    cost_by_product = {p.id: (p.cost_price or 0) for p in products}

    breakdown = []
    for order in orders:
        revenue = order.total_amount or 0
        costs = sum(
            cost_by_product.get(item.product_id, 0) * (item.quantity or 0)
            for item in order.items
            if not item.is_gift and item.product_id
        )
        profit = revenue - costs
        breakdown.append({
            "order_id": order.id,
            "order_number": order.order_number,
            "client_name": order.client.name if order.client else "Cliente",
            "revenue": revenue,
            "costs": costs,
            "profit": profit,
            "margin": (profit / revenue * 100) if revenue > 0 else 0.0,
        })

    breakdown.sort(key=lambda o: o["profit"], reverse=True)

    revenue = sum(o["revenue"] for o in breakdown)
    costs = sum(o["costs"] for o in breakdown)
    profit = revenue - costs

    return {
        "revenue": revenue,
        "costs": costs,
        "profit": profit,
        "margin": (profit / revenue * 100) if revenue > 0 else 0.0,
        "orders": breakdown,
    }


def parse_category(description: Optional[str]) -> Tuple[Optional[str], str]:
    """
    Separa "Categoria - descrição" no primeiro " - ".
    Retorna (categoria, descrição limpa) quando o prefixo é uma categoria
    conhecida, senão (None, descrição original).
    """
    description = description or ""
    prefix, sep, rest = description.partition(" - ")
    if not sep:
        return None, description

    if prefix in KNOWN_CATEGORIES:
        return prefix, rest

    for category in AUTOMATIC_CATEGORIES:
        if prefix.startswith(category + " "):
            return category, rest

    return None, description


def transaction_category(transaction) -> Optional[str]:
    """Categoria gravada no lançamento ou, na falta dela, extraída da descrição"""
    if transaction.category in KNOWN_CATEGORIES:
        return transaction.category
    return parse_category(transaction.description)[0]


def expenses_by_category(transactions: Iterable) -> List[Dict]:
    """Despesas agrupadas por categoria (desconhecidas contam como Outros)"""
    amounts: Dict[str, float] = {}
    for t in transactions:
        if t.type != TransactionType.EXPENSE.value:
            continue
        category = transaction_category(t)
        if category not in EXPENSE_CATEGORY_NAMES:
            category = TransactionCategory.OUTROS.value
        amounts[category] = amounts.get(category, 0) + (t.amount or 0)

    total = sum(amounts.values())
    result = [
        {
            "category": category,
            "amount": amount,
            "percentage": (amount / total * 100) if total > 0 else 0.0,
        }
        for category, amount in amounts.items()
    ]
    result.sort(key=lambda c: c["amount"], reverse=True)
    return result


def _variation(current: float, previous: float) -> float:
    if previous != 0:
        return (current - previous) / abs(previous) * 100
    return 100.0 if current != 0 else 0.0


def _shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_comparison(transactions: Iterable, year: int, month: int) -> Dict:
    """Mês escolhido contra o mês anterior, com variações percentuais"""
    transactions = list(transactions)
    prev_year, prev_month = _shift_month(year, month, -1)

    def figures(y: int, m: int) -> Dict:
        rng = period_range(year=y, month=m)
        t = totals(filter_transactions(transactions, rng))
        return {
            "label": rng.label,
            "income": t["total_income"],
            "expenses": t["total_expenses"],
            "profit": t["balance"],
        }

    current = figures(year, month)
    previous = figures(prev_year, prev_month)

    return {
        "current": current,
        "previous": previous,
        "income_variation": _variation(current["income"], previous["income"]),
        "expenses_variation": _variation(current["expenses"], previous["expenses"]),
        "profit_variation": _variation(current["profit"], previous["profit"]),
    }


def top_products(orders: Iterable, limit: int = 5, sort_by: str = "revenue") -> List[Dict]:
    """
    Produtos mais vendidos nos pedidos informados (brindes não contam).
    sort_by: revenue | quantity | orders
    """
    products: Dict[str, Dict] = {}
    for order in orders:
        for item in order.items:
            if item.is_gift:
                continue
            entry = products.setdefault(item.product_name, {
                "product_name": item.product_name,
                "quantity": 0.0,
                "revenue": 0.0,
                "order_ids": set(),
            })
            entry["quantity"] += item.quantity or 0
            entry["revenue"] += (item.unit_price or 0) * (item.quantity or 0)
            entry["order_ids"].add(order.id)

    keys = {
        "revenue": lambda p: (p["revenue"], len(p["order_ids"])),
        "quantity": lambda p: (p["quantity"], p["revenue"]),
        "orders": lambda p: (len(p["order_ids"]), p["revenue"]),
    }
    if sort_by not in keys:
        raise ValueError(f"Ordenação inválida: {sort_by}")

    ranked = sorted(products.values(), key=keys[sort_by], reverse=True)[:limit]
    return [
        {
            "product_name": p["product_name"],
            "quantity": p["quantity"],
            "revenue": p["revenue"],
            "order_count": len(p["order_ids"]),
        }
        for p in ranked
    ]


def _cents(value: float) -> float:
    return round(value or 0, 2)


def summarize(transactions: Iterable, orders: Iterable, products: Iterable, rng: PeriodRange) -> Dict:
    """
    Resumo financeiro do período: totais, lucro bruto dos pedidos entregues
    e despesas por categoria. Valores arredondados a centavos só aqui.
    """
    period_transactions = filter_transactions(transactions, rng)
    period_transactions.sort(key=lambda t: (t.date, t.created_at or datetime.min), reverse=True)

    figures = totals(period_transactions)
    profit = gross_profit(delivered_orders(orders, rng), products)
    for entry in [profit] + profit["orders"]:
        for key in ("revenue", "costs", "profit", "margin"):
            entry[key] = _cents(entry[key])

    categories = expenses_by_category(period_transactions)
    for entry in categories:
        entry["amount"] = _cents(entry["amount"])
        entry["percentage"] = _cents(entry["percentage"])

    return {
        "period_label": rng.label,
        "period_dates": {
            "start": rng.start.isoformat() if rng.start else None,
            "end": rng.end.isoformat() if rng.end else None,
        },
        "totals": {key: _cents(value) for key, value in figures.items()},
        "gross_profit": profit,
        "expenses_by_category": categories,
        "transactions": period_transactions,
    }
