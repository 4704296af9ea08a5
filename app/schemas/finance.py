"""
ZAP Confeitaria - Finance Schemas
"""
from pydantic import BaseModel
from typing import List, Optional


class FinanceTotals(BaseModel):
    total_income: float
    total_expenses: float
    balance: float


class OrderProfit(BaseModel):
    order_id: str
    order_number: Optional[int] = None
    client_name: str
    revenue: float
    costs: float
    profit: float
    margin: float


class GrossProfit(BaseModel):
    revenue: float
    costs: float
    profit: float
    margin: float
    orders: List[OrderProfit] = []


class CategoryExpense(BaseModel):
    category: str
    amount: float
    percentage: float


class PeriodDates(BaseModel):
    start: Optional[str] = None
    end: Optional[str] = None


class FinanceSummaryResponse(BaseModel):
    period: str
    period_label: str
    period_dates: PeriodDates
    totals: FinanceTotals
    gross_profit: GrossProfit
    expenses_by_category: List[CategoryExpense]


class MonthFigures(BaseModel):
    label: str
    income: float
    expenses: float
    profit: float


class MonthComparisonResponse(BaseModel):
    current: MonthFigures
    previous: MonthFigures
    income_variation: float
    expenses_variation: float
    profit_variation: float


class TopProduct(BaseModel):
    product_name: str
    quantity: float
    revenue: float
    order_count: int
