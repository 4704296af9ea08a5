"""
ZAP Confeitaria - Document Schemas
Payloads das funções de geração de PDF (chaves em camelCase)
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class QuoteRequest(_CamelModel):
    order_id: str = Field(..., alias="orderId")
    save_to_storage: bool = Field(False, alias="saveToStorage")


class QuoteResponse(_CamelModel):
    pdf: str
    file_name: str = Field(..., serialization_alias="fileName")
    public_url: Optional[str] = Field(None, serialization_alias="publicUrl")


class ReportPeriodDates(_CamelModel):
    start: str
    end: str


class ReportGrossProfit(_CamelModel):
    profit: float = 0
    margin: float = 0
    revenue: float = 0
    costs: float = 0


class ReportSummary(_CamelModel):
    balance: float = 0
    total_income: float = Field(0, alias="totalIncome")
    total_expenses: float = Field(0, alias="totalExpenses")
    gross_profit: ReportGrossProfit = Field(default_factory=ReportGrossProfit, alias="grossProfit")


class ReportTransaction(_CamelModel):
    id: Optional[str] = None
    date: str
    type: Literal["income", "expense"]
    description: Optional[str] = None
    amount: float
    order_id: Optional[str] = None


class ReportCategory(_CamelModel):
    category: str
    amount: float
    percentage: float


class FinanceReportRequest(_CamelModel):
    """
    Sem summary, o relatório é montado no servidor a partir
    dos lançamentos e pedidos do período.
    """
    period: Literal["week", "month", "year", "all"] = "month"
    period_label: Optional[str] = Field(None, alias="periodLabel")
    period_dates: Optional[ReportPeriodDates] = Field(None, alias="periodDates")
    summary: Optional[ReportSummary] = None
    transactions: Optional[List[ReportTransaction]] = None
    expenses_by_category: Optional[List[ReportCategory]] = Field(None, alias="expensesByCategory")


class FinanceReportResponse(_CamelModel):
    pdf: str
    file_name: str = Field(..., serialization_alias="fileName")
