"""
ZAP Confeitaria - Documents API
Geração de PDFs: orçamento do pedido e relatório financeiro
"""
import base64
import uuid
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.database import get_db
from app.models import User
from app.schemas import QuoteRequest, QuoteResponse, FinanceReportRequest, FinanceReportResponse
from app.core.config import settings
from app.core.error_notifier import notify_on_error
from app.api.auth import require_subscription
from app.api.finances import load_finance_data, resolve_period
from app.services import finance
from app.services.order_lifecycle import get_order
from app.utils.formatting import format_date
from app.utils.uploads import save_upload, owned_path
from app.utils.quoteGenerator import generate_quote_pdf, quote_file_name
from app.utils.financeReportGenerator import generate_finance_report_pdf, report_file_name

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["Documents"])


def _data_uri(pdf_bytes: bytes) -> str:
    return "data:application/pdf;base64," + base64.b64encode(pdf_bytes).decode("ascii")


def _logo_path(profile):
    return owned_path(profile.logo_url, profile.user_id) if profile else None


@router.post("/generate-quote-pdf", response_model=QuoteResponse)
@notify_on_error("PDF_ERROR", "/api/functions/generate-quote-pdf")
async def generate_quote(
    request: QuoteRequest,
    http_request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_subscription)
):
    """
    Gera o PDF do orçamento de um pedido.
    Com saveToStorage, grava o arquivo em uploads e retorna a URL pública
    (usada para compartilhar pelo WhatsApp).
    """
    try:
        uuid.UUID(request.order_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="orderId inválido. Deve ser um UUID válido."
        )

    order = await get_order(db, current_user.id, request.order_id)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Pedido não encontrado"
        )

    profile = current_user.profile
    pdf_bytes = await generate_quote_pdf(order, profile, logo_path=_logo_path(profile))
    file_name = quote_file_name(order)

    public_url = None
    if request.save_to_storage:
        stored_name = f"{order.id}-{int(datetime.utcnow().timestamp() * 1000)}.pdf"
        try:
            relative_url = save_upload(f"quote-pdfs/{current_user.id}", stored_name, pdf_bytes)
            public_url = str(http_request.base_url).rstrip("/") + relative_url
            logger.info(f"Orçamento salvo: {public_url}")
        except OSError as e:
            logger.error(f"Erro ao salvar orçamento em uploads: {e}")

    return {"pdf": _data_uri(pdf_bytes), "file_name": file_name, "public_url": public_url}


def _report_from_request(request: FinanceReportRequest) -> dict:
    summary = request.summary
    return {
        "period_label": request.period_label or finance.PERIOD_LABELS.get(request.period, ""),
        "period_dates": request.period_dates.model_dump() if request.period_dates else {},
        "summary": {
            "balance": summary.balance,
            "total_income": summary.total_income,
            "total_expenses": summary.total_expenses,
            "gross_profit": summary.gross_profit.model_dump(),
        },
        "transactions": [t.model_dump() for t in request.transactions or []],
        "expenses_by_category": [c.model_dump() for c in request.expenses_by_category or []],
    }


async def _report_from_database(db: AsyncSession, user: User, request: FinanceReportRequest) -> dict:
    rng = resolve_period(request.period, None, None)
    transactions, orders, products = await load_finance_data(db, user.id)
    summary = finance.summarize(transactions, orders, products, rng)

    return {
        "period_label": request.period_label or summary["period_label"],
        "period_dates": {
            "start": format_date(rng.start),
            "end": format_date(rng.end),
        },
        "summary": {
            "balance": summary["totals"]["balance"],
            "total_income": summary["totals"]["total_income"],
            "total_expenses": summary["totals"]["total_expenses"],
            "gross_profit": summary["gross_profit"],
        },
        "transactions": [t.to_dict() for t in summary["transactions"]],
        "expenses_by_category": summary["expenses_by_category"],
    }


@router.post("/generate-finance-report-pdf", response_model=FinanceReportResponse)
@notify_on_error("PDF_ERROR", "/api/functions/generate-finance-report-pdf")
async def generate_finance_report(
    request: FinanceReportRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_subscription)
):
    """
    Gera o PDF do relatório financeiro do período.
    Sem summary no corpo, os números são calculados a partir dos lançamentos da conta.
    """
    if request.summary is not None:
        report = _report_from_request(request)
    else:
        report = await _report_from_database(db, current_user, request)

    profile = current_user.profile
    company_name = (profile.company_name if profile else None) or settings.DEFAULT_COMPANY_NAME

    pdf_bytes = await generate_finance_report_pdf(report, company_name, logo_path=_logo_path(profile))

    return {"pdf": _data_uri(pdf_bytes), "file_name": report_file_name(request.period)}
