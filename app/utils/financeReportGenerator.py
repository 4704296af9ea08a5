# [ Imports ]
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas
from reportlab.lib.colors import HexColor
from reportlab.lib.utils import ImageReader
from datetime import date, datetime
from io import BytesIO
from pathlib import Path
import logging

from app.utils.formatting import format_currency, format_date

# Configurar logging
logger = logging.getLogger(__name__)

MAX_TRANSACTION_ROWS = 25


# ==========================================
# 🎨 CONFIGURAÇÕES DE DESIGN DO RELATÓRIO
# ==========================================
class ReportDesign:
    TERRACOTTA = '#B46446'
    TITLE = '#333333'
    MUTED = '#646464'
    SUBTLE = '#787878'
    TEXT = '#3C3C3C'
    LIGHT_GRAY = '#969696'
    LINE = '#DCDCDC'
    CARD_BG = '#FAFAFA'
    CARD_BORDER = '#E6E6E6'
    ROW_ALT = '#FAF8F5'
    WHITE = '#FFFFFF'

    POSITIVE = '#22C55E'   # Verde
    NEGATIVE = '#EF4444'   # Vermelho
    WARNING = '#EAB308'    # Amarelo (saldo/lucro negativo)

    FONT_BOLD = "Helvetica-Bold"
    FONT_REGULAR = "Helvetica"

    MARGIN = 1.5*cm
    ROW_HEIGHT = 0.7*cm
    CARD_HEIGHT = 2.2*cm
    CARD_GAP = 0.3*cm


def period_text(period_label: str, start: str, end: str) -> str:
    """Rótulo do período; mostra o intervalo quando início e fim diferem"""
    if not start or not end or start == end:
        return period_label
    return f"{period_label} ({start} - {end})"


def report_file_name(period: str, today: date = None) -> str:
    today = today or date.today()
    return f"relatorio-financeiro-{period}-{today.isoformat()}.pdf"


def _signed_color(value: float) -> str:
    return ReportDesign.POSITIVE if value >= 0 else ReportDesign.WARNING


# ==========================================
# 💎 FUNÇÕES DE DESENHO
# ==========================================

def draw_header(c, company_name, y_position, logo_path=None):
    largura = A4[0]

    if logo_path and Path(logo_path).exists():
        try:
            logo_width = 5.0*cm
            logo_height = 1.875*cm
            c.drawImage(
                ImageReader(str(logo_path)),
                (largura - logo_width) / 2,
                y_position - logo_height,
                width=logo_width,
                height=logo_height,
                preserveAspectRatio=True,
                mask='auto'
            )
            return y_position - logo_height - 0.6*cm
        except (OSError, ValueError) as e:
            logger.warning(f"Erro ao carregar logo: {e}")

    c.setFont(ReportDesign.FONT_BOLD, 20)
    c.setFillColor(HexColor(ReportDesign.TITLE))
    c.drawCentredString(largura / 2, y_position - 0.5*cm, company_name)
    return y_position - 1.5*cm


def draw_title(c, period_label, y_position):
    largura = A4[0]

    c.setFont(ReportDesign.FONT_REGULAR, 14)
    c.setFillColor(HexColor(ReportDesign.MUTED))
    c.drawCentredString(largura / 2, y_position, "RELATÓRIO FINANCEIRO")
    y_position -= 0.6*cm

    c.setFont(ReportDesign.FONT_REGULAR, 10)
    c.setFillColor(HexColor(ReportDesign.SUBTLE))
    c.drawCentredString(largura / 2, y_position, period_label)
    y_position -= 0.8*cm

    c.setStrokeColor(HexColor(ReportDesign.LINE))
    c.setLineWidth(0.5)
    c.line(ReportDesign.MARGIN, y_position, largura - ReportDesign.MARGIN, y_position)

    return y_position - 0.6*cm


def draw_summary_cards(c, summary, y_position):
    """Quatro cartões: Saldo, Receitas, Despesas e Lucro Bruto"""
    largura = A4[0]
    available = largura - 2 * ReportDesign.MARGIN - 3 * ReportDesign.CARD_GAP
    card_width = available / 4
    card_bottom = y_position - ReportDesign.CARD_HEIGHT

    profit = summary["gross_profit"]["profit"]
    cards = [
        ("Saldo", summary["balance"], _signed_color(summary["balance"])),
        ("Receitas", summary["total_income"], ReportDesign.POSITIVE),
        ("Despesas", summary["total_expenses"], ReportDesign.NEGATIVE),
        ("Lucro Bruto", profit, _signed_color(profit)),
    ]

    for i, (label, value, color) in enumerate(cards):
        x = ReportDesign.MARGIN + i * (card_width + ReportDesign.CARD_GAP)
        c.setFillColor(HexColor(ReportDesign.CARD_BG))
        c.setStrokeColor(HexColor(ReportDesign.CARD_BORDER))
        c.roundRect(x, card_bottom, card_width, ReportDesign.CARD_HEIGHT, 0.2*cm, stroke=1, fill=1)

        c.setFont(ReportDesign.FONT_REGULAR, 8)
        c.setFillColor(HexColor(ReportDesign.MUTED))
        c.drawCentredString(x + card_width / 2, y_position - 0.7*cm, label)

        c.setFont(ReportDesign.FONT_BOLD, 10)
        c.setFillColor(HexColor(color))
        c.drawCentredString(x + card_width / 2, y_position - 1.6*cm, format_currency(value))

    y_position = card_bottom - 0.8*cm

    c.setFont(ReportDesign.FONT_REGULAR, 8)
    c.setFillColor(HexColor(ReportDesign.MUTED))
    margin_pct = summary["gross_profit"]["margin"]
    c.drawRightString(largura - ReportDesign.MARGIN, y_position, f"Margem de lucro: {margin_pct:.1f}%")

    return y_position - 1.0*cm


def _table_header(c, titles, widths, y_position, fill):
    largura = A4[0]
    table_width = largura - 2 * ReportDesign.MARGIN

    c.setFillColor(HexColor(fill))
    c.roundRect(ReportDesign.MARGIN, y_position - ReportDesign.ROW_HEIGHT, table_width, ReportDesign.ROW_HEIGHT, 0.1*cm, stroke=0, fill=1)
    c.setFont(ReportDesign.FONT_BOLD, 8)
    c.setFillColor(HexColor(ReportDesign.WHITE))

    x = ReportDesign.MARGIN
    for title, share in zip(titles, widths):
        c.drawString(x + 0.3*cm, y_position - 0.5*cm, title)
        x += table_width * share

    return y_position - ReportDesign.ROW_HEIGHT


def _row_background(c, index, y_position):
    largura = A4[0]
    c.setFillColor(HexColor(ReportDesign.WHITE if index % 2 == 0 else ReportDesign.ROW_ALT))
    c.rect(
        ReportDesign.MARGIN,
        y_position - ReportDesign.ROW_HEIGHT,
        largura - 2 * ReportDesign.MARGIN,
        ReportDesign.ROW_HEIGHT,
        stroke=0,
        fill=1
    )


def draw_transactions(c, transactions, y_position):
    """Tabela de lançamentos (no máximo 25 linhas)"""
    largura = A4[0]
    table_width = largura - 2 * ReportDesign.MARGIN
    widths = (0.12, 0.12, 0.52, 0.24)

    c.setFont(ReportDesign.FONT_BOLD, 11)
    c.setFillColor(HexColor(ReportDesign.TITLE))
    c.drawString(ReportDesign.MARGIN, y_position, "Transações")
    y_position -= 0.4*cm

    y_position = _table_header(c, ("Data", "Tipo", "Descrição", "Valor"), widths, y_position, ReportDesign.TERRACOTTA)

    cols = [ReportDesign.MARGIN]
    for share in widths[:-1]:
        cols.append(cols[-1] + table_width * share)

    for i, t in enumerate(transactions[:MAX_TRANSACTION_ROWS]):
        _row_background(c, i, y_position)
        text_y = y_position - 0.5*cm
        is_income = t["type"] == "income"
        color = ReportDesign.POSITIVE if is_income else ReportDesign.NEGATIVE

        c.setFont(ReportDesign.FONT_REGULAR, 7)
        c.setFillColor(HexColor(ReportDesign.MUTED))
        c.drawString(cols[0] + 0.3*cm, text_y, format_date(t["date"]))

        c.setFillColor(HexColor(color))
        c.drawString(cols[1] + 0.3*cm, text_y, "Receita" if is_income else "Despesa")

        c.setFillColor(HexColor(ReportDesign.TEXT))
        c.drawString(cols[2] + 0.3*cm, text_y, (t.get("description") or "Sem descrição")[:45])

        c.setFillColor(HexColor(color))
        sign = "+" if is_income else "-"
        c.drawString(cols[3] + 0.3*cm, text_y, f"{sign} {format_currency(t['amount'])}")

        y_position -= ReportDesign.ROW_HEIGHT

    if len(transactions) > MAX_TRANSACTION_ROWS:
        c.setFont(ReportDesign.FONT_REGULAR, 7)
        c.setFillColor(HexColor(ReportDesign.SUBTLE))
        c.drawString(
            ReportDesign.MARGIN,
            y_position - 0.4*cm,
            f"... e mais {len(transactions) - MAX_TRANSACTION_ROWS} transações"
        )
        y_position -= 0.8*cm

    return y_position - 1.0*cm


def draw_expenses_by_category(c, categories, y_position):
    # Só desenha se houver despesas e espaço na página
    if not categories or y_position < 6.0*cm:
        return y_position

    largura = A4[0]
    table_width = largura - 2 * ReportDesign.MARGIN
    widths = (0.50, 0.30, 0.20)

    c.setFont(ReportDesign.FONT_BOLD, 11)
    c.setFillColor(HexColor(ReportDesign.TITLE))
    c.drawString(ReportDesign.MARGIN, y_position, "Despesas por Categoria")
    y_position -= 0.4*cm

    y_position = _table_header(c, ("Categoria", "Valor", "%"), widths, y_position, ReportDesign.MUTED)

    for i, cat in enumerate(categories):
        if y_position < 2.5*cm:
            break
        _row_background(c, i, y_position)
        text_y = y_position - 0.5*cm
        c.setFont(ReportDesign.FONT_REGULAR, 8)

        c.setFillColor(HexColor(ReportDesign.TEXT))
        c.drawString(ReportDesign.MARGIN + 0.3*cm, text_y, cat["category"])

        c.setFillColor(HexColor(ReportDesign.NEGATIVE))
        c.drawString(ReportDesign.MARGIN + table_width * widths[0] + 0.3*cm, text_y, format_currency(cat["amount"]))

        c.setFillColor(HexColor(ReportDesign.MUTED))
        c.drawString(
            ReportDesign.MARGIN + table_width * (widths[0] + widths[1]) + 0.3*cm,
            text_y,
            f"{cat['percentage']:.1f}%"
        )
        y_position -= ReportDesign.ROW_HEIGHT

    return y_position


def draw_footer(c, company_name):
    now = datetime.now()
    c.setFont(ReportDesign.FONT_REGULAR, 8)
    c.setFillColor(HexColor(ReportDesign.LIGHT_GRAY))
    c.drawCentredString(
        A4[0] / 2,
        1.2*cm,
        f"Gerado em {format_date(now)} às {now.strftime('%H:%M')} - {company_name}"
    )


# ==========================================
# 🚀 FUNÇÃO PRINCIPAL (GERADOR)
# ==========================================

async def generate_finance_report_pdf(report: dict, company_name: str, logo_path: str = None) -> bytes:
    """
    Gera o PDF do relatório financeiro.

    report:
        period_label, period_dates {start, end},
        summary {balance, total_income, total_expenses, gross_profit {profit, margin}},
        transactions [{date, type, description, amount}],
        expenses_by_category [{category, amount, percentage}]
    """
    buffer = BytesIO()

    c = canvas.Canvas(buffer, pagesize=A4)
    altura = A4[1]

    try:
        y_pos = altura - ReportDesign.MARGIN

        dates = report.get("period_dates") or {}
        label = period_text(report.get("period_label") or "", dates.get("start"), dates.get("end"))
        transactions = report.get("transactions") or []

        y_pos = draw_header(c, company_name, y_pos, logo_path=logo_path)
        y_pos = draw_title(c, label, y_pos)
        y_pos = draw_summary_cards(c, report["summary"], y_pos)
        y_pos = draw_transactions(c, transactions, y_pos)
        draw_expenses_by_category(c, report.get("expenses_by_category") or [], y_pos)
        draw_footer(c, company_name)

        c.showPage()
        c.save()

        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.info(f"✅ Relatório financeiro gerado - {label} - {len(transactions)} transações")
        return pdf_bytes

    except Exception as e:
        logger.error(f"❌ Erro ao gerar relatório financeiro: {str(e)}")
        buffer.close()
        raise
