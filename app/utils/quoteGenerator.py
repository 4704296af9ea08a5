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

from app.core.config import settings
from app.utils.formatting import format_currency, format_date, MONTHS, slugify_name

# Configurar logging
logger = logging.getLogger(__name__)

DEFAULT_TERMS = [
    "• O pedido será confirmado após o pagamento de 50% do valor total (sinal).",
    "• O restante deve ser pago na entrega/retirada do pedido.",
    "• Cancelamentos com menos de 48h de antecedência não terão reembolso do sinal.",
    "• Alterações devem ser solicitadas com pelo menos 72h de antecedência.",
]

UNIT_LABELS = {"kg": "Kg", "cento": "Cento"}


# ==========================================
# 🎨 CONFIGURAÇÕES DE DESIGN DO ORÇAMENTO
# ==========================================
class QuoteDesign:
    TERRACOTTA = '#B46446'   # Cabeçalho da tabela e TOTAL
    TEXT = '#3C3C3C'
    TITLE = '#333333'
    MUTED = '#646464'
    LIGHT_GRAY = '#969696'
    LINE = '#DCDCDC'
    BORDER = '#C8BEB4'
    ROW_ALT = '#FAF8F5'
    GIFT_BG = '#DCFCE7'
    GIFT = '#16A34A'
    DEPOSIT_BG = '#FFF3E0'
    DEPOSIT = '#B45309'
    TERMS = '#787878'
    WHITE = '#FFFFFF'

    FONT_BOLD = "Helvetica-Bold"
    FONT_REGULAR = "Helvetica"

    MARGIN = 2.0*cm
    ROW_HEIGHT = 1.0*cm
    LINE_HEIGHT = 0.6*cm

    # Proporção das colunas: Produto, Qtd, Unit., Total
    COLUMNS = (0.45, 0.15, 0.20, 0.20)


def unit_label(unit_type) -> str:
    return UNIT_LABELS.get(unit_type or "unit", "Un")


def format_quantity(quantity) -> str:
    return f"{quantity or 0:g}".replace('.', ',')


def format_delivery_date(value) -> str:
    """05 de março de 2025 (ou "A definir")"""
    if not value:
        return "A definir"
    return f"{value.day:02d} de {MONTHS[value.month - 1]} de {value.year}"


def quote_file_name(order, today: date = None) -> str:
    """orcamento-maria-silva-2025-03-05.pdf"""
    today = today or date.today()
    name = order.client.name if order.client else None
    return f"orcamento-{slugify_name(name)}-{today.isoformat()}.pdf"


def quote_totals(order) -> dict:
    """Subtotal cheio, desconto de brindes e subtotal dos produtos"""
    full_subtotal = sum(item.subtotal for item in order.items)
    gift_discount = sum(item.subtotal for item in order.items if item.is_gift)
    return {
        "full_subtotal": full_subtotal,
        "gift_discount": gift_discount,
        "subtotal": full_subtotal - gift_discount,
    }


def terms_lines(profile) -> list:
    """Termos do orçamento; vazio quando desativado no perfil"""
    if profile is not None and profile.include_terms_in_pdf is False:
        return []
    custom = profile.custom_terms if profile is not None else None
    if custom and custom.strip():
        return ["TERMOS DE SERVIÇO:"] + [line for line in custom.split("\n") if line.strip()]
    return ["TERMOS DE SERVIÇO:"] + DEFAULT_TERMS


# ==========================================
# 💎 FUNÇÕES DE DESENHO
# ==========================================

def draw_header(c, company_name, y_position, logo_path=None):
    """Logo centralizado ou, sem logo, o nome da confeitaria"""
    largura = A4[0]

    if logo_path and Path(logo_path).exists():
        try:
            logo = ImageReader(str(logo_path))
            logo_width = 6.0*cm
            logo_height = 2.25*cm
            c.drawImage(
                logo,
                (largura - logo_width) / 2,
                y_position - logo_height,
                width=logo_width,
                height=logo_height,
                preserveAspectRatio=True,
                mask='auto'
            )
            return y_position - logo_height - 0.8*cm
        except (OSError, ValueError) as e:
            logger.warning(f"Erro ao carregar logo: {e}")

    c.setFont(QuoteDesign.FONT_BOLD, 24)
    c.setFillColor(HexColor(QuoteDesign.TITLE))
    c.drawCentredString(largura / 2, y_position - 0.8*cm, company_name)
    return y_position - 2.0*cm


def draw_title(c, y_position):
    largura = A4[0]

    c.setFont(QuoteDesign.FONT_REGULAR, 14)
    c.setFillColor(HexColor(QuoteDesign.MUTED))
    c.drawCentredString(largura / 2, y_position, "ORÇAMENTO")

    line_y = y_position - 0.8*cm
    c.setStrokeColor(HexColor(QuoteDesign.LINE))
    c.setLineWidth(0.5)
    c.line(QuoteDesign.MARGIN, line_y, largura - QuoteDesign.MARGIN, line_y)

    return line_y - 1.2*cm


def draw_client_info(c, order, y_position):
    c.setFont(QuoteDesign.FONT_REGULAR, 10)
    c.setFillColor(HexColor(QuoteDesign.TEXT))

    lines = [f"Cliente: {order.client.name if order.client else 'N/A'}"]
    if order.client and order.client.phone:
        lines.append(f"Telefone: {order.client.phone}")
    delivery = format_delivery_date(order.delivery_date)
    if order.delivery_time:
        delivery += f" às {order.delivery_time}"
    lines.append(f"Data de Entrega: {delivery}")
    if order.delivery_address:
        lines.append(f"Endereço: {order.delivery_address}")

    for line in lines:
        c.drawString(QuoteDesign.MARGIN, y_position, line)
        y_position -= QuoteDesign.LINE_HEIGHT

    return y_position - 0.8*cm


def _column_positions(table_width):
    positions = []
    x = QuoteDesign.MARGIN
    for share in QuoteDesign.COLUMNS:
        positions.append(x)
        x += table_width * share
    return positions


def draw_items_table(c, items, y_position):
    """
    Tabela de itens com cabeçalho terracota.
    Brinde: linha verde, preço riscado e R$ 0,00. Item sem produto: [ADICIONAL].
    """
    largura = A4[0]
    table_width = largura - 2 * QuoteDesign.MARGIN
    cols = _column_positions(table_width)
    row_h = QuoteDesign.ROW_HEIGHT
    text_offset = 0.35*cm

    # Cabeçalho
    c.setFillColor(HexColor(QuoteDesign.TERRACOTTA))
    c.roundRect(QuoteDesign.MARGIN, y_position - row_h, table_width, row_h, 0.15*cm, stroke=0, fill=1)
    c.setFont(QuoteDesign.FONT_BOLD, 10)
    c.setFillColor(HexColor(QuoteDesign.WHITE))
    for x, title in zip(cols, ("Produto", "Qtd", "Unit.", "Total")):
        c.drawString(x + 0.2*cm, y_position - row_h + text_offset, title)

    y_position -= row_h
    table_top = y_position

    c.setFont(QuoteDesign.FONT_REGULAR, 9)
    for i, item in enumerate(items):
        row_y = y_position - row_h
        text_y = row_y + text_offset

        if item.is_gift:
            background = QuoteDesign.GIFT_BG
        elif i % 2 == 0:
            background = QuoteDesign.WHITE
        else:
            background = QuoteDesign.ROW_ALT
        c.setFillColor(HexColor(background))
        c.rect(QuoteDesign.MARGIN, row_y, table_width, row_h, stroke=0, fill=1)

        name = item.product_name or ""
        if item.is_gift:
            c.setFillColor(HexColor(QuoteDesign.GIFT))
            label = f"{name[:28]} [BRINDE]"
        elif item.product_id is None:
            c.setFillColor(HexColor(QuoteDesign.MUTED))
            label = f"{name[:26]} [ADICIONAL]"
        else:
            c.setFillColor(HexColor(QuoteDesign.TEXT))
            label = name[:35]
        c.drawString(cols[0] + 0.2*cm, text_y, label)

        c.setFillColor(HexColor(QuoteDesign.TEXT))
        c.drawString(cols[1] + 0.2*cm, text_y, f"{format_quantity(item.quantity)} {unit_label(item.unit_type)}")
        c.drawString(cols[2] + 0.2*cm, text_y, format_currency(item.unit_price))

        price_text = format_currency(item.subtotal)
        price_x = cols[3] + 0.2*cm
        if item.is_gift:
            c.setFillColor(HexColor(QuoteDesign.LIGHT_GRAY))
            c.drawString(price_x, text_y, price_text)
            price_width = c.stringWidth(price_text, QuoteDesign.FONT_REGULAR, 9)
            c.setStrokeColor(HexColor(QuoteDesign.LIGHT_GRAY))
            c.setLineWidth(0.5)
            c.line(price_x, text_y + 0.1*cm, price_x + price_width, text_y + 0.1*cm)
            c.setFillColor(HexColor(QuoteDesign.GIFT))
            c.drawString(price_x + price_width + 0.15*cm, text_y, "R$ 0,00")
        else:
            c.drawString(price_x, text_y, price_text)

        y_position = row_y

    # Bordas e separadores de colunas
    c.setStrokeColor(HexColor(QuoteDesign.BORDER))
    c.setLineWidth(0.5)
    c.roundRect(QuoteDesign.MARGIN, y_position, table_width, table_top - y_position, 0.15*cm, stroke=1, fill=0)
    for x in cols[1:]:
        c.line(x, y_position, x, table_top)

    return y_position - 0.8*cm


def draw_totals(c, order, y_position):
    largura = A4[0]
    table_width = largura - 2 * QuoteDesign.MARGIN
    cols = _column_positions(table_width)
    label_x = cols[2]
    value_x = cols[3] + 0.2*cm

    figures = quote_totals(order)
    delivery_fee = order.delivery_fee or 0

    c.setFont(QuoteDesign.FONT_REGULAR, 10)
    c.setFillColor(HexColor(QuoteDesign.TEXT))

    if figures["gift_discount"] > 0:
        c.drawString(label_x, y_position, "Subtotal:")
        c.drawString(value_x, y_position, format_currency(figures["full_subtotal"]))
        y_position -= 0.7*cm
        c.setFillColor(HexColor(QuoteDesign.GIFT))
        c.drawString(label_x, y_position, "Brinde:")
        c.drawString(value_x, y_position, f"- {format_currency(figures['gift_discount'])}")
        c.setFillColor(HexColor(QuoteDesign.TEXT))
        y_position -= 0.7*cm

    if delivery_fee > 0 or figures["gift_discount"] > 0:
        c.drawString(label_x, y_position, "Subtotal Produtos:")
        c.drawString(value_x, y_position, format_currency(figures["subtotal"]))
        y_position -= 0.7*cm

    if delivery_fee > 0:
        c.drawString(label_x, y_position, "Taxa de Entrega:")
        c.drawString(value_x, y_position, format_currency(delivery_fee))
        y_position -= 0.7*cm

    c.setFont(QuoteDesign.FONT_BOLD, 12)
    c.setFillColor(HexColor(QuoteDesign.TERRACOTTA))
    c.drawString(label_x, y_position, "TOTAL:")
    c.drawString(value_x, y_position, format_currency(order.total_amount))

    return y_position - 1.2*cm


def draw_deposit_box(c, order, y_position):
    largura = A4[0]
    box_height = 2.0*cm
    box_top = y_position + 0.5*cm

    c.setFillColor(HexColor(QuoteDesign.DEPOSIT_BG))
    c.rect(QuoteDesign.MARGIN, box_top - box_height, largura - 2 * QuoteDesign.MARGIN, box_height, stroke=0, fill=1)

    c.setFillColor(HexColor(QuoteDesign.DEPOSIT))
    c.setFont(QuoteDesign.FONT_REGULAR, 11)
    deposit = (order.total_amount or 0) / 2
    c.drawString(QuoteDesign.MARGIN + 0.5*cm, box_top - 0.8*cm, f"Sinal (50%): {format_currency(deposit)}")
    c.setFont(QuoteDesign.FONT_REGULAR, 9)
    c.drawString(
        QuoteDesign.MARGIN + 0.5*cm,
        box_top - 1.6*cm,
        "*Pagamento do sinal necessário para confirmação do pedido"
    )

    return box_top - box_height - 0.8*cm


def draw_payment_details(c, profile, y_position):
    if profile is None or not (profile.pix_key or profile.bank_details):
        return y_position

    c.setFillColor(HexColor(QuoteDesign.TITLE))
    c.setFont(QuoteDesign.FONT_BOLD, 11)
    c.drawString(QuoteDesign.MARGIN, y_position, "Dados para Pagamento:")
    y_position -= 0.8*cm

    c.setFont(QuoteDesign.FONT_REGULAR, 10)
    if profile.pix_key:
        c.drawString(QuoteDesign.MARGIN, y_position, f"Chave Pix: {profile.pix_key}")
        y_position -= 0.7*cm
    if profile.bank_details:
        for line in profile.bank_details.split("\n"):
            c.drawString(QuoteDesign.MARGIN, y_position, line)
            y_position -= QuoteDesign.LINE_HEIGHT

    return y_position - 0.8*cm


def draw_notes(c, notes, y_position):
    if not notes:
        return y_position

    c.setFillColor(HexColor(QuoteDesign.TITLE))
    c.setFont(QuoteDesign.FONT_BOLD, 10)
    c.drawString(QuoteDesign.MARGIN, y_position, "Observações:")
    y_position -= 0.7*cm
    c.setFont(QuoteDesign.FONT_REGULAR, 10)
    c.drawString(QuoteDesign.MARGIN, y_position, notes[:100])

    return y_position - 1.2*cm


def draw_terms(c, profile, y_position):
    c.setFont(QuoteDesign.FONT_REGULAR, 8)
    c.setFillColor(HexColor(QuoteDesign.TERMS))
    for line in terms_lines(profile):
        c.drawString(QuoteDesign.MARGIN, y_position, line[:90])
        y_position -= 0.5*cm
    return y_position


def draw_footer(c, company_name):
    c.setFont(QuoteDesign.FONT_REGULAR, 9)
    c.setFillColor(HexColor(QuoteDesign.LIGHT_GRAY))
    c.drawCentredString(
        A4[0] / 2,
        1.5*cm,
        f"Orçamento gerado em {format_date(datetime.now())} - {company_name}"
    )


# ==========================================
# 🚀 FUNÇÃO PRINCIPAL (GERADOR)
# ==========================================

async def generate_quote_pdf(order, profile=None, logo_path: str = None) -> bytes:
    """
    Gera o PDF do orçamento de um pedido.
    Usa os dados da confeitaria (perfil) para logo, pagamento e termos.
    """
    buffer = BytesIO()

    c = canvas.Canvas(buffer, pagesize=A4)
    altura = A4[1]

    company_name = (profile.company_name if profile else None) or settings.DEFAULT_COMPANY_NAME

    try:
        y_pos = altura - QuoteDesign.MARGIN

        y_pos = draw_header(c, company_name, y_pos, logo_path=logo_path)
        y_pos = draw_title(c, y_pos)
        y_pos = draw_client_info(c, order, y_pos)
        y_pos = draw_items_table(c, order.items, y_pos)
        y_pos = draw_totals(c, order, y_pos)
        y_pos = draw_deposit_box(c, order, y_pos)
        y_pos = draw_payment_details(c, profile, y_pos)
        y_pos = draw_notes(c, order.notes, y_pos)
        draw_terms(c, profile, y_pos)
        draw_footer(c, company_name)

        c.showPage()
        c.save()

        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.info(f"✅ Orçamento gerado - Pedido {order.id} - Total: {format_currency(order.total_amount)}")
        return pdf_bytes

    except Exception as e:
        logger.error(f"❌ Erro ao gerar PDF do orçamento: {str(e)}")
        buffer.close()
        raise
