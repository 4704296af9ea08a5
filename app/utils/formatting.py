"""
ZAP Confeitaria - Formatação pt-BR
Moeda, datas e nomes usados em PDFs e mensagens
"""
from datetime import date, datetime
from typing import Optional, Union

MONTHS = ['janeiro', 'fevereiro', 'março', 'abril', 'maio', 'junho',
          'julho', 'agosto', 'setembro', 'outubro', 'novembro', 'dezembro']


def format_currency(amount: Optional[float]) -> str:
    """1234.5 -> R$ 1.234,50"""
    return f"R$ {amount or 0:,.2f}".replace(',', 'X').replace('.', ',').replace('X', '.')


def format_date(value: Optional[Union[date, datetime, str]], default: str = "") -> str:
    """Data no formato dd/mm/aaaa"""
    if not value:
        return default
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            return value
    return value.strftime('%d/%m/%Y')


def format_long_date(value: Optional[date]) -> str:
    """05 de março"""
    return f"{value.day:02d} de {MONTHS[value.month - 1]}"


def first_name(full_name: Optional[str]) -> str:
    if not full_name or not full_name.strip():
        return "Cliente"
    return full_name.split()[0]


def slugify_name(name: Optional[str]) -> str:
    """"Maria da Silva" -> "maria-da-silva" (usado em nomes de arquivo)"""
    return "-".join((name or "cliente").lower().split())
