"""
ZAP Confeitaria - Transaction Model
Lançamentos financeiros (manuais e automáticos dos pedidos)
"""
import uuid
from datetime import datetime, date
from enum import Enum
from sqlalchemy import Column, String, Date, DateTime, Float, ForeignKey, Boolean

from app.database import Base


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionCategory(str, Enum):
    """Categorias conhecidas (prefixo "Categoria - descrição")"""
    # Despesas
    INSUMOS = "Insumos"
    EMBALAGENS = "Embalagens"
    COMBUSTIVEL = "Combustível"
    EQUIPAMENTOS = "Equipamentos"
    MARKETING = "Marketing"
    ALUGUEL = "Aluguel"
    OUTROS = "Outros"
    # Receitas
    SINAL = "Sinal"
    PAGAMENTO_FINAL = "Pagamento Final"
    PAGAMENTO_TOTAL = "Pagamento Total"
    VENDA_AVULSA = "Venda Avulsa"


EXPENSE_CATEGORIES = [
    TransactionCategory.INSUMOS,
    TransactionCategory.EMBALAGENS,
    TransactionCategory.COMBUSTIVEL,
    TransactionCategory.EQUIPAMENTOS,
    TransactionCategory.MARKETING,
    TransactionCategory.ALUGUEL,
    TransactionCategory.OUTROS,
]

INCOME_CATEGORIES = [
    TransactionCategory.SINAL,
    TransactionCategory.PAGAMENTO_FINAL,
    TransactionCategory.PAGAMENTO_TOTAL,
    TransactionCategory.VENDA_AVULSA,
    TransactionCategory.OUTROS,
]


class Transaction(Base):
    """Lançamento de receita ou despesa"""
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), index=True)

    type = Column(String(10), nullable=False, index=True)
    category = Column(String(50), index=True)
    description = Column(String(500), nullable=False)
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False, default=date.today, index=True)
    # Lançado pelo ciclo de vida do pedido (sinal, pagamento final/total)
    is_automatic = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "order_id": self.order_id,
            "type": self.type,
            "category": self.category,
            "description": self.description,
            "amount": self.amount,
            "is_automatic": bool(self.is_automatic),
            "date": self.date.isoformat() if self.date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
