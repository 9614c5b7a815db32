"""ORM model for lançamentos (income/expense entries scoped to a month)."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, func

from controle_financeiro.models.base import Base


class Orcamento(Base):
    """
    One lançamento owned by a profile.

    tipo: 'receita' or 'despesa'. valor is stored as sent; clients send
    expenses as negative numbers. mes_ano is 'YYYY-MM'.
    """

    __tablename__ = "orcamentos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tipo = Column(String(16), nullable=False)
    descricao = Column(String(255), nullable=False)
    valor = Column(Numeric(12, 2), nullable=False)
    data = Column(Date, nullable=False)
    mes_ano = Column(String(7), nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
