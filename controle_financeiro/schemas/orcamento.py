"""Pydantic schemas for lançamentos and the monthly summary."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OrcamentoCreate(BaseModel):
    """
    Body for POST /orcamentos. Fields are loosely typed so that missing or
    malformed values reach the entry service and produce its 400 messages.
    """

    model_config = ConfigDict(extra="ignore")

    tipo: Any = None
    descricao: Any = None
    valor: Any = None
    data: Any = None
    mes_ano: Any = None


class OrcamentoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    tipo: str
    descricao: str
    valor: float
    data: date
    mes_ano: str


class ResumoResponse(BaseModel):
    """Monthly totals. Values per tipo are summed as absolute amounts."""

    mes_ano: str | None = Field(default=None, description="Month filter applied, if any")
    total_receitas: float
    total_despesas: float
    saldo: float
    quantidade: int
