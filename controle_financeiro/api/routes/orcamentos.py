"""Lançamentos endpoints, scoped to the authenticated user."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from controle_financeiro.api.routes.auth import require
from controle_financeiro.core.database import get_db
from controle_financeiro.core.roles import Capability
from controle_financeiro.schemas.auth import Identity, MessageResponse
from controle_financeiro.schemas.orcamento import OrcamentoCreate, OrcamentoOut, ResumoResponse
from controle_financeiro.services import orcamentos as service

router = APIRouter()

require_read = require(Capability.ENTRIES_READ)
require_write = require(Capability.ENTRIES_WRITE)


@router.get("", response_model=list[OrcamentoOut])
def list_orcamentos(
    identity: Annotated[Identity, Depends(require_read)],
    db: Annotated[Session, Depends(get_db)],
    mes_ano: Annotated[str | None, Query(description="Month filter, YYYY-MM")] = None,
) -> list[OrcamentoOut]:
    """Caller's lançamentos ordered by date, newest first."""
    entries = service.list_entries(db, identity.id, mes_ano)
    return [OrcamentoOut.model_validate(e) for e in entries]


@router.get("/resumo", response_model=ResumoResponse)
def resumo(
    identity: Annotated[Identity, Depends(require_read)],
    db: Annotated[Session, Depends(get_db)],
    mes_ano: Annotated[str | None, Query(description="Month filter, YYYY-MM")] = None,
) -> ResumoResponse:
    """Total receitas, total despesas and saldo for the caller (optionally one month)."""
    entries = service.list_entries(db, identity.id, mes_ano)
    return service.summarize(entries, mes_ano.strip() if mes_ano else None)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_orcamento(
    body: OrcamentoCreate,
    identity: Annotated[Identity, Depends(require_write)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    service.create_entry(db, identity.id, body)
    return MessageResponse(message=service.MSG_CREATED)


@router.delete("/{entry_id}", response_model=MessageResponse)
def delete_orcamento(
    entry_id: str,
    identity: Annotated[Identity, Depends(require_write)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete one of the caller's lançamentos. Succeeds even if nothing matched."""
    service.delete_entry(db, identity.id, entry_id)
    return MessageResponse(message=service.MSG_DELETED)
