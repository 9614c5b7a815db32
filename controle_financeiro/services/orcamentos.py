"""Lançamentos: create, list, delete a user's own entries and compute monthly totals."""

import logging
import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from controle_financeiro.core.errors import StorageError, ValidationError
from controle_financeiro.models import Orcamento
from controle_financeiro.schemas.orcamento import OrcamentoCreate, ResumoResponse

logger = logging.getLogger(__name__)

TIPOS = frozenset({"receita", "despesa"})
MES_ANO_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")
DESCRICAO_MAX_LEN = 255
# orcamentos.valor is Numeric(12, 2).
CENT = Decimal("0.01")
VALOR_LIMIT = Decimal(10) ** 10

MSG_MISSING_FIELDS = "Campos obrigatórios faltando."
MSG_INVALID_TIPO = "Tipo deve ser 'receita' ou 'despesa'."
MSG_INVALID_VALOR = "Valor inválido."
MSG_INVALID_DATA = "Data inválida. Use o formato AAAA-MM-DD."
MSG_INVALID_MES_ANO = "Mês inválido. Use o formato AAAA-MM."
MSG_DESCRICAO_TOO_LONG = f"Descrição deve ter no máximo {DESCRICAO_MAX_LEN} caracteres."
MSG_MISSING_ID = "ID do lançamento obrigatório."
MSG_CREATED = "Lançamento adicionado com sucesso!"
MSG_DELETED = "Lançamento excluído com sucesso!"
MSG_LIST_FAILED = "Erro ao carregar lançamentos."
MSG_SAVE_FAILED = "Erro ao salvar lançamento."
MSG_DELETE_FAILED = "Erro ao excluir lançamento."


def _to_decimal(value: object) -> Decimal:
    """
    Accept numbers and numeric strings (comma as decimal separator allowed).
    Result fits Numeric(12, 2): rounded to cents, below 10**10, and non-zero.
    """
    if isinstance(value, bool):
        raise ValidationError(MSG_INVALID_VALOR, field="valor")
    text = str(value).strip().replace(",", ".")
    try:
        amount = Decimal(text)
    except InvalidOperation as e:
        raise ValidationError(MSG_INVALID_VALOR, field="valor") from e
    if not amount.is_finite() or abs(amount) >= VALOR_LIMIT:
        raise ValidationError(MSG_INVALID_VALOR, field="valor")
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount == 0:
        raise ValidationError(MSG_INVALID_VALOR, field="valor")
    return amount


def validate_mes_ano(mes_ano: str) -> str:
    if not MES_ANO_PATTERN.match(mes_ano.strip()):
        raise ValidationError(MSG_INVALID_MES_ANO, field="mes_ano")
    return mes_ano.strip()


def parse_entry(body: OrcamentoCreate) -> dict:
    """
    Validate a POST /orcamentos body and return column values.

    Every field must be present and truthy (so valor 0 counts as missing).
    """
    for field in ("tipo", "descricao", "valor", "data", "mes_ano"):
        value = getattr(body, field)
        if not value or (isinstance(value, str) and not value.strip()):
            raise ValidationError(MSG_MISSING_FIELDS, field=field)

    tipo = str(body.tipo).strip().lower()
    if tipo not in TIPOS:
        raise ValidationError(MSG_INVALID_TIPO, field="tipo")

    descricao = str(body.descricao).strip()
    if len(descricao) > DESCRICAO_MAX_LEN:
        raise ValidationError(MSG_DESCRICAO_TOO_LONG, field="descricao")

    try:
        data = date.fromisoformat(str(body.data).strip())
    except ValueError as e:
        raise ValidationError(MSG_INVALID_DATA, field="data") from e

    return {
        "tipo": tipo,
        "descricao": descricao,
        "valor": _to_decimal(body.valor),
        "data": data,
        "mes_ano": validate_mes_ano(str(body.mes_ano)),
    }


def list_entries(db: Session, user_id: str, mes_ano: str | None = None) -> list[Orcamento]:
    """
    Caller's entries, newest data first, optionally for a single month.
    mes_ano is an equality filter only; a value matching no month yields [].
    """
    mes_ano = mes_ano.strip() if mes_ano else None
    try:
        query = db.query(Orcamento).filter(Orcamento.user_id == user_id)
        if mes_ano:
            query = query.filter(Orcamento.mes_ano == mes_ano)
        return query.order_by(Orcamento.data.desc(), Orcamento.id.desc()).all()
    except SQLAlchemyError as e:
        logger.exception("Listing orcamentos failed for user %s", user_id)
        raise StorageError(MSG_LIST_FAILED, cause=e) from e


def create_entry(db: Session, user_id: str, body: OrcamentoCreate) -> Orcamento:
    values = parse_entry(body)
    row = Orcamento(user_id=user_id, **values)
    try:
        db.add(row)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Saving orcamento failed for user %s", user_id)
        raise StorageError(MSG_SAVE_FAILED, cause=e) from e
    logger.info("Orcamento %s created for user %s (%s)", row.id, user_id, values["mes_ano"])
    return row


def parse_entry_id(raw_id: str | None) -> int:
    if raw_id is None or not raw_id.strip():
        raise ValidationError(MSG_MISSING_ID, field="id")
    try:
        return int(raw_id.strip())
    except ValueError as e:
        raise ValidationError(MSG_MISSING_ID, field="id") from e


def delete_entry(db: Session, user_id: str, raw_id: str | None) -> int:
    """
    Delete an entry only if it belongs to user_id. Returns rows deleted
    (0 when the id does not exist or belongs to someone else).
    """
    entry_id = parse_entry_id(raw_id)
    try:
        deleted = (
            db.query(Orcamento)
            .filter(Orcamento.id == entry_id, Orcamento.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Deleting orcamento %s failed for user %s", entry_id, user_id)
        raise StorageError(MSG_DELETE_FAILED, cause=e) from e
    if deleted == 0:
        logger.info("Delete of orcamento %s by user %s matched nothing", entry_id, user_id)
    return deleted


def summarize(entries: list[Orcamento], mes_ano: str | None = None) -> ResumoResponse:
    """Totals per tipo using absolute amounts; saldo = receitas - despesas."""
    receitas = sum(
        (abs(Decimal(e.valor)) for e in entries if e.tipo == "receita"), Decimal("0")
    )
    despesas = sum(
        (abs(Decimal(e.valor)) for e in entries if e.tipo == "despesa"), Decimal("0")
    )
    return ResumoResponse(
        mes_ano=mes_ano,
        total_receitas=float(receitas),
        total_despesas=float(despesas),
        saldo=float(receitas - despesas),
        quantidade=len(entries),
    )
