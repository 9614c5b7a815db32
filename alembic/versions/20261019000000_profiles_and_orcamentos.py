"""Create profiles (credential store) and orcamentos (lançamentos).

Revision ID: 20261019000000
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20261019000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=False, server_default="4"),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_profiles")),
    )
    # Uniqueness enforced here, not only by the pre-insert check.
    op.create_index(op.f("ix_profiles_email"), "profiles", ["email"], unique=True)

    op.create_table(
        "orcamentos",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("tipo", sa.String(length=16), nullable=False),
        sa.Column("descricao", sa.String(length=255), nullable=False),
        sa.Column("valor", sa.Numeric(12, 2), nullable=False),
        sa.Column("data", sa.Date(), nullable=False),
        sa.Column("mes_ano", sa.String(length=7), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["profiles.id"],
            name=op.f("fk_orcamentos_user_id_profiles"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_orcamentos")),
    )
    op.create_index(op.f("ix_orcamentos_user_id"), "orcamentos", ["user_id"])
    op.create_index(op.f("ix_orcamentos_mes_ano"), "orcamentos", ["mes_ano"])


def downgrade() -> None:
    op.drop_index(op.f("ix_orcamentos_mes_ano"), table_name="orcamentos")
    op.drop_index(op.f("ix_orcamentos_user_id"), table_name="orcamentos")
    op.drop_table("orcamentos")
    op.drop_index(op.f("ix_profiles_email"), table_name="profiles")
    op.drop_table("profiles")
