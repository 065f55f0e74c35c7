"""
Schema inicial: usuarios, livros, reservas, avaliacoes, favoritos.

Inclui a constraint de exclusão que impede, no próprio banco, dois
períodos sobrepostos para o mesmo livro:

    EXCLUDE USING gist (livro_id WITH =,
                        daterange(data_retirada, data_devolucao, '[]') WITH &&)

O range é fechado ('[]'), igual à checagem feita pelo service. Requer a
extensão btree_gist para o operador de igualdade em inteiros.

Revision ID: 0001
Revises:
Create Date: 2026-10-19 10:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

EXCLUSION_CONSTRAINT = "ex_reservas_livro_periodo"


def _criado_em() -> sa.Column:
    return sa.Column(
        "criado_em",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    op.create_table(
        "usuarios",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("nome", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default=sa.true()),
        _criado_em(),
    )
    op.create_index("ix_usuarios_email", "usuarios", ["email"], unique=True)

    op.create_table(
        "livros",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("titulo", sa.String(500), nullable=False),
        sa.Column("autor", sa.String(255), nullable=False),
        sa.Column("isbn", sa.String(20), nullable=True, unique=True),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("disponivel", sa.Boolean(), nullable=False, server_default=sa.true()),
        _criado_em(),
    )

    op.create_table(
        "reservas",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "usuario_id",
            sa.Integer(),
            sa.ForeignKey("usuarios.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "livro_id",
            sa.Integer(),
            sa.ForeignKey("livros.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("data_retirada", sa.Date(), nullable=False),
        sa.Column("data_devolucao", sa.Date(), nullable=False),
        sa.Column("confirmado_email", sa.Boolean(), nullable=False, server_default=sa.false()),
        _criado_em(),
        sa.CheckConstraint(
            "data_devolucao > data_retirada",
            name="ck_reservas_periodo_valido",
        ),
    )
    op.create_index("ix_reservas_usuario_id", "reservas", ["usuario_id"])
    op.create_index(
        "ix_reservas_livro_periodo",
        "reservas",
        ["livro_id", "data_retirada", "data_devolucao"],
    )
    op.create_index("ix_reservas_usuario_devolucao", "reservas", ["usuario_id", "data_devolucao"])
    op.create_index("ix_reservas_criado_em", "reservas", ["criado_em"])
    op.execute(
        f"""
        ALTER TABLE reservas
        ADD CONSTRAINT {EXCLUSION_CONSTRAINT}
        EXCLUDE USING gist (
            livro_id WITH =,
            daterange(data_retirada, data_devolucao, '[]') WITH &&
        )
        """
    )

    op.create_table(
        "avaliacoes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "usuario_id",
            sa.Integer(),
            sa.ForeignKey("usuarios.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "livro_id",
            sa.Integer(),
            sa.ForeignKey("livros.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("nota", sa.Integer(), nullable=False),
        sa.Column("comentario", sa.Text(), nullable=True),
        _criado_em(),
        sa.CheckConstraint("nota BETWEEN 1 AND 5", name="ck_avaliacoes_nota"),
    )
    op.create_index("ix_avaliacoes_usuario_id", "avaliacoes", ["usuario_id"])
    op.create_index("ix_avaliacoes_livro_id", "avaliacoes", ["livro_id"])

    op.create_table(
        "favoritos",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "usuario_id",
            sa.Integer(),
            sa.ForeignKey("usuarios.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "livro_id",
            sa.Integer(),
            sa.ForeignKey("livros.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("data_favoritado", sa.Date(), nullable=False),
        _criado_em(),
        sa.UniqueConstraint("usuario_id", "livro_id", name="uq_favoritos_usuario_livro"),
    )
    op.create_index("ix_favoritos_usuario_id", "favoritos", ["usuario_id"])


def downgrade() -> None:
    op.drop_index("ix_favoritos_usuario_id", table_name="favoritos")
    op.drop_table("favoritos")

    op.drop_index("ix_avaliacoes_livro_id", table_name="avaliacoes")
    op.drop_index("ix_avaliacoes_usuario_id", table_name="avaliacoes")
    op.drop_table("avaliacoes")

    op.drop_index("ix_reservas_criado_em", table_name="reservas")
    op.drop_index("ix_reservas_usuario_devolucao", table_name="reservas")
    op.drop_index("ix_reservas_livro_periodo", table_name="reservas")
    op.drop_index("ix_reservas_usuario_id", table_name="reservas")
    op.drop_table("reservas")

    op.drop_table("livros")

    op.drop_index("ix_usuarios_email", table_name="usuarios")
    op.drop_table("usuarios")
