# mypy: ignore-errors
"""
Migration Alembic initiale: tables des contenus pédagogiques.

Crée vidéos, documents, quiz (questions, options) et modules (éléments), chacun avec sa colonne
vecteur nullable et le nom du modèle d'embedding.
"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "20251019_0001"
down_revision = None
branch_labels = None
depends_on = None

CONTENT_TABLES = ("videos", "documents", "quizzes", "modules")


def _content_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("tenant_id", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("embedding", sa.JSON(), nullable=True),
        sa.Column("embedding_model", sa.String(length=128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Crée les tables de contenu et leurs index tenant/statut."""
    for table in CONTENT_TABLES:
        extra = [sa.Column("duration", sa.Integer(), nullable=True)] if table == "videos" else []
        op.create_table(table, *_content_columns(), *extra)
        op.create_index(f"ix_{table}_tenant_id", table, ["tenant_id"])
        op.create_index(f"ix_{table}_status", table, ["status"])

    op.create_table(
        "quiz_questions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "quiz_id",
            sa.String(length=36),
            sa.ForeignKey("quizzes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("tenant_id", sa.String(length=64), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
    )
    op.create_index("ix_quiz_questions_quiz_id", "quiz_questions", ["quiz_id"])

    op.create_table(
        "quiz_options",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "question_id",
            sa.String(length=36),
            sa.ForeignKey("quiz_questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("option_text", sa.Text(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
    )
    op.create_index("ix_quiz_options_question_id", "quiz_options", ["question_id"])

    op.create_table(
        "module_items",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "module_id",
            sa.String(length=36),
            sa.ForeignKey("modules.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("content_type", sa.String(length=16), nullable=False),
        sa.Column("content_id", sa.String(length=36), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("is_preview", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_module_items_module_id", "module_items", ["module_id"])


def downgrade() -> None:
    """Supprime les tables (enfants d'abord)."""
    op.drop_table("module_items")
    op.drop_table("quiz_options")
    op.drop_table("quiz_questions")
    for table in reversed(CONTENT_TABLES):
        op.drop_table(table)
