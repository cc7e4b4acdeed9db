"""user translations and footnotes

Learn: The unique constraint on (user_id, verse_id) is what the upsert's
ON CONFLICT clause targets; without it every save would add a new row.
Footnote numbers are unique per translation so a replaced set can never
contain the same number twice.

Revision ID: 3f1c2a9d7b40
Revises:
Create Date: 2026-10-18 10:12:44.512903
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "acikkuran_user_translations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("verse_id", sa.Integer(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True),
            server_default=sa.text("now()"), nullable=True,
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True),
            server_default=sa.text("now()"), nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "verse_id", name="uq_user_translations_user_verse"
        ),
    )

    op.create_table(
        "acikkuran_user_footnotes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_translation_id", sa.Integer(), nullable=False),
        sa.Column("verse_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(
            ["user_translation_id"], ["acikkuran_user_translations.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_translation_id", "number",
            name="uq_user_footnotes_translation_number",
        ),
    )
    op.create_index(
        "ix_user_footnotes_user_verse",
        "acikkuran_user_footnotes",
        ["user_id", "verse_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_user_footnotes_user_verse", table_name="acikkuran_user_footnotes")
    op.drop_table("acikkuran_user_footnotes")
    op.drop_table("acikkuran_user_translations")
