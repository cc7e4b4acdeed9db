"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Alembic migrations mirror these tables.

Key concepts:
- (user_id, verse_id) is the conflict key for the translation upsert
- footnote numbers are unique per translation, enforced by the database
- timestamps default application-side so that every write in one
  transaction still gets its own, strictly later, updated_at
"""

from datetime import datetime, timezone

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserTranslation(Base):
    """A user's own translation of one verse.

    Learn: user_id is the NextAuth subject (a string), not a foreign key:
    users live in the frontend's database, not ours.
    """

    __tablename__ = "acikkuran_user_translations"
    __table_args__ = (
        UniqueConstraint("user_id", "verse_id", name="uq_user_translations_user_verse"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    verse_id: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    footnotes: Mapped[list["UserFootnote"]] = relationship(
        back_populates="translation",
        order_by="UserFootnote.number",
        passive_deletes=True,
    )


class UserFootnote(Base):
    """A numbered footnote attached to a user translation.

    Learn: verse_id and user_id are denormalized from the parent so the
    frontend can query footnotes by verse without a join.
    """

    __tablename__ = "acikkuran_user_footnotes"
    __table_args__ = (
        UniqueConstraint(
            "user_translation_id", "number",
            name="uq_user_footnotes_translation_number",
        ),
        Index("ix_user_footnotes_user_verse", "user_id", "verse_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_translation_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("acikkuran_user_translations.id", ondelete="CASCADE"),
        nullable=False,
    )
    verse_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)

    translation: Mapped["UserTranslation"] = relationship(back_populates="footnotes")
