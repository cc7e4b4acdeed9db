"""Footnote synchronizer — make a translation's footnotes match a new list.

Learn: This is a full replace, not a merge. Every footnote of the parent
is deleted, then exactly the supplied entries are inserted. Both phases
run inside the caller's transaction after locking the parent row
(SELECT ... FOR UPDATE), so:

- a failure while inserting rolls back the delete too, and
- two writers replacing footnotes on the same parent take turns instead
  of interleaving their deletes and inserts into a mixed set.

The caller owns the transaction and commits once the whole write is done.
"""

from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from acikkuran.db.models import UserFootnote, UserTranslation
from acikkuran.errors import StoreFailure
from acikkuran.schemas.translation import FootnoteIn


def lock_parent_statement(parent_id: int):
    """SELECT the parent translation row FOR UPDATE."""
    return (
        select(UserTranslation.id)
        .where(UserTranslation.id == parent_id)
        .with_for_update()
    )


class FootnoteSynchronizer:
    """Replace and list the footnotes of one translation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def replace_all(
        self,
        parent_id: int,
        user_id: str,
        verse_id: int,
        footnotes: Sequence[FootnoteIn],
    ) -> list[UserFootnote]:
        """Replace the parent's footnotes; returns them ordered by number.

        Entries without a number or text are skipped.
        """
        try:
            await self.db.execute(lock_parent_statement(parent_id))
            await self.db.execute(
                delete(UserFootnote).where(
                    UserFootnote.user_translation_id == parent_id
                )
            )
            self.db.add_all(
                UserFootnote(
                    user_translation_id=parent_id,
                    verse_id=verse_id,
                    user_id=user_id,
                    number=f.number,
                    text=f.text,
                )
                for f in footnotes
                if f.is_complete
            )
            await self.db.flush()
        except SQLAlchemyError as e:
            raise StoreFailure(f"footnote replace failed: {e}") from e

        return await self.list_for(parent_id)

    async def list_for(self, parent_id: int) -> list[UserFootnote]:
        """Persisted footnotes of a translation, ascending by number."""
        try:
            result = await self.db.execute(
                select(UserFootnote)
                .where(UserFootnote.user_translation_id == parent_id)
                .order_by(UserFootnote.number)
            )
        except SQLAlchemyError as e:
            raise StoreFailure(f"footnote read failed: {e}") from e
        return list(result.scalars().all())
