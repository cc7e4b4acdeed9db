"""Translation service — one read or one write of a user translation.

Learn: Service layer separates business logic from HTTP routing.
A write is one transaction: upsert the parent, replace the footnotes
(when the caller sent a list), read the footnotes back, commit. Any
database error rolls the whole write back, logs the ids involved and
surfaces as an opaque StoreFailure.

When the caller omits `footnotes`, the stored footnotes are left as they
are and the response reports them as they are: what we return is always
what is persisted.
"""

from typing import Optional, Sequence

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from acikkuran.auth.jwt import Identity
from acikkuran.db.models import UserFootnote, UserTranslation
from acikkuran.errors import StoreFailure
from acikkuran.schemas.translation import FootnoteIn, FootnoteRead, TranslationRead
from acikkuran.services.footnote_sync import FootnoteSynchronizer
from acikkuran.services.translation_store import TranslationStore

logger = structlog.get_logger()

GET_FAILED = "user-translation-get-failed"
UPSERT_FAILED = "user-translation-upsert-failed"


def to_read(
    translation: UserTranslation, footnotes: Sequence[UserFootnote]
) -> TranslationRead:
    """Snapshot a translation and its footnotes for the response."""
    return TranslationRead(
        id=translation.id,
        user_id=translation.user_id,
        verse_id=translation.verse_id,
        text=translation.text,
        created_at=translation.created_at,
        updated_at=translation.updated_at,
        footnotes=[FootnoteRead.model_validate(f) for f in footnotes],
    )


class TranslationService:
    """Business logic for user translations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.translations = TranslationStore(db)
        self.footnotes = FootnoteSynchronizer(db)

    async def get(self, user_id: str, verse_id: int) -> Optional[TranslationRead]:
        """Public lookup. Returns None when the user has no translation."""
        try:
            translation = await self.translations.read(user_id, verse_id)
            if translation is None:
                return None
            notes = await self.footnotes.list_for(translation.id)
        except StoreFailure as e:
            logger.error(
                "user_translation.get_failed",
                user_id=user_id,
                verse_id=verse_id,
                error=str(e),
            )
            raise StoreFailure(code=GET_FAILED) from e
        return to_read(translation, notes)

    async def save(
        self,
        identity: Identity,
        verse_id: int,
        text: str,
        footnotes: Optional[Sequence[FootnoteIn]] = None,
    ) -> TranslationRead:
        """Upsert the caller's translation and, if given, its footnotes."""
        user_id = identity.id
        try:
            translation = await self.translations.upsert(user_id, verse_id, text)
            if footnotes is not None:
                notes = await self.footnotes.replace_all(
                    translation.id, user_id, verse_id, footnotes
                )
            else:
                notes = await self.footnotes.list_for(translation.id)
            snapshot = to_read(translation, notes)
            await self.db.commit()
        except (StoreFailure, SQLAlchemyError) as e:
            await self.db.rollback()
            logger.error(
                "user_translation.upsert_failed",
                user_id=user_id,
                verse_id=verse_id,
                error=str(e),
            )
            raise StoreFailure(code=UPSERT_FAILED) from e

        logger.info(
            "user_translation.saved",
            user_id=user_id,
            verse_id=verse_id,
            translation_id=snapshot.id,
            footnotes=len(snapshot.footnotes),
        )
        return snapshot
