"""Translation store — read and upsert the parent translation row.

Learn: The write is a single INSERT ... ON CONFLICT (user_id, verse_id)
DO UPDATE ... RETURNING statement. The database resolves the race between
two first-writes for the same key, so there is never a second row and
never a read-then-write window. id and created_at are only ever written
by the INSERT branch; the UPDATE branch touches text and updated_at.

The owner id passed to upsert() must come from a verified Identity.
This class does not validate shape; the request schema already did.
"""

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from acikkuran.db.models import UserTranslation, utcnow
from acikkuran.errors import StoreFailure

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert_statement(dialect: str, user_id: str, verse_id: int, text: str, now):
    """Build the INSERT ... ON CONFLICT DO UPDATE ... RETURNING for a dialect."""
    try:
        insert = _INSERT_BY_DIALECT[dialect]
    except KeyError:
        raise StoreFailure(f"upsert is not supported on {dialect}")

    stmt = insert(UserTranslation).values(
        user_id=user_id,
        verse_id=verse_id,
        text=text,
        created_at=now,
        updated_at=now,
    )
    return stmt.on_conflict_do_update(
        index_elements=["user_id", "verse_id"],
        set_={"text": stmt.excluded["text"], "updated_at": now},
    ).returning(UserTranslation)


class TranslationStore:
    """Persistence for UserTranslation rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def read(self, user_id: str, verse_id: int) -> UserTranslation | None:
        """Look up a translation. Absence is not an error."""
        try:
            result = await self.db.execute(
                select(UserTranslation)
                .where(
                    UserTranslation.user_id == user_id,
                    UserTranslation.verse_id == verse_id,
                )
                .limit(1)
            )
        except SQLAlchemyError as e:
            raise StoreFailure(f"translation read failed: {e}") from e
        return result.scalars().first()

    async def upsert(self, user_id: str, verse_id: int, text: str) -> UserTranslation:
        """Create the translation, or update its text if it already exists."""
        stmt = upsert_statement(
            self.db.get_bind().dialect.name, user_id, verse_id, text, utcnow()
        )

        try:
            result = await self.db.execute(
                stmt, execution_options={"populate_existing": True}
            )
            return result.scalars().one()
        except SQLAlchemyError as e:
            raise StoreFailure(f"translation upsert failed: {e}") from e

