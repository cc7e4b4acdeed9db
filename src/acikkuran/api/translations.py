"""User translation API routes.

Learn: Two endpoints on the same path:
- GET  /user/translation → public, anyone can read a user's translation
- POST /user/translation → protected, writes as the token's subject

The POST handler takes the owner from the verified Identity only. Even if
the body carries a user_id, it is never read.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from acikkuran.auth.dependencies import get_current_identity
from acikkuran.auth.jwt import Identity
from acikkuran.db.engine import get_db
from acikkuran.schemas.translation import (
    INT4_MAX,
    TranslationResponse,
    TranslationWrite,
)
from acikkuran.services.translation_service import TranslationService

router = APIRouter(prefix="/user")


def _svc(db: AsyncSession = Depends(get_db)) -> TranslationService:
    return TranslationService(db)


@router.get("/translation", response_model=TranslationResponse)
async def get_translation(
    user_id: str = Query(..., min_length=1),
    verse_id: int = Query(..., gt=0, le=INT4_MAX),
    svc: TranslationService = Depends(_svc),
):
    """Look up a user's translation of a verse. `data` is null if none."""
    translation = await svc.get(user_id=user_id, verse_id=verse_id)
    return TranslationResponse(data=translation)


@router.post("/translation", response_model=TranslationResponse)
async def save_translation(
    body: TranslationWrite,
    identity: Identity = Depends(get_current_identity),
    svc: TranslationService = Depends(_svc),
):
    """Create or update the caller's translation of a verse."""
    translation = await svc.save(
        identity,
        verse_id=body.verse_id,
        text=body.text,
        footnotes=body.footnotes,
    )
    return TranslationResponse(data=translation)
