"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Unlike routers that are protected as a whole, the translations
router mixes a public GET with a protected POST, so auth is declared on
the POST handler itself (Depends(get_current_identity)) rather than at
include_router level.
"""

from fastapi import APIRouter

from acikkuran.api.health import router as health_router
from acikkuran.api.translations import router as translations_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(translations_router, tags=["translations"])
