"""
api.routes - Aggregates all route modules into a single router.

app.py imports ``from api.routes import router`` which resolves here.
"""

from fastapi import APIRouter

from api.routes.chat import router as chat_router
from api.routes.lookup import router as lookup_router

router = APIRouter()

router.include_router(lookup_router)
router.include_router(chat_router)
