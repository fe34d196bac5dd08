"""
Lookup Routes - stateless place search and safety advice.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends

from api.dependencies import get_config
from api.schemas import AdviceRequest, AdviceResponse, NearbyRequest, NearbyResponse, PlaceOut
from assistant.advice_fallback import FallbackAdvisor
from assistant.advisor import RemoteAdvisor
from assistant.categories import CategoryResolver, supported_categories_help
from assistant.config import AssistantConfig
from assistant.conversation import outcome_text
from assistant.models import Coordinate
from assistant.places import Found, NotConfigured, NotFoundAtMaxRadius, PlaceSearchEngine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["lookup"])

_resolver = CategoryResolver()


# ---- Health ---- #

@router.get("/health")
async def health(config: AssistantConfig = Depends(get_config)):
    return {
        "status": "ok",
        "places_configured": config.places_enabled,
        "advice_configured": config.advice_enabled,
    }


# ---- Emergency places ---- #

@router.post("/nearby", response_model=NearbyResponse)
async def nearby(req: NearbyRequest, config: AssistantConfig = Depends(get_config)):
    """Resolve the query to a category and run the widening-radius search."""
    category = _resolver.resolve(req.query)
    if category is None:
        return NearbyResponse(status="unknown_category", text=supported_categories_help())

    notices: list[str] = []
    engine = PlaceSearchEngine.from_config(config)
    outcome = await engine.search(category, Coordinate(req.lat, req.lon), on_notice=notices.append)
    text = outcome_text(outcome, category)

    if isinstance(outcome, Found):
        return NearbyResponse(
            status="found",
            category=category,
            radius_km=outcome.radius_km,
            places=[PlaceOut(**asdict(p)) for p in outcome.places],
            notices=notices,
            text=text,
        )
    if isinstance(outcome, NotFoundAtMaxRadius):
        status, radius = "not_found", outcome.radius_km
    elif isinstance(outcome, NotConfigured):
        status, radius = "not_configured", None
    else:
        status, radius = "error", None
    return NearbyResponse(
        status=status, category=category, radius_km=radius, notices=notices, text=text,
    )


# ---- Advice ---- #

@router.post("/advice", response_model=AdviceResponse)
async def advice(req: AdviceRequest, config: AssistantConfig = Depends(get_config)):
    """Single-turn safety advice; always answers, falling back to offline tips."""
    advisor = RemoteAdvisor.from_config(config, FallbackAdvisor())
    text = await advisor.get_advice(req.question)
    return AdviceResponse(question=req.question, advice=text)
