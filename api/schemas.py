"""
Pydantic models - request/response contracts for the SafeHer Assistant API.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from assistant.models import Mode


# ---------- Shared ---------- #

class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class MessageOut(BaseModel):
    sender: Literal["user", "bot"]
    text: str
    timestamp: float


# ---------- Conversation ---------- #

class SessionCreateRequest(BaseModel):
    lat: float | None = Field(default=None, ge=-90, le=90)
    lon: float | None = Field(default=None, ge=-180, le=180)
    mode: Mode = Mode.EMERGENCY


class SessionResponse(BaseModel):
    session_id: str
    mode: Mode
    location_available: bool
    messages: list[MessageOut]


class UserMessageRequest(BaseModel):
    text: str = Field(..., max_length=2000)


class MessagesResponse(BaseModel):
    session_id: str
    mode: Mode
    messages: list[MessageOut]


class ModeRequest(BaseModel):
    mode: Mode


# ---------- Stateless lookups ---------- #

class NearbyRequest(Coordinates):
    query: str = Field(..., min_length=1, max_length=500)


class PlaceOut(BaseModel):
    name: str | None = None
    address: str | None = None
    phone: str | None = None
    distance_m: float | None = None


class NearbyResponse(BaseModel):
    status: Literal["found", "not_found", "error", "not_configured", "unknown_category"]
    category: str | None = None
    radius_km: float | None = None
    places: list[PlaceOut] = []
    notices: list[str] = []
    text: str


class AdviceRequest(BaseModel):
    question: str = Field(..., min_length=1, max_length=2000)


class AdviceResponse(BaseModel):
    question: str
    advice: str
