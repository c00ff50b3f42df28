"""Pydantic models for realtime administration endpoints."""

from pydantic import BaseModel


class RealtimeStats(BaseModel):
    connected: int


class OnlineMembers(BaseModel):
    organization_id: str
    user_ids: list[str]


class DisconnectRequest(BaseModel):
    reason: str | None = None


class DisconnectResult(BaseModel):
    user_id: str
    closed: int


__all__ = ["DisconnectRequest", "DisconnectResult", "OnlineMembers", "RealtimeStats"]
