"""
Audience Schemas

Pydantic models for the TMI chatter listing and the relay's responses.
"""

from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field


class Viewer(BaseModel):
    """A single chat participant, serialized with camelCase keys."""

    name: str = Field(..., description="Login name in its original case")
    in_chat: bool = Field(default=True, alias="inChat")
    is_follower: bool = Field(default=True, alias="isFollower")
    is_mod: bool = Field(default=False, alias="isMod")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "name": "Viewer123",
                "inChat": True,
                "isFollower": True,
                "isMod": False,
            }
        }


class StatusEnvelope(BaseModel):
    """Bare status response; always delivered with HTTP 200."""

    status: int


class ChatterBuckets(BaseModel):
    """Role buckets from the TMI listing. Missing or null buckets are empty."""

    vips: Optional[List[str]] = None
    moderators: Optional[List[str]] = None
    staff: Optional[List[str]] = None
    admins: Optional[List[str]] = None
    global_mods: Optional[List[str]] = None
    viewers: Optional[List[str]] = None


class ChattersPayload(BaseModel):
    """Top-level TMI chatter document (broadcaster, chatter_count, _links ignored)."""

    chatters: Optional[ChatterBuckets] = None
