"""Pydantic models for API request payloads."""

from uuid import UUID

from pydantic import BaseModel, Field


class CreateGroupRequest(BaseModel):
    """Payload for creating a group."""

    profile_id: UUID
    name: str = Field(max_length=120)
    description: str | None = Field(default=None, max_length=1000)
    is_public: bool = True


class OpenSessionRequest(BaseModel):
    """Payload for opening a battle session."""

    voter_id: UUID


class VoteRequest(BaseModel):
    """Payload for choosing a battle winner."""

    winner_photo_id: UUID
