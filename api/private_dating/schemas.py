from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class DevTokenRequest(BaseModel):
    principal: str


class RegisterRequest(BaseModel):
    age: int
    location: int
    interests: int
    personality: int
    bio: str = ""


class BioUpdateRequest(BaseModel):
    bio: str


class LookingForMatchRequest(BaseModel):
    looking: bool


class PreferencesRequest(BaseModel):
    min_age: int
    max_age: int
    preferred_location: int


class MatchRequestInput(BaseModel):
    target: str
    message: int = 0


class SendMessageRequest(BaseModel):
    content: str


class RevealCallback(BaseModel):
    correlation_id: int
    cleartext: str
    proof: str


class PublicProfile(BaseModel):
    user_id: int
    principal: str
    is_active: bool
    bio: str
    registered_at: datetime
    is_looking_for_match: bool


class MatchDetails(BaseModel):
    id: int
    requester: str
    target: str
    status: str
    created_at: datetime
    encrypted_score: str
    encrypted_message: str
    is_accepted: bool
    accepted_at: datetime | None = None
    is_revealed: bool
    public_score: int | None = None
    room_id: str | None = None


class ChatMessageOut(BaseModel):
    index: int
    sender: str
    content: str
    sent_at: datetime


class MessagePage(BaseModel):
    room_id: str
    offset: int
    messages: list[ChatMessageOut] = Field(default_factory=list)


class EventsResponse(BaseModel):
    events: list[dict[str, Any]] = Field(default_factory=list)
