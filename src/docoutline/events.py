"""Outline change notifications delivered to dispatcher listeners."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class OutlineEventType(str, Enum):
    """What happened to the outline."""

    CHANGED = "changed"
    MOVED = "moved"
    MOVE_FAILED = "move_failed"


class OutlineEvent(BaseModel):
    """A single outline notification."""

    event_type: OutlineEventType
    uri: str | None = None
    generation: int = Field(ge=0)
    root_count: int = Field(default=0, ge=0)
    ts: datetime = Field(default_factory=datetime.utcnow)

    metadata: dict[str, str | int | float | bool | None] = Field(default_factory=dict)
