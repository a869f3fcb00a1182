"""Pydantic models for claim progress timelines."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class TimelineStep(BaseModel):
    id: str
    status: str = Field(..., description="Claim status this step represents, or 'completed'")
    title: str
    description: str
    icon: str
    estimated_duration: Optional[str] = Field(default=None, description="e.g. '4-24 hours'")


class TimelineProgress(BaseModel):
    current_step: int
    total_steps: int
    percent_complete: int
    estimated_time_remaining: Optional[str] = None
    next_milestone: Optional[str] = None


class TimelineEvent(BaseModel):
    step: TimelineStep
    status: Literal["completed", "current", "upcoming"]
    timestamp: Optional[datetime] = None


class StatusMessage(BaseModel):
    title: str
    message: str
    action: Optional[str] = None
