"""Pydantic models for photo quality checks and capture guidance."""

from typing import Literal

from pydantic import BaseModel, Field

from collision_claims.models.claim import PhotoAngle


class PhotoQualityIssue(BaseModel):
    type: Literal["blur", "lighting", "resolution", "size", "format"]
    severity: Literal["critical", "warning"]
    message: str
    suggestion: str


class PhotoQualityWarning(BaseModel):
    type: str
    message: str


class PhotoQualityResult(BaseModel):
    score: int = Field(..., ge=0, le=100)
    issues: list[PhotoQualityIssue] = Field(default_factory=list)
    warnings: list[PhotoQualityWarning] = Field(default_factory=list)
    passed: bool

    @property
    def is_valid(self) -> bool:
        return self.passed


class PhotoQualitySummary(BaseModel):
    average_score: int
    passed_count: int
    total_count: int
    has_blocking_issues: bool


class PhotoGuide(BaseModel):
    angle: PhotoAngle
    title: str
    description: str
    instructions: list[str]
    tips: list[str]
    required: bool
    icon: str


class PhotoGuidanceProgress(BaseModel):
    total_required: int
    completed: int
    remaining: list[PhotoAngle]
    optional: list[PhotoAngle]
    percent_complete: int
