"""Schemas for chronotype derivation and drift suggestions."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from circadian.services.time_utils import HHMM_PATTERN

Chronotype = Literal["lark", "neutral", "owl"]
SelfIdentification = Literal["morning", "neither", "evening"]


class Screener(BaseModel):
    """Onboarding answers used to derive a chronotype."""

    model_config = ConfigDict(frozen=True)

    self_id: SelfIdentification
    wake_time: str = Field(..., pattern=HHMM_PATTERN, description="Local wake time, HH:MM")
    bedtime: str = Field(..., pattern=HHMM_PATTERN, description="Local bedtime, HH:MM")
    shift_work: bool = False


class DerivedCircadian(BaseModel):
    model_config = ConfigDict(frozen=True)

    chronotype: Chronotype
    wake_time: str
    bedtime: str
    caffeine_cutoff: str
    shift_work: bool = False


class WearableSummary(BaseModel):
    """Aggregated recent sleep timing from a wearable; local HH:MM values."""

    model_config = ConfigDict(frozen=True)

    avg_sleep_onset_local: Optional[str] = None
    avg_wake_local: Optional[str] = None
    midpoint_local: Optional[str] = None
    stable: bool = False


class CircadianSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: Literal["midpoint_shift"] = "midpoint_shift"
    suggested_chronotype: Chronotype
    suggested_wake: Optional[str] = None
    suggested_bed: Optional[str] = None


class CircadianProfileResponse(DerivedCircadian):
    request_id: str


class SuggestionRequest(BaseModel):
    current: DerivedCircadian
    wearable: Optional[WearableSummary] = None


class SuggestionResponse(BaseModel):
    suggestion: Optional[CircadianSuggestion]
    request_id: str


class ApplySuggestionRequest(BaseModel):
    current: DerivedCircadian
    suggestion: CircadianSuggestion
