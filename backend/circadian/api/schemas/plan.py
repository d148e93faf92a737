"""Schemas for plan payloads and their scheduled counterparts."""
from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from circadian.api.schemas.circadian import Chronotype

Pillar = Literal["movement", "breathwork", "nutrition", "mindset", "sleep"]
TimeBand = Literal["morning", "midday", "afternoon", "evening"]
TimeSuggestion = Literal["morning", "midday", "afternoon", "evening", "flexible"]


class DayTask(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Pillar
    title: str
    rationale: str
    time_suggestion: Optional[TimeSuggestion] = None
    recipe_id: Optional[str] = None
    duration_minutes: Optional[int] = None
    evidence_ids: Optional[List[str]] = None
    slot_hint: Optional[str] = None


class ScheduledTask(DayTask):
    scheduled_at: str = Field(..., description="UTC instant, ISO-8601 with Z suffix")


class DayPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str = Field(..., description="Local calendar day, YYYY-MM-DD")
    tasks: List[DayTask]
    reflection_prompt: Optional[str] = None


class ScheduledDayPlan(DayPlan):
    tasks: List[ScheduledTask]


class PlanPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: Optional[str] = None
    days: List[DayPlan]


class ScheduledPlanPayload(PlanPayload):
    days: List[ScheduledDayPlan]


class CircadianInputs(BaseModel):
    """Per-run scheduling inputs assembled from the user's profile."""

    model_config = ConfigDict(frozen=True)

    chronotype: Chronotype
    wake_time: str
    bedtime: str
    tz: str = Field(..., description="IANA timezone name")
    availability: Optional[TimeSuggestion] = None


class SchedulePlanRequest(BaseModel):
    user_id: UUID
    plan: PlanPayload
    inputs: CircadianInputs
    start_date: Optional[date] = None


class SchedulePlanResponse(BaseModel):
    user_id: UUID
    plan: Union[ScheduledPlanPayload, PlanPayload] = Field(
        ..., description="Scheduled plan, or the plan as submitted when scheduling fell back"
    )
    scheduled: bool
    lock_acquired: bool
    error: Optional[str] = None
    request_id: str
