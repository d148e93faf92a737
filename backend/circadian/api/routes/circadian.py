"""Chronotype profile and drift suggestion endpoints."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, Request

from circadian.api.schemas.circadian import (
    ApplySuggestionRequest,
    CircadianProfileResponse,
    Screener,
    SuggestionRequest,
    SuggestionResponse,
)
from circadian.observability.metrics import log_metric
from circadian.observability.tracing import trace
from circadian.services.chronotype import build_derived_circadian
from circadian.services.chronotype_drift import apply_suggestion, suggest_chronotype_update

router = APIRouter()


@router.post("/circadian/profile", response_model=CircadianProfileResponse, tags=["circadian"])
def circadian_profile(request: Request, payload: Screener) -> CircadianProfileResponse:
    request_id = getattr(request.state, "request_id", None)
    start = perf_counter()
    with trace("circadian.profile", metadata={"self_id": payload.self_id}, request_id=request_id):
        derived = build_derived_circadian(payload)

    log_metric("circadian.profile.success", 1, metadata={"chronotype": derived.chronotype})
    log_metric("circadian.profile.latency_ms", (perf_counter() - start) * 1000)
    return CircadianProfileResponse(**derived.model_dump(), request_id=request_id or "")


@router.post("/circadian/suggestion", response_model=SuggestionResponse, tags=["circadian"])
def circadian_suggestion(request: Request, payload: SuggestionRequest) -> SuggestionResponse:
    request_id = getattr(request.state, "request_id", None)
    metadata = {
        "current_chronotype": payload.current.chronotype,
        "wearable_stable": payload.wearable.stable if payload.wearable else None,
    }
    with trace("circadian.suggestion", metadata=metadata, request_id=request_id):
        suggestion = suggest_chronotype_update(payload.current, payload.wearable)

    log_metric("circadian.suggestion.fired", 1 if suggestion else 0, metadata=metadata)
    return SuggestionResponse(suggestion=suggestion, request_id=request_id or "")


@router.post("/circadian/suggestion/apply", response_model=CircadianProfileResponse, tags=["circadian"])
def circadian_suggestion_apply(request: Request, payload: ApplySuggestionRequest) -> CircadianProfileResponse:
    request_id = getattr(request.state, "request_id", None)
    metadata = {
        "from_chronotype": payload.current.chronotype,
        "to_chronotype": payload.suggestion.suggested_chronotype,
    }
    with trace("circadian.suggestion.apply", metadata=metadata, request_id=request_id):
        updated = apply_suggestion(payload.current, payload.suggestion)

    log_metric("circadian.suggestion.applied", 1, metadata=metadata)
    return CircadianProfileResponse(**updated.model_dump(), request_id=request_id or "")
