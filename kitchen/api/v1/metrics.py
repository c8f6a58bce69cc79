from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Header
from pydantic import Field

from kitchen.api.v1.recipes import get_metrics
from kitchen.core.models import CamelModel
from kitchen.services.metrics import MetricsLogger

router = APIRouter(tags=["metrics"])

# What the recipe page times on its side
UIEvent = Literal["card_render", "instructions_toggle", "gap_lookup_e2e", "order_page_open"]


class CardTiming(CamelModel):
    name: UIEvent
    duration_ms: float = Field(..., ge=0, alias="durationMs")
    recipe_name: Optional[str] = Field(None, alias="recipeName")
    missing_count: Optional[int] = Field(None, ge=0, alias="missingCount")


@router.post("/api/v1/metrics/ui")
def log_card_timing(
    payload: CardTiming,
    metrics: MetricsLogger = Depends(get_metrics),
    x_correlation_id: Optional[str] = Header(None),
):
    extra = payload.model_dump(include={"recipe_name", "missing_count"}, exclude_none=True)
    metrics.log_latency(
        payload.name,
        payload.duration_ms,
        origin="frontend",
        extra=extra or None,
        corr_id=x_correlation_id,
    )
    return {"ok": True}
