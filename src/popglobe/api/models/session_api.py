# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class ErrorInfo(BaseModel):
    type: str
    message: str
    details: dict[str, Any] | None = None


class ControlResponse(BaseModel):
    status: Literal["ok", "error"]
    result: Any | None = None
    state: dict[str, Any] | None = None
    error: ErrorInfo | None = None


class SessionCreateRequest(BaseModel):
    width: float = Field(default=960, gt=0, description="Viewport width in pixels")
    height: float = Field(default=720, gt=0, description="Viewport height in pixels")
    year: int | None = Field(default=None, description="Initial year (default: latest)")
    # checked by the session, unknown names are control errors
    metric: str = Field(default="population")
    view: Literal["3d", "2d"] = "3d"


class YearRequest(BaseModel):
    year: int


class MetricRequest(BaseModel):
    metric: str


class EventRequest(BaseModel):
    kind: str = Field(..., description="Event kind, e.g. drag-move or hover")
    data: dict[str, Any] = Field(
        default_factory=dict, description="Event fields, e.g. {'dx': 4, 'dy': -2}"
    )


class TickRequest(BaseModel):
    ms: float = Field(..., ge=0, le=600_000, description="Milliseconds to advance")
