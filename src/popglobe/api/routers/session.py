# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import time
from typing import Any, Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from popglobe.api.models.session_api import (
    ControlResponse,
    EventRequest,
    MetricRequest,
    SessionCreateRequest,
    TickRequest,
    YearRequest,
)
from popglobe.api.services.sessions import SessionHolder
from popglobe.api.utils.obs import log_control_call
from popglobe.errors import PopglobeError
from popglobe.utils.serialize import to_obj
from popglobe.visualization.interaction import make_event
from popglobe.visualization.scene import Scene
from popglobe.visualization.session import RenderSession

router = APIRouter(tags=["session"], prefix="/v1")


def get_holder(request: Request) -> SessionHolder:
    return request.app.state.sessions


def _payload(result: Any) -> Any:
    # scenes are served by /v1/scene
    if isinstance(result, Scene):
        return None
    return to_obj(result)


def _control(
    holder: SessionHolder,
    action: str,
    args: dict[str, Any] | None,
    fn: Callable[[RenderSession], Any],
) -> ControlResponse:
    started = time.time()
    with holder.lock:
        try:
            session = holder.require()
            result = fn(session)
            state = session.state()
        except PopglobeError:
            log_control_call(action, args, started, status="error")
            raise
    log_control_call(action, args, started)
    return ControlResponse(status="ok", result=_payload(result), state=state)


@router.post("/session", response_model=ControlResponse)
def create_session(
    req: SessionCreateRequest, holder: SessionHolder = Depends(get_holder)
) -> ControlResponse:
    started = time.time()
    args = req.model_dump()
    with holder.lock:
        try:
            session = holder.create(
                req.width, req.height, year=req.year, metric=req.metric, view=req.view
            )
        except PopglobeError:
            log_control_call("session.create", args, started, status="error")
            raise
        state = session.state()
    log_control_call("session.create", args, started)
    return ControlResponse(status="ok", state=state)


@router.delete("/session", response_model=ControlResponse)
def delete_session(holder: SessionHolder = Depends(get_holder)) -> ControlResponse:
    started = time.time()
    with holder.lock:
        holder.require()
        holder.dispose()
    log_control_call("session.delete", None, started)
    return ControlResponse(status="ok")


@router.get("/state", response_model=ControlResponse)
def get_state(holder: SessionHolder = Depends(get_holder)) -> ControlResponse:
    with holder.lock:
        return ControlResponse(status="ok", state=holder.require().state())


@router.get("/scene")
def get_scene(holder: SessionHolder = Depends(get_holder)) -> dict[str, Any]:
    with holder.lock:
        return holder.require().scene().to_dict()


@router.get("/scene.svg")
def get_scene_svg(holder: SessionHolder = Depends(get_holder)) -> Response:
    with holder.lock:
        svg = holder.require().scene().to_svg()
    return Response(content=svg, media_type="image/svg+xml")


@router.post("/controls/year", response_model=ControlResponse)
def control_year(
    req: YearRequest, holder: SessionHolder = Depends(get_holder)
) -> ControlResponse:
    return _control(holder, "year", req.model_dump(), lambda s: s.set_year(req.year))


@router.post("/controls/metric", response_model=ControlResponse)
def control_metric(
    req: MetricRequest, holder: SessionHolder = Depends(get_holder)
) -> ControlResponse:
    return _control(
        holder, "metric", req.model_dump(), lambda s: s.set_metric(req.metric)
    )


@router.post("/controls/view", response_model=ControlResponse)
def control_view(holder: SessionHolder = Depends(get_holder)) -> ControlResponse:
    return _control(holder, "view", None, lambda s: s.toggle_view())


@router.post("/controls/play", response_model=ControlResponse)
def control_play(holder: SessionHolder = Depends(get_holder)) -> ControlResponse:
    return _control(holder, "play", None, lambda s: {"started": s.play()})


@router.post("/controls/pause", response_model=ControlResponse)
def control_pause(holder: SessionHolder = Depends(get_holder)) -> ControlResponse:
    return _control(holder, "pause", None, lambda s: {"stopped": s.pause()})


@router.post("/controls/reset", response_model=ControlResponse)
def control_reset(holder: SessionHolder = Depends(get_holder)) -> ControlResponse:
    return _control(holder, "reset", None, lambda s: s.reset())


@router.post("/controls/close-detail", response_model=ControlResponse)
def control_close_detail(
    holder: SessionHolder = Depends(get_holder),
) -> ControlResponse:
    return _control(holder, "close-detail", None, lambda s: s.close_detail())


@router.post("/events", response_model=ControlResponse)
def post_event(
    req: EventRequest, holder: SessionHolder = Depends(get_holder)
) -> ControlResponse:
    return _control(
        holder,
        f"event.{req.kind}",
        req.data,
        lambda s: s.dispatch(make_event(req.kind, **req.data)),
    )


@router.post("/tick", response_model=ControlResponse)
def post_tick(
    req: TickRequest, holder: SessionHolder = Depends(get_holder)
) -> ControlResponse:
    return _control(holder, "tick", req.model_dump(), lambda s: {"fired": s.advance(req.ms)})
