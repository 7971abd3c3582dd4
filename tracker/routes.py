"""
HTTP routes for the tracker API.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from tracker.auth import current_user, require_identity
from tracker.dependencies import get_tracker
from tracker.schemas import (
    MeResponse,
    OkResponse,
    RewardModel,
    StateModel,
    TaskModel,
)
from tracker.stores import Tracker

logger = logging.getLogger(__name__)

router = APIRouter()
session_router = APIRouter()


@router.get("/me", response_model=MeResponse)
def me(user: Optional[dict] = Depends(current_user)):
    if user is None:
        return JSONResponse(status_code=401, content={"user": None})
    return MeResponse(user=user)


@router.get("/tasks", response_model=list[TaskModel])
def get_tasks(
    identity: str = Depends(require_identity),
    tracker: Tracker = Depends(get_tracker),
):
    return [task.as_dict() for task in tracker.get_tasks(identity)]


@router.post("/tasks", response_model=OkResponse)
def save_tasks(
    payload: Any = Body(default=None),
    identity: str = Depends(require_identity),
    tracker: Tracker = Depends(get_tracker),
):
    tracker.save_tasks(identity, payload)
    return OkResponse()


@router.get("/rewards", response_model=list[RewardModel])
def get_rewards(
    identity: str = Depends(require_identity),
    tracker: Tracker = Depends(get_tracker),
):
    return [reward.as_dict() for reward in tracker.get_rewards(identity)]


@router.post("/rewards", response_model=OkResponse)
def save_rewards(
    payload: Any = Body(default=None),
    identity: str = Depends(require_identity),
    tracker: Tracker = Depends(get_tracker),
):
    tracker.save_rewards(identity, payload)
    return OkResponse()


@router.get("/state", response_model=StateModel)
def get_state(
    identity: str = Depends(require_identity),
    tracker: Tracker = Depends(get_tracker),
):
    return tracker.get_state(identity).as_dict()


@router.post("/state", response_model=OkResponse)
def save_state(
    payload: Any = Body(default=None),
    identity: str = Depends(require_identity),
    tracker: Tracker = Depends(get_tracker),
):
    tracker.save_state(identity, payload)
    return OkResponse()


@session_router.get("/logout")
def logout(request: Request):
    request.session.clear()
    return RedirectResponse(url="/", status_code=302)
