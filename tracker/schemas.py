"""
Pydantic schemas for the tracker API.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class TaskModel(BaseModel):
    name: str
    points: int


class RewardModel(BaseModel):
    name: str
    points: int
    quantity: int = 0


class StateModel(BaseModel):
    saldoAnterior: int = 0
    taskChecks: dict[str, bool] = Field(default_factory=dict)


class OkResponse(BaseModel):
    ok: Literal[True] = True


class MeResponse(BaseModel):
    user: Optional[dict] = None
