"""
Record types and the permissive coercion applied at the store boundary.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, TypeVar

# Signed 64-bit, the range both backends can store.
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


def clamp_int(value: int) -> int:
    return max(INT_MIN, min(INT_MAX, value))


def coerce_int(value: Any) -> int:
    """
    Best-effort integer conversion; anything non-numeric becomes 0 and
    out-of-range values are clamped to signed 64-bit.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return clamp_int(value)
    if isinstance(value, (float, str)):
        try:
            number = float(value)
        except ValueError:
            return 0
        if math.isnan(number) or math.isinf(number):
            return 0
        return clamp_int(int(number))
    return 0


def coerce_name(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass
class Task:
    name: str = ""
    points: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "Task":
        if not isinstance(data, Mapping):
            return cls()
        return cls(
            name=coerce_name(data.get("name")),
            points=coerce_int(data.get("points")),
        )

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class Reward:
    name: str = ""
    points: int = 0
    quantity: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "Reward":
        if not isinstance(data, Mapping):
            return cls()
        return cls(
            name=coerce_name(data.get("name")),
            points=coerce_int(data.get("points")),
            quantity=coerce_int(data.get("quantity", 0)),
        )

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class StateRecord:
    """Carried-over balance plus the map of checked-off tasks."""

    saldo_anterior: int = 0
    task_checks: dict[str, bool] = field(default_factory=dict)

    @classmethod
    def default(cls) -> "StateRecord":
        return cls()

    @classmethod
    def from_dict(cls, data: Any) -> "StateRecord":
        if not isinstance(data, Mapping):
            return cls.default()
        checks = data.get("taskChecks")
        if not isinstance(checks, Mapping):
            checks = {}
        return cls(
            saldo_anterior=coerce_int(data.get("saldoAnterior", 0)),
            task_checks={str(key): bool(value) for key, value in checks.items()},
        )

    def as_dict(self) -> dict:
        return {
            "saldoAnterior": self.saldo_anterior,
            "taskChecks": dict(self.task_checks),
        }


RecordT = TypeVar("RecordT", Task, Reward)


def coerce_records(payload: Any, record_type: type[RecordT]) -> list[RecordT]:
    """
    Normalize a collection payload. Anything that is not a list becomes an
    empty list; each element is coerced into ``record_type``.
    """
    if not isinstance(payload, (list, tuple)):
        return []
    records: list[RecordT] = []
    for item in payload:
        if isinstance(item, record_type):
            records.append(record_type.from_dict(item.as_dict()))
        else:
            records.append(record_type.from_dict(item))
    return records
