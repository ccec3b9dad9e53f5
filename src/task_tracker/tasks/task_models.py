# src/task_tracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """Task lifecycle status. Values are the exact strings used in the DB and on the wire."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING

    @classmethod
    def parse(cls, raw: str) -> TaskStatus:
        """Strict variant of from_db: unknown values raise ValueError."""
        try:
            return cls(str(raw).strip())
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ValueError(f"Invalid status {raw!r} (expected one of: {allowed})") from None


def ts_to_iso(ts: float) -> str:
    return datetime.fromtimestamp(float(ts), UTC).isoformat(timespec="microseconds")


def iso_to_ts(raw: Any) -> float:
    if raw is None or raw == "":
        return 0.0
    if isinstance(raw, (int, float)):
        return float(raw)
    s = str(raw).replace("Z", "+00:00")
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.timestamp()


@dataclass(slots=True, frozen=True)
class Task:
    id: int
    title: str
    description: str | None
    status: TaskStatus
    created_at: float
    updated_at: float

    def to_dict(self) -> dict[str, Any]:
        """Wire representation (timestamps as ISO-8601 UTC)."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "created_at": ts_to_iso(self.created_at),
            "updated_at": ts_to_iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        return cls(
            id=int(data["id"]),
            title=str(data.get("title") or ""),
            description=data.get("description"),
            status=TaskStatus.from_db(data.get("status")),
            created_at=iso_to_ts(data.get("created_at")),
            updated_at=iso_to_ts(data.get("updated_at")),
        )
