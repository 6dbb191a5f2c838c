"""
Board schema and status lifecycle.

Task lifecycle (cycles in both directions, wrapping):
  To Do → Queued → In Review → Done → To Do

Board, Column and Task are frozen: every change builds a new value, so
identity comparison is enough to detect that something changed.
"""
import json
import math
import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class TaskStatus(str, Enum):
    """Valid task statuses, in forward-cycle order."""
    TODO = "todo"
    QUEUED = "queued"
    IN_REVIEW = "in-review"
    DONE = "done"

    @classmethod
    def from_str(cls, value: Any) -> "TaskStatus":
        """Parse a raw status, mapping legacy names and falling back to TODO."""
        from .migration import migrate_status
        return cls(migrate_status(value))

    @property
    def label(self) -> str:
        return STATUS_CONFIG[self]["label"]

    @property
    def color(self) -> str:
        return STATUS_CONFIG[self]["color"]

    @property
    def bg_color(self) -> str:
        return STATUS_CONFIG[self]["bg_color"]

    @property
    def next(self) -> "TaskStatus":
        return STATUS_CONFIG[self]["next"]

    def cycle(self, direction: int = 1) -> "TaskStatus":
        """Step `direction` positions through STATUS_ORDER, wrapping both ways."""
        idx = STATUS_ORDER.index(self)
        return STATUS_ORDER[(idx + direction) % len(STATUS_ORDER)]


STATUS_ORDER: Tuple[TaskStatus, ...] = (
    TaskStatus.TODO,
    TaskStatus.QUEUED,
    TaskStatus.IN_REVIEW,
    TaskStatus.DONE,
)

STATUS_CONFIG: Dict[TaskStatus, Dict[str, Any]] = {
    TaskStatus.TODO: {
        "label": "To Do",
        "color": "#737373",
        "bg_color": "#26262633",
        "next": TaskStatus.QUEUED,
    },
    TaskStatus.QUEUED: {
        "label": "Queued",
        "color": "#3b82f6",
        "bg_color": "#3b82f620",
        "next": TaskStatus.IN_REVIEW,
    },
    TaskStatus.IN_REVIEW: {
        "label": "In Review",
        "color": "#f59e0b",
        "bg_color": "#f59e0b20",
        "next": TaskStatus.DONE,
    },
    TaskStatus.DONE: {
        "label": "Done",
        "color": "#10b981",
        "bg_color": "#10b98120",
        "next": TaskStatus.TODO,
    },
}

COLUMN_COLORS: Tuple[str, ...] = (
    "#3b82f6",  # blue
    "#8b5cf6",  # violet
    "#ec4899",  # pink
    "#f97316",  # orange
    "#10b981",  # emerald
    "#06b6d4",  # cyan
    "#eab308",  # yellow
    "#ef4444",  # red
)


def make_id() -> str:
    """Short random identifier for boards, columns and tasks."""
    return uuid.uuid4().hex[:12]


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def column_color(index: int) -> str:
    return COLUMN_COLORS[index % len(COLUMN_COLORS)]


@dataclass(frozen=True)
class Task:
    """A card inside a column."""

    id: str
    title: str
    status: TaskStatus = TaskStatus.TODO
    notes: str = ""
    order: int = 0
    created_at: int = field(default_factory=now_ms)
    started_at: Optional[int] = None
    completed_at: Optional[int] = None

    def with_status(self, status: TaskStatus, now: int) -> "Task":
        """Return a copy in `status`, applying the timestamp side effects."""
        started_at = self.started_at
        completed_at = self.completed_at
        if status == TaskStatus.QUEUED and started_at is None:
            started_at = now
        if status == TaskStatus.DONE:
            if completed_at is None:
                completed_at = now
        else:
            completed_at = None
        return replace(self, status=status, started_at=started_at, completed_at=completed_at)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "notes": self.notes,
            "order": self.order,
            "createdAt": self.created_at,
        }
        # Unset timestamps are omitted, not written as null
        if self.started_at is not None:
            data["startedAt"] = self.started_at
        if self.completed_at is not None:
            data["completedAt"] = self.completed_at
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], order: int = 0) -> "Task":
        """Deserialize; `order` is the task's position in its column."""
        created_at = _opt_ms(data.get("createdAt"))
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            status=TaskStatus.from_str(data.get("status")),
            notes=str(data.get("notes") or ""),
            order=order,
            created_at=created_at if created_at is not None else now_ms(),
            started_at=_opt_ms(data.get("startedAt")),
            completed_at=_opt_ms(data.get("completedAt")),
        )


@dataclass(frozen=True)
class Column:
    """A project column holding an ordered list of tasks."""

    id: str
    title: str
    color: str = COLUMN_COLORS[0]
    order: int = 0
    tasks: Tuple[Task, ...] = ()

    def task_index(self, task_id: str) -> Optional[int]:
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                return i
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "color": self.color,
            "order": self.order,
            "tasks": [t.to_dict() for t in self.tasks],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], order: int = 0) -> "Column":
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            color=data.get("color") or column_color(order),
            order=order,
            tasks=tuple(Task.from_dict(t, i) for i, t in enumerate(data.get("tasks", []))),
        )


@dataclass(frozen=True)
class Board:
    """The single board: root aggregate of columns."""

    id: str
    columns: Tuple[Column, ...] = ()

    @classmethod
    def empty(cls) -> "Board":
        return cls(id=make_id())

    def column_index(self, column_id: str) -> Optional[int]:
        for i, col in enumerate(self.columns):
            if col.id == column_id:
                return i
        return None

    def all_tasks(self) -> Tuple[Task, ...]:
        return tuple(t for col in self.columns for t in col.tasks)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "columns": [c.to_dict() for c in self.columns],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Board":
        """Deserialize a validated document. Order fields follow list position."""
        return cls(
            id=str(data["id"]),
            columns=tuple(Column.from_dict(c, i) for i, c in enumerate(data.get("columns", []))),
        )


def _opt_ms(value: Any) -> Optional[int]:
    # bool is an int subclass; a stray true/false is not a timestamp
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)
