"""
Legacy status migration and import validation.

Older boards used a different four-value status vocabulary:
  queued → in-progress → review → done
Those names are mapped onto the current lifecycle at the edge, so the rest
of the package only ever sees TaskStatus members.
"""
import json
from typing import Any, Dict

from .errors import BoardValidationError
from .schema import Board, TaskStatus

VALID_STATUSES = frozenset(s.value for s in TaskStatus)

# Old name -> current name. "queued" is also a current name and passes
# through unchanged before this table is consulted.
LEGACY_STATUS_MAP: Dict[str, str] = {
    "queued": TaskStatus.TODO.value,
    "in-progress": TaskStatus.QUEUED.value,
    "review": TaskStatus.IN_REVIEW.value,
    "done": TaskStatus.DONE.value,
}


def migrate_status(value: Any) -> str:
    """Map a raw status to a current one. Unknown values become 'todo'."""
    if isinstance(value, TaskStatus):
        return value.value
    if not isinstance(value, str):
        return TaskStatus.TODO.value
    if value in VALID_STATUSES:
        return value
    return LEGACY_STATUS_MAP.get(value, TaskStatus.TODO.value)


def migrate_board(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of `doc` with every task status migrated.

    Idempotent: migrated statuses are all valid and pass straight through.
    """
    columns = []
    for col in doc.get("columns", []):
        tasks = [dict(task, status=migrate_status(task.get("status"))) for task in col.get("tasks", [])]
        columns.append(dict(col, tasks=tasks))
    return dict(doc, columns=columns)


def validate_board(doc: Any) -> None:
    """Check the minimal board shape. Raises BoardValidationError."""
    if not isinstance(doc, dict):
        raise BoardValidationError("Board must be a JSON object")
    if not isinstance(doc.get("id"), str) or not doc["id"]:
        raise BoardValidationError("Board is missing an 'id'")
    columns = doc.get("columns")
    if not isinstance(columns, list):
        raise BoardValidationError("Board is missing a 'columns' array")

    for i, col in enumerate(columns):
        if not isinstance(col, dict):
            raise BoardValidationError(f"Column {i} is not an object")
        for key in ("id", "title"):
            if key not in col or col[key] is None:
                raise BoardValidationError(f"Column {i} is missing '{key}'")
        if not isinstance(col.get("tasks"), list):
            raise BoardValidationError(f"Column {i} is missing a 'tasks' array")
        for j, task in enumerate(col["tasks"]):
            if not isinstance(task, dict) or task.get("id") is None:
                raise BoardValidationError(f"Task {j} in column {i} is missing an 'id'")


def parse_board(doc: Any) -> Board:
    """Validate, migrate and build a typed Board from a raw document."""
    validate_board(doc)
    return Board.from_dict(migrate_board(doc))


def _reject_constant(name: str):
    raise ValueError(f"non-standard literal {name}")


def parse_board_json(text: str) -> Board:
    try:
        doc = json.loads(text, parse_constant=_reject_constant)
    except (TypeError, ValueError) as e:
        raise BoardValidationError(f"Invalid JSON: {e}") from e
    return parse_board(doc)
