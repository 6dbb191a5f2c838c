"""
Board store: the state container for the single kanban board.

Holds the current Board snapshot and exposes every mutation. Each mutation
builds a new Board, re-indexes the affected `order` fields, publishes the
snapshot to subscribers and schedules a debounced save through the gateway.
A mutation whose target cannot be found changes nothing and saves nothing.
"""
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar, Union

from .debounce import Debouncer
from .errors import BoardValidationError
from .migration import parse_board, parse_board_json
from .schema import (
    COLUMN_COLORS,
    STATUS_ORDER,
    Board,
    Column,
    Task,
    TaskStatus,
    make_id,
    now_ms,
)
from .storage import BoardGateway

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECS = 0.3

T = TypeVar("T", Column, Task)
Subscriber = Callable[[Board], None]


def reindex(items: Sequence[T]) -> Tuple[T, ...]:
    """Set each item's `order` to its position, reusing items already in place."""
    return tuple(item if item.order == i else replace(item, order=i) for i, item in enumerate(items))


def splice_move(items: Sequence[T], from_index: int, to_index: int) -> Optional[Tuple[T, ...]]:
    """Move the item at `from_index` to `to_index` and re-index.

    Returns None when `from_index` does not address an item. `to_index` is
    clamped into range, like list insertion.
    """
    if not 0 <= from_index < len(items):
        return None
    rest = list(items)
    moved = rest.pop(from_index)
    rest.insert(_clamp(to_index, len(rest)), moved)
    return reindex(rest)


def _clamp(index: int, size: int) -> int:
    return max(0, min(index, size))


class BoardStore:
    """Single-writer container for the live Board."""

    def __init__(
        self,
        gateway: BoardGateway,
        debounce_delay: float = DEFAULT_DEBOUNCE_SECS,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = make_id,
    ):
        self.gateway = gateway
        self.clock = clock
        self.id_factory = id_factory
        self.board = Board(id=id_factory())
        self.initialized = False
        self._subscribers: List[Subscriber] = []
        self._persister = Debouncer(self._save, delay=debounce_delay)

    # ── Lifecycle ───────────────────────────────────────────────────────────

    def initialize(self) -> Board:
        """Load the persisted board once at startup, or start a fresh one."""
        doc = self.gateway.load_board()
        board = None
        if doc is not None:
            try:
                board = parse_board(doc)
            except BoardValidationError as e:
                logger.warning(f"Stored board is invalid, starting fresh: {e}")
        if board is None:
            board = Board(id=self.id_factory())
        self.board = board
        self.initialized = True
        logger.info(f"Board {board.id} loaded: {len(board.columns)} columns, {len(board.all_tasks())} tasks")
        self._publish(board)
        return board

    def flush(self) -> None:
        """Write any pending change now."""
        self._persister.flush()

    def close(self) -> None:
        self.flush()

    # ── Subscribers ─────────────────────────────────────────────────────────

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a snapshot listener. Returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, board: Board) -> None:
        for callback in list(self._subscribers):
            try:
                callback(board)
            except Exception:
                logger.exception("Board subscriber failed")

    def _commit(self, board: Board) -> None:
        self.board = board
        self._publish(board)
        self._persister.schedule(board)

    def _save(self, board: Board) -> None:
        self.gateway.save_board(board.to_dict())

    # ── Reads ───────────────────────────────────────────────────────────────

    def find_column(self, column_id: str) -> Optional[Column]:
        idx = self.board.column_index(column_id)
        return None if idx is None else self.board.columns[idx]

    def find_task(self, column_id: str, task_id: str) -> Optional[Task]:
        col = self.find_column(column_id)
        if col is None:
            return None
        idx = col.task_index(task_id)
        return None if idx is None else col.tasks[idx]

    def status_counts(self) -> Dict[TaskStatus, int]:
        counts = {status: 0 for status in STATUS_ORDER}
        for task in self.board.all_tasks():
            counts[task.status] += 1
        return counts

    # ── Column operations ───────────────────────────────────────────────────

    def add_column(self, title: str) -> Column:
        columns = self.board.columns
        column = Column(
            id=self.id_factory(),
            title=title,
            color=COLUMN_COLORS[len(columns) % len(COLUMN_COLORS)],
            order=len(columns),
        )
        self._commit(replace(self.board, columns=columns + (column,)))
        return column

    def rename_column(self, column_id: str, title: str) -> None:
        self._update_column(column_id, lambda col: replace(col, title=title))

    def delete_column(self, column_id: str) -> None:
        """Remove a column and all of its tasks."""
        if self.board.column_index(column_id) is None:
            return
        remaining = [col for col in self.board.columns if col.id != column_id]
        self._commit(replace(self.board, columns=reindex(remaining)))

    def move_column(self, from_index: int, to_index: int) -> None:
        columns = splice_move(self.board.columns, from_index, to_index)
        if columns is None:
            return
        self._commit(replace(self.board, columns=columns))

    def _update_column(self, column_id: str, change: Callable[[Column], Optional[Column]]) -> None:
        idx = self.board.column_index(column_id)
        if idx is None:
            return
        updated = change(self.board.columns[idx])
        if updated is None:
            return
        columns = list(self.board.columns)
        columns[idx] = updated
        self._commit(replace(self.board, columns=tuple(columns)))

    # ── Task operations ─────────────────────────────────────────────────────

    def add_task(self, column_id: str, title: str) -> Optional[Task]:
        col = self.find_column(column_id)
        if col is None:
            return None
        task = Task(
            id=self.id_factory(),
            title=title,
            status=TaskStatus.TODO,
            notes="",
            order=len(col.tasks),
            created_at=self.clock(),
        )
        self._update_column(column_id, lambda c: replace(c, tasks=c.tasks + (task,)))
        return task

    def update_task(
        self,
        column_id: str,
        task_id: str,
        title: Optional[str] = None,
        notes: Optional[str] = None,
        status: Union[TaskStatus, str, None] = None,
    ) -> None:
        """Partial update. A status change applies the timestamp side effects."""

        if title is None and notes is None and status is None:
            return

        def change(col: Column) -> Optional[Column]:
            idx = col.task_index(task_id)
            if idx is None:
                return None
            task = col.tasks[idx]
            if title is not None:
                task = replace(task, title=title)
            if notes is not None:
                task = replace(task, notes=notes)
            if status is not None:
                new_status = status if isinstance(status, TaskStatus) else TaskStatus.from_str(status)
                task = task.with_status(new_status, self.clock())
            tasks = list(col.tasks)
            tasks[idx] = task
            return replace(col, tasks=tuple(tasks))

        self._update_column(column_id, change)

    def delete_task(self, column_id: str, task_id: str) -> None:
        def change(col: Column) -> Optional[Column]:
            if col.task_index(task_id) is None:
                return None
            return replace(col, tasks=reindex([t for t in col.tasks if t.id != task_id]))

        self._update_column(column_id, change)

    def cycle_task_status(self, column_id: str, task_id: str, direction: int = 1) -> None:
        task = self.find_task(column_id, task_id)
        if task is None:
            return
        self.update_task(column_id, task_id, status=task.status.cycle(direction))

    def reorder_task(self, column_id: str, from_index: int, to_index: int) -> None:
        def change(col: Column) -> Optional[Column]:
            tasks = splice_move(col.tasks, from_index, to_index)
            return None if tasks is None else replace(col, tasks=tasks)

        self._update_column(column_id, change)

    def move_task_between_columns(
        self,
        from_column_id: str,
        to_column_id: str,
        from_index: int,
        to_index: int,
    ) -> None:
        """Move one task across columns; both columns end fully re-indexed."""
        if from_column_id == to_column_id:
            self.reorder_task(from_column_id, from_index, to_index)
            return
        src_idx = self.board.column_index(from_column_id)
        dst_idx = self.board.column_index(to_column_id)
        if src_idx is None or dst_idx is None:
            return
        src = self.board.columns[src_idx]
        if not 0 <= from_index < len(src.tasks):
            return

        src_tasks = list(src.tasks)
        moved = src_tasks.pop(from_index)
        dst_tasks = list(self.board.columns[dst_idx].tasks)
        dst_tasks.insert(_clamp(to_index, len(dst_tasks)), moved)

        columns = list(self.board.columns)
        columns[src_idx] = replace(src, tasks=reindex(src_tasks))
        columns[dst_idx] = replace(columns[dst_idx], tasks=reindex(dst_tasks))
        self._commit(replace(self.board, columns=tuple(columns)))

    # ── Board-level operations ──────────────────────────────────────────────

    def export_board(self) -> str:
        """Serialize the current board as indented JSON."""
        return self.board.to_json()

    def import_board(self, doc: Union[Board, Dict[str, Any]]) -> Board:
        """Replace the whole board. Raises BoardValidationError before any change."""
        if isinstance(doc, Board):
            columns = [replace(col, tasks=reindex(col.tasks)) for col in doc.columns]
            board = replace(doc, columns=reindex(columns))
        else:
            board = parse_board(doc)
        self._commit(board)
        logger.info(f"Imported board {board.id} with {len(board.columns)} columns")
        return board

    def import_json(self, text: str) -> Board:
        return self.import_board(parse_board_json(text))
