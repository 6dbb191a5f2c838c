"""
Tests for the board schema.

Covers:
    - TaskStatus          : labels, next pointer, cycling in both directions
    - COLUMN_COLORS       : palette shape
    - Task.with_status    : startedAt / completedAt side effects
    - Board (de)serialization: camelCase wire shape, order re-indexing
"""

import json

import pytest

from parallel.schema import (
    COLUMN_COLORS,
    STATUS_ORDER,
    Board,
    Column,
    Task,
    TaskStatus,
    make_id,
)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TaskStatus
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class TestTaskStatus:

    def test_order(self):
        assert [s.value for s in STATUS_ORDER] == ["todo", "queued", "in-review", "done"]

    def test_next_pointer_wraps(self):
        assert TaskStatus.TODO.next == TaskStatus.QUEUED
        assert TaskStatus.QUEUED.next == TaskStatus.IN_REVIEW
        assert TaskStatus.IN_REVIEW.next == TaskStatus.DONE
        assert TaskStatus.DONE.next == TaskStatus.TODO

    def test_every_status_has_display_config(self):
        for status in TaskStatus:
            assert status.label
            assert status.color.startswith("#")
            assert status.bg_color.startswith("#")

    def test_cycle_forward_matches_next(self):
        for status in TaskStatus:
            assert status.cycle() == status.next

    def test_cycle_backward_wraps(self):
        assert TaskStatus.TODO.cycle(-1) == TaskStatus.DONE
        assert TaskStatus.DONE.cycle(-1) == TaskStatus.IN_REVIEW

    @pytest.mark.parametrize("status", list(TaskStatus))
    def test_cycle_round_trip(self, status):
        assert status.cycle(1).cycle(-1) == status

    def test_from_str_maps_legacy_and_unknown(self):
        assert TaskStatus.from_str("in-review") == TaskStatus.IN_REVIEW
        assert TaskStatus.from_str("review") == TaskStatus.IN_REVIEW
        assert TaskStatus.from_str("in-progress") == TaskStatus.QUEUED
        assert TaskStatus.from_str("bogus") == TaskStatus.TODO
        assert TaskStatus.from_str(None) == TaskStatus.TODO

    def test_status_is_a_str(self):
        assert TaskStatus.DONE == "done"


def test_palette_has_eight_colors():
    assert len(COLUMN_COLORS) == 8
    assert len(set(COLUMN_COLORS)) == 8


def test_make_id_unique():
    assert len({make_id() for _ in range(100)}) == 100


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Task status side effects
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class TestTaskWithStatus:

    def test_entering_queued_stamps_started_at(self):
        task = Task(id="t1", title="T", created_at=1).with_status(TaskStatus.QUEUED, 100)
        assert task.started_at == 100
        assert task.completed_at is None

    def test_started_at_never_overwritten(self):
        task = Task(id="t1", title="T", created_at=1)
        task = task.with_status(TaskStatus.QUEUED, 100)
        task = task.with_status(TaskStatus.IN_REVIEW, 200)
        task = task.with_status(TaskStatus.QUEUED, 300)
        assert task.started_at == 100

    def test_done_sets_and_leaving_done_clears_completed_at(self):
        task = Task(id="t1", title="T", created_at=1).with_status(TaskStatus.DONE, 500)
        assert task.completed_at == 500
        task = task.with_status(TaskStatus.DONE, 600)
        assert task.completed_at == 500
        task = task.with_status(TaskStatus.TODO, 700)
        assert task.completed_at is None

    def test_returns_new_object(self):
        task = Task(id="t1", title="T", created_at=1)
        assert task.with_status(TaskStatus.QUEUED, 2) is not task
        assert task.status == TaskStatus.TODO


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Serialization
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class TestSerialization:

    def test_task_to_dict_uses_camel_case_and_omits_unset(self):
        data = Task(id="t1", title="T", created_at=42).to_dict()
        assert data == {
            "id": "t1",
            "title": "T",
            "status": "todo",
            "notes": "",
            "order": 0,
            "createdAt": 42,
        }

    def test_task_to_dict_includes_timestamps_when_set(self):
        data = Task(id="t1", title="T", created_at=1, started_at=2, completed_at=3).to_dict()
        assert data["startedAt"] == 2
        assert data["completedAt"] == 3

    def test_board_from_dict_reindexes_by_position(self):
        board = Board.from_dict({
            "id": "b1",
            "columns": [
                {"id": "c1", "title": "A", "order": 7, "tasks": [
                    {"id": "t1", "title": "x", "order": 5, "createdAt": 1},
                    {"id": "t2", "title": "y", "order": 5, "createdAt": 2},
                ]},
                {"id": "c2", "title": "B", "order": 3, "tasks": []},
            ],
        })
        assert [c.order for c in board.columns] == [0, 1]
        assert [t.order for t in board.columns[0].tasks] == [0, 1]

    def test_missing_color_gets_palette_color_for_position(self):
        board = Board.from_dict({
            "id": "b1",
            "columns": [
                {"id": "c1", "title": "A", "tasks": []},
                {"id": "c2", "title": "B", "tasks": []},
            ],
        })
        assert board.columns[1].color == COLUMN_COLORS[1]

    def test_to_json_is_indented_and_parseable(self):
        board = Board(id="b1", columns=(Column(id="c1", title="A"),))
        text = board.to_json()
        assert "\n  " in text
        assert json.loads(text)["columns"][0]["title"] == "A"

    def test_null_title_becomes_empty_string(self):
        task = Task.from_dict({"id": "t1", "title": None, "createdAt": 1})
        assert task.title == ""

    def test_to_dict_from_dict_preserves_board(self):
        board = Board(
            id="b1",
            columns=(
                Column(id="c1", title="A", color="#000", tasks=(
                    Task(id="t1", title="x", status=TaskStatus.DONE, created_at=1, completed_at=9),
                )),
            ),
        )
        assert Board.from_dict(board.to_dict()) == board
