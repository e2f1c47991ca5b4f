"""Tests for core task logic."""

from datetime import date, datetime

import pytest

from vibratodo.core.errors import ValidationFailed
from vibratodo.core.tasks import (
    Draft,
    Priority,
    Task,
    apply_fields,
    compute_stats,
    filter_by_category,
    find_index,
    next_position,
    parse_due_date,
    sort_by_position,
    swap_positions,
    validate_fields,
    validate_title,
)


@pytest.fixture
def today():
    return date(2025, 1, 15)


class TestTask:
    def test_defaults(self):
        task = Task(id="1", title="Test")
        assert task.completed is False
        assert task.priority is Priority.MEDIUM
        assert task.category == "personal"
        assert task.due_date is None

    def test_color_comes_from_category(self):
        assert Task(id="1", title="Test", category="work").color == "#5271FF"
        assert Task(id="1", title="Test", category="work").category_name == "Work"

    def test_dict_round_trip(self):
        task = Task(
            id="1",
            title="Test",
            description="desc",
            completed=True,
            priority=Priority.HIGH,
            category="health",
            due_date=date(2025, 2, 1),
            position=7,
            created_at=datetime(2025, 1, 1, 9, 30),
        )
        assert Task.from_dict(task.to_dict()) == task

    def test_from_dict_legacy_values(self):
        task = Task.from_dict(
            {"id": 5, "title": "Old", "priority": "urgent", "category": "errands", "colorCode": "#fff"}
        )
        assert task.id == "5"
        assert task.priority is Priority.MEDIUM
        assert task.category == "personal"
        assert task.position == 0

    def test_from_dict_category_id_layout(self):
        task = Task.from_dict({"id": "1", "title": "Old", "categoryId": "work", "createdAt": "2024-11-02T08:15:00Z"})
        assert task.category == "work"
        assert task.created_at.tzinfo is not None
        assert (task.created_at.year, task.created_at.hour) == (2024, 8)


class TestPriority:
    @pytest.mark.parametrize("value,expected", [
        ("low", Priority.LOW),
        ("HIGH", Priority.HIGH),
        (None, Priority.MEDIUM),
        ("", Priority.MEDIUM),
        ("bogus", Priority.MEDIUM),
        (Priority.LOW, Priority.LOW),
    ])
    def test_parse(self, value, expected):
        assert Priority.parse(value) is expected


class TestDraft:
    def test_from_task(self):
        task = Task(id="1", title="Test", position=4, category="work")
        draft = Draft.from_task(task)
        assert draft.title == "Test"
        assert draft.position == 4
        assert draft.category == "work"

    def test_fields_omit_unset_position(self):
        assert "position" not in Draft(title="x").fields()
        assert Draft(title="x", position=2).fields()["position"] == 2

    def test_fields_strip_title(self):
        assert Draft(title="  x  ").fields()["title"] == "x"


class TestValidation:
    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_empty_title(self, title):
        with pytest.raises(ValidationFailed):
            validate_title(title)

    def test_title_is_stripped(self):
        assert validate_title("  hi ") == "hi"

    def test_unknown_update_field(self):
        with pytest.raises(ValueError):
            validate_fields({"colorCode": "#fff"})

    def test_update_with_empty_title(self):
        with pytest.raises(ValidationFailed):
            validate_fields({"title": ""})

    def test_partial_update_allowed(self):
        validate_fields({"position": 3})


class TestApplyFields:
    def test_only_given_fields_change(self):
        task = Task(id="1", title="Test", description="keep", position=2)
        updated = apply_fields(task, {"position": 9})
        assert updated.position == 9
        assert updated.description == "keep"
        assert task.position == 2

    def test_normalizes_values(self):
        task = apply_fields(Task(id="1", title="Test"), {"priority": "high", "category": "mystery"})
        assert task.priority is Priority.HIGH
        assert task.category == "personal"


class TestOrdering:
    @pytest.fixture
    def tasks(self):
        return [
            Task(id="low", title="Low", position=1),
            Task(id="high", title="High", position=9),
            Task(id="mid", title="Mid", position=5),
        ]

    def test_sort_descending(self, tasks):
        assert [t.id for t in sort_by_position(tasks)] == ["high", "mid", "low"]

    def test_next_position(self, tasks):
        assert next_position(tasks) == 10

    def test_next_position_empty(self):
        assert next_position([]) == 1

    def test_next_position_uses_max_not_first(self, tasks):
        # The list may be unsorted; max wins
        assert next_position(tasks[:1] + tasks[2:]) == 6

    def test_find_index(self, tasks):
        assert find_index(tasks, "mid") == 2
        assert find_index(tasks, "nope") is None

    def test_swap_positions(self):
        tasks = sort_by_position([
            Task(id="a", title="A", position=30),
            Task(id="b", title="B", position=20),
            Task(id="c", title="C", position=10),
        ])
        swapped = swap_positions(tasks, 0, 1)
        assert [(t.id, t.position) for t in swapped] == [("b", 30), ("a", 20), ("c", 10)]
        assert tasks[0].id == "a"


class TestFilterAndStats:
    def test_filter_by_category(self):
        tasks = [Task(id="1", title="A", category="work"), Task(id="2", title="B", category="health")]
        assert [t.id for t in filter_by_category(tasks, "work")] == ["1"]
        assert len(filter_by_category(tasks, "all")) == 2
        assert len(filter_by_category(tasks, None)) == 2

    def test_stats(self, today):
        tasks = [
            Task(id="1", title="A", completed=True, due_date=today),
            Task(id="2", title="B", due_date=today),
            Task(id="3", title="C", due_date=date(2025, 1, 16)),
        ]
        stats = compute_stats(tasks, as_of=today)
        assert stats.completed == 1
        assert stats.total == 3
        assert stats.due_today == 1
        assert stats.progress == 33

    def test_stats_empty(self):
        stats = compute_stats([])
        assert stats.progress == 0
        assert stats.total == 0


class TestParseDueDate:
    def test_drops_time(self):
        assert parse_due_date("2025-03-01T00:00:00Z") == date(2025, 3, 1)

    def test_empty(self):
        assert parse_due_date("") is None
        assert parse_due_date(None) is None

    def test_datetime(self):
        assert parse_due_date(datetime(2025, 3, 1, 12)) == date(2025, 3, 1)
