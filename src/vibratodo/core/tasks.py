"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum

from .categories import DEFAULT_CATEGORY_ID, by_id, is_known
from .errors import ValidationFailed


class Outcome(Enum):
    """Result of a mutating call: kept, reverted by reload, or unknown (also reloaded)."""

    APPLIED = "applied"
    ROLLED_BACK = "rolled_back"
    UNKNOWN = "unknown"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: "str | Priority | None") -> "Priority":
        """Parse a priority, defaulting to medium for missing/unknown values."""
        if isinstance(value, Priority):
            return value
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.MEDIUM


# Fields a caller may change through an update
EDITABLE_FIELDS = ("title", "description", "completed", "priority", "category", "due_date", "position")


@dataclass
class Task:
    """A to-do item. Lists are ordered by descending position."""

    id: str
    title: str
    description: str = ""
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    category: str = DEFAULT_CATEGORY_ID
    due_date: date | None = None
    position: int = 0
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def category_name(self) -> str:
        return by_id(self.category).display_name

    @property
    def color(self) -> str:
        """Display color, derived from the category registry."""
        return by_id(self.category).color

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "priority": self.priority.value,
            "category": self.category,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "position": self.position,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from a dict produced by to_dict, or by the older categoryId layout."""
        category = data.get("category") or data.get("categoryId") or DEFAULT_CATEGORY_ID
        created = data.get("createdAt")
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            description=data.get("description") or "",
            completed=bool(data.get("completed", False)),
            priority=Priority.parse(data.get("priority")),
            category=category if is_known(category) else DEFAULT_CATEGORY_ID,
            due_date=parse_due_date(data.get("dueDate")),
            position=int(data.get("position") or 0),
            created_at=parse_timestamp(created) if created else datetime.now(),
        )


@dataclass
class Draft:
    """Unsaved task data held by a form before create/edit is submitted."""

    title: str = ""
    description: str = ""
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    category: str = DEFAULT_CATEGORY_ID
    due_date: date | None = None
    position: int | None = None

    @classmethod
    def from_task(cls, task: Task) -> "Draft":
        return cls(
            title=task.title,
            description=task.description,
            completed=task.completed,
            priority=task.priority,
            category=task.category,
            due_date=task.due_date,
            position=task.position,
        )

    def fields(self) -> dict:
        """Field values to send to the store. Position only when set."""
        values = {
            "title": self.title.strip(),
            "description": self.description,
            "completed": self.completed,
            "priority": self.priority,
            "category": self.category,
            "due_date": self.due_date,
        }
        if self.position is not None:
            values["position"] = self.position
        return values


@dataclass
class CreatedTask:
    """Store-assigned fields returned by a create."""

    id: str
    created_at: datetime


@dataclass
class TaskStats:
    completed: int = 0
    total: int = 0
    due_today: int = 0
    progress: int = 0


def parse_due_date(value: "str | date | None") -> date | None:
    """Parse a due date, dropping any time component."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.split("T")[0])


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO timestamp, accepting a trailing Z."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def validate_title(title: str | None) -> str:
    """Return the stripped title or raise ValidationFailed."""
    stripped = (title or "").strip()
    if not stripped:
        raise ValidationFailed("Task title is required")
    return stripped


def validate_fields(fields: dict) -> None:
    """Reject unknown field names and empty titles in an update."""
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown task fields: {', '.join(sorted(unknown))}")
    if "title" in fields:
        validate_title(fields["title"])


def apply_fields(task: Task, fields: dict) -> Task:
    """Return a copy of task with the given editable fields replaced."""
    validate_fields(fields)
    values = dict(fields)
    if "priority" in values:
        values["priority"] = Priority.parse(values["priority"])
    if "category" in values and not is_known(values["category"]):
        values["category"] = DEFAULT_CATEGORY_ID
    if "title" in values:
        values["title"] = values["title"].strip()
    return replace(task, **values)


def sort_by_position(tasks: list[Task]) -> list[Task]:
    """
    Sort tasks into display order (descending position).

    Pure function - no I/O. Ties keep their input order.
    """
    return sorted(tasks, key=lambda t: t.position, reverse=True)


def next_position(tasks: list[Task]) -> int:
    """Position that sorts a new task first: max + 1, or 1 for an empty list."""
    if not tasks:
        return 1
    return max(t.position for t in tasks) + 1


def find_index(tasks: list[Task], task_id: str) -> int | None:
    return next((i for i, t in enumerate(tasks) if t.id == task_id), None)


def swap_positions(tasks: list[Task], i: int, j: int) -> list[Task]:
    """
    Swap the tasks at i and j along with their position values.

    Returns a new list; every other task is left untouched.
    """
    result = list(tasks)
    first, second = result[i], result[j]
    result[i] = replace(second, position=first.position)
    result[j] = replace(first, position=second.position)
    return result


def filter_by_category(tasks: list[Task], category: str | None) -> list[Task]:
    """Filter tasks to a category id. None or 'all' keeps everything."""
    if not category or category == "all":
        return list(tasks)
    return [t for t in tasks if t.category == category]


def compute_stats(tasks: list[Task], as_of: date | None = None) -> TaskStats:
    """Completion counts and the number of open tasks due today."""
    as_of = as_of or date.today()
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    due_today = sum(1 for t in tasks if t.due_date == as_of and not t.completed)
    progress = round(completed / total * 100) if total else 0
    return TaskStats(completed=completed, total=total, due_today=due_today, progress=progress)
