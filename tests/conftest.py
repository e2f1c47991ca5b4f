from datetime import datetime

import pytest

from vibratodo.core.tasks import Priority, Task

from .fakes import FakeTaskRepository, RecordingNotifier


@pytest.fixture
def sample_tasks():
    """Five tasks across categories, positions 50..10."""
    return [
        Task(id="a", title="Write report", category="work", position=50, priority=Priority.HIGH,
             created_at=datetime(2025, 1, 1)),
        Task(id="b", title="Call mom", category="personal", position=40, created_at=datetime(2025, 1, 2)),
        Task(id="c", title="Buy milk", category="shopping", position=30, created_at=datetime(2025, 1, 3)),
        Task(id="d", title="Plan sprint", category="work", position=20, created_at=datetime(2025, 1, 4)),
        Task(id="e", title="Go running", category="health", position=10, completed=True,
             created_at=datetime(2025, 1, 5)),
    ]


@pytest.fixture
def repo(sample_tasks):
    return FakeTaskRepository(sample_tasks)


@pytest.fixture
def notifier():
    return RecordingNotifier()
