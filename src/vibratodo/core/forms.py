"""Task form state - new-task and in-place edit drafts."""

from dataclasses import dataclass, field, replace
from typing import Protocol

from .errors import ValidationFailed
from .tasks import Draft, Outcome, Task, parse_due_date, validate_title

NEW_TITLE_ERROR = "Task title is required"
EDIT_TITLE_ERROR = "Task title cannot be empty!"


class DraftSubmitter(Protocol):
    """What a form needs from the task list controller."""

    def create(self, draft: Draft) -> Outcome: ...

    def edit(self, task_id: str, draft: Draft) -> Outcome: ...


def _change(draft: Draft, name: str, value) -> Draft:
    if name not in Draft.__dataclass_fields__:
        raise ValueError(f"Unknown draft field: {name}")
    if name == "due_date":
        value = parse_due_date(value)
    return replace(draft, **{name: value})


@dataclass
class TaskForm:
    """
    Transient editing state.

    Holds at most one new-task draft plus one edit draft per task. Drafts are
    never shown to the controller until submitted; the form never touches the
    store itself.
    """

    new_draft: Draft | None = None
    error: str = ""
    edits: dict[str, Draft] = field(default_factory=dict)
    edit_errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_open(self) -> bool:
        return self.new_draft is not None

    @property
    def is_editing(self) -> bool:
        return bool(self.edits)

    # ============== New task ==============

    def open_new(self) -> Draft:
        if self.new_draft is None:
            self.new_draft = Draft()
        return self.new_draft

    def change(self, name: str, value) -> None:
        """Update one field of the new-task draft and clear the inline error."""
        self.new_draft = _change(self.open_new(), name, value)
        self.error = ""

    def cancel(self) -> None:
        self.new_draft = None
        self.error = ""

    def submit_new(self, controller: DraftSubmitter) -> Outcome | None:
        """
        Validate and hand the draft to the controller.

        Returns None when validation fails (the form stays open with an
        inline error and the store is never called).
        """
        draft = self.open_new()
        try:
            validate_title(draft.title)
            outcome = controller.create(draft)
        except ValidationFailed:
            self.error = NEW_TITLE_ERROR
            return None

        if outcome is Outcome.APPLIED:
            self.cancel()
        return outcome

    # ============== In-place edit ==============

    def open_edit(self, task: Task) -> Draft:
        draft = self.edits.get(task.id)
        if draft is None:
            draft = self.edits[task.id] = Draft.from_task(task)
        return draft

    def change_edit(self, task_id: str, name: str, value) -> None:
        if task_id not in self.edits:
            raise KeyError(f"No edit in progress for task {task_id}")
        self.edits[task_id] = _change(self.edits[task_id], name, value)
        self.edit_errors.pop(task_id, None)

    def cancel_edit(self, task_id: str) -> None:
        self.edits.pop(task_id, None)
        self.edit_errors.pop(task_id, None)

    def submit_edit(self, task_id: str, controller: DraftSubmitter) -> Outcome | None:
        if task_id not in self.edits:
            raise KeyError(f"No edit in progress for task {task_id}")
        draft = self.edits[task_id]
        try:
            validate_title(draft.title)
            outcome = controller.edit(task_id, draft)
        except ValidationFailed:
            self.edit_errors[task_id] = EDIT_TITLE_ERROR
            return None

        if outcome is Outcome.APPLIED:
            self.cancel_edit(task_id)
        return outcome
