"""Remote record store adapter - HTTP client for task persistence."""

import logging
from datetime import date, datetime

import requests

from vibratodo.config import Config, Session, load_config
from vibratodo.core import categories
from vibratodo.core.errors import NotFound, StoreOutcomeUnknown, StoreUnavailable
from vibratodo.core.tasks import (
    CreatedTask,
    Draft,
    Priority,
    Task,
    parse_due_date,
    parse_timestamp,
    validate_fields,
    validate_title,
)

logger = logging.getLogger(__name__)

FETCH_FIELDS = [
    "Id",
    "title",
    "description",
    "completed",
    "priority",
    "category",
    "dueDate",
    "position",
    "CreatedOn",
]

# App field name -> store field name
STORE_FIELD_NAMES = {
    "title": "title",
    "description": "description",
    "completed": "completed",
    "priority": "priority",
    "category": "category",
    "due_date": "dueDate",
    "position": "position",
}


class AuthenticationError(Exception):
    """Raised when no store credentials are available."""

    pass


def _parse_created(value: str | None) -> datetime:
    if not value:
        return datetime.now()
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError, AttributeError):
        logger.warning(f"Unreadable CreatedOn {value!r}, using now")
        return datetime.now()


def _parse_due(value) -> date | None:
    try:
        return parse_due_date(value)
    except (TypeError, ValueError, AttributeError):
        logger.warning(f"Unreadable dueDate {value!r}, ignoring it")
        return None


def _parse_position(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        logger.warning(f"Unreadable position {value!r}, using 0")
        return 0


def task_from_record(record: dict) -> Task:
    """
    Map a store record to a Task.

    Missing or unreadable fields fall back to defaults; a record without an
    Id raises KeyError.
    """
    return Task(
        id=str(record["Id"]),
        title=record.get("title") or "",
        description=record.get("description") or "",
        completed=bool(record.get("completed") or False),
        priority=Priority.parse(record.get("priority")),
        category=categories.from_store_label(record.get("category")),
        due_date=_parse_due(record.get("dueDate")),
        position=_parse_position(record.get("position")),
        created_at=_parse_created(record.get("CreatedOn")),
    )


def fields_to_record(fields: dict) -> dict:
    """Map app-level task fields to store field names and formats."""
    record = {}
    for name, value in fields.items():
        if name == "category":
            value = categories.to_store_label(value)
        elif name == "priority":
            value = Priority.parse(value).value
        elif name == "due_date":
            value = value.isoformat() if isinstance(value, date) else (value or None)
        record[STORE_FIELD_NAMES[name]] = value
    return record


class RecordStoreAdapter:
    """
    Remote record store adapter.

    Implements TaskRepository protocol. Translates between the task shape and
    the store's field/category naming and maps transport failures onto the
    task error taxonomy. No business logic - just I/O. Only single-record
    batches are ever sent.
    """

    def __init__(self, config: Config | None = None, session: Session | None = None):
        self.config = config or load_config()
        self.session = session or Session.load(self.config)
        self._http = requests.Session()

    @property
    def _collection_url(self) -> str:
        return f"{self.config.api_base}/{self.config.collection}"

    def _headers(self) -> dict:
        if not self.session.is_authenticated:
            raise AuthenticationError("No store credentials. Run 'vibratodo login' first.")
        return {
            "X-Project-Id": self.session.project_id,
            "X-Public-Key": self.session.public_key,
        }

    def _request(self, method: str, url: str, payload: dict, task_id: str | None = None) -> dict:
        """Send an authenticated request and return the decoded response body."""
        headers = self._headers()
        try:
            resp = self._http.request(
                method,
                url,
                json=payload,
                headers=headers,
                timeout=self.config.request_timeout,
            )
        except requests.Timeout as e:
            logger.error(f"Store {method} {url} timed out: {e}")
            raise StoreOutcomeUnknown(f"Store request timed out: {e}") from e
        except requests.RequestException as e:
            logger.error(f"Store {method} {url} failed: {e}")
            raise StoreUnavailable(f"Store request failed: {e}") from e

        if resp.status_code == 404 and task_id is not None:
            raise NotFound(task_id)
        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            logger.error(f"Store {method} {url} returned {resp.status_code}: {resp.text}")
            raise StoreUnavailable(f"Store returned {resp.status_code}") from e

        try:
            data = resp.json() or {}
        except ValueError as e:
            # The request went through; whether it was applied is unknown
            logger.error(f"Store {method} {url} returned an undecodable body")
            raise StoreOutcomeUnknown("Store response could not be decoded") from e
        if not isinstance(data, dict):
            logger.error(f"Store {method} {url} returned {type(data).__name__}, expected an object")
            raise StoreOutcomeUnknown("Store response was not an object")
        return data

    def _check_result(self, data: dict, action: str, task_id: str | None = None) -> dict:
        """Return the first per-record result, raising on failure."""
        results = data.get("results") or []
        first = results[0] if results else {}
        if data.get("success") and first.get("success", True):
            return first.get("data") or {}

        message = first.get("message") or data.get("message") or f"Failed to {action} task"
        if task_id is not None and "not found" in message.lower():
            raise NotFound(task_id, message)
        logger.error(f"Store refused to {action} task: {message}")
        raise StoreUnavailable(message)

    def list(self, category: str | None = None) -> list[Task]:
        """Fetch tasks ordered by descending position."""
        params = {
            "fields": FETCH_FIELDS,
            "orderBy": [{"field": "position", "direction": "DESC"}],
        }
        if category:
            params["where"] = [
                {
                    "fieldName": "category",
                    "operator": "ExactMatch",
                    "values": [categories.to_store_label(category)],
                }
            ]

        data = self._request("POST", f"{self._collection_url}/fetch", params)
        if data.get("success") is False:
            raise StoreUnavailable(data.get("message") or "Failed to fetch tasks")
        records = data.get("data") or []
        logger.debug(f"Fetched {len(records)} task records (category={category})")
        try:
            return [task_from_record(r) for r in records]
        except (KeyError, TypeError, AttributeError) as e:
            logger.error(f"Store returned an unusable task record: {e!r}")
            raise StoreUnavailable(f"Store returned an unusable task record: {e!r}") from e

    def create(self, draft: Draft) -> CreatedTask:
        """Create a task from a draft. Returns the store-assigned id."""
        validate_title(draft.title)
        fields = draft.fields()
        fields.setdefault("position", 0)
        record = fields_to_record(fields)

        data = self._request("POST", self._collection_url, {"records": [record]})
        created = self._check_result(data, "create")
        if "Id" not in created:
            raise StoreOutcomeUnknown("Store did not return the new task id")
        return CreatedTask(id=str(created["Id"]), created_at=_parse_created(created.get("CreatedOn")))

    def update(self, task_id: str, fields: dict) -> None:
        """Persist only the given fields of a task."""
        validate_fields(fields)
        record = {"Id": task_id, **fields_to_record(fields)}
        data = self._request("PUT", self._collection_url, {"records": [record]}, task_id=task_id)
        self._check_result(data, "update", task_id)

    def delete(self, task_id: str) -> None:
        """Delete a task by id."""
        data = self._request("DELETE", self._collection_url, {"RecordIds": [task_id]}, task_id=task_id)
        self._check_result(data, "delete", task_id)
