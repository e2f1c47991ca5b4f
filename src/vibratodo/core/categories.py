"""Category registry - fixed task categories and store label mapping."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    """A task category."""

    id: str
    display_name: str
    color: str


DEFAULT_CATEGORY_ID = "personal"

CATEGORIES: tuple[Category, ...] = (
    Category("work", "Work", "#5271FF"),
    Category("personal", "Personal", "#FF5757"),
    Category("shopping", "Shopping", "#4CAF50"),
    Category("health", "Health", "#9C27B0"),
)

_BY_ID = {c.id: c for c in CATEGORIES}
# The store keeps display-cased labels ("Work"), the app uses short ids ("work")
_BY_STORE_LABEL = {c.display_name: c for c in CATEGORIES}


def all_categories() -> tuple[Category, ...]:
    """All categories in display order."""
    return CATEGORIES


def is_known(category_id: str) -> bool:
    return category_id in _BY_ID


def by_id(category_id: str | None) -> Category:
    """Look up a category, falling back to 'personal' for unknown ids."""
    return _BY_ID.get(category_id or "", _BY_ID[DEFAULT_CATEGORY_ID])


def display_name_for(category_id: str | None) -> str:
    return by_id(category_id).display_name


def color_for(category_id: str | None) -> str:
    return by_id(category_id).color


def to_store_label(category_id: str | None) -> str:
    """App category id -> store label. Unknown ids map to 'Personal'."""
    return by_id(category_id).display_name


def from_store_label(label: str | None) -> str:
    """Store label -> app category id. Unknown labels map to 'personal'."""
    category = _BY_STORE_LABEL.get(label or "")
    return category.id if category else DEFAULT_CATEGORY_ID
