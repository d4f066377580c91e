"""Jira option types cached by the metadata resolver."""

from pydantic import BaseModel


class PriorityOption(BaseModel):
    """An allowed priority value, e.g. ``{"id": "2", "name": "Alta"}``."""

    id: str
    name: str


class CategoryOption(BaseModel):
    """An allowed value of the category custom field."""

    id: str
    value: str


class MetadataCache(BaseModel):
    """Allowed priorities and category options, loaded once per process.

    ``None`` means not fetched yet; an empty list means fetched and empty.
    """

    priorities: list[PriorityOption] | None = None
    category_options: list[CategoryOption] | None = None

    @property
    def is_loaded(self) -> bool:
        return self.priorities is not None and self.category_options is not None

    def invalidate(self) -> None:
        """Forget everything so the next ``ensure_loaded`` refetches."""
        self.priorities = None
        self.category_options = None
