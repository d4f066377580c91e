"""Resolve human priority and category labels to Jira option ids.

Allowed values come from the project's create-meta schema and are cached for
the lifetime of the process; a restart picks up changes. Label matching
ignores case and diacritics and knows both the Portuguese and the English
names of the standard priorities.
"""

import asyncio
import logging
import unicodedata

from incident_bridge.config import get_settings
from incident_bridge.errors import RemoteError
from incident_bridge.jira.client import fetch_create_meta_fields, fetch_global_priorities
from incident_bridge.jira.models import CategoryOption, MetadataCache, PriorityOption

logger = logging.getLogger(__name__)

# Normalized label -> canonical (Portuguese) priority name.
PRIORITY_SYNONYMS: dict[str, str] = {
    "alta": "alta",
    "high": "alta",
    "media": "media",
    "medium": "media",
    "baixa": "baixa",
    "low": "baixa",
    "mais alta": "mais alta",
    "highest": "mais alta",
    "mais baixa": "mais baixa",
    "lowest": "mais baixa",
}


def normalize_label(value: str | None) -> str:
    """Case-fold, strip diacritics and trim. ``"Média "`` -> ``"media"``."""
    decomposed = unicodedata.normalize("NFD", value or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold().strip()


def _priority_options(values: list) -> list[PriorityOption]:
    return [
        PriorityOption(id=str(v["id"]), name=v.get("name") or "")
        for v in values
        if isinstance(v, dict) and v.get("id") is not None
    ]


def _category_options(values: list) -> list[CategoryOption]:
    return [
        CategoryOption(id=str(v["id"]), value=v.get("value") or "")
        for v in values
        if isinstance(v, dict) and v.get("id") is not None
    ]


class MetadataResolver:
    """Owns a MetadataCache and answers label -> id lookups against it.

    Lookups are pure reads of the cache and return None when nothing
    matches; the caller decides whether that is fatal.
    """

    def __init__(
        self,
        project_key: str,
        issue_type: str,
        category_field: str,
        cache: MetadataCache | None = None,
    ) -> None:
        self.project_key = project_key
        self.issue_type = issue_type
        self.category_field = category_field
        self.cache = cache if cache is not None else MetadataCache()
        self._lock = asyncio.Lock()

    async def ensure_loaded(self) -> MetadataCache:
        """Populate the cache on first call; later calls return it untouched.

        Priorities fall back to the site-wide list when the schema cannot be
        fetched or lists none. Category options become an empty list when the
        schema cannot be fetched. A failing site-wide priority fetch raises
        RemoteError and leaves priorities unloaded for the next attempt.
        """
        if self.cache.is_loaded:
            return self.cache
        async with self._lock:
            if self.cache.is_loaded:
                return self.cache

            fields = await self._fetch_schema_fields()

            if self.cache.priorities is None:
                allowed = ((fields or {}).get("priority") or {}).get("allowedValues")
                priorities = _priority_options(allowed) if isinstance(allowed, list) else []
                if not priorities:
                    logger.info("No project priorities in schema, using global priority list")
                    priorities = _priority_options(await fetch_global_priorities())
                self.cache.priorities = priorities

            if self.cache.category_options is None:
                allowed = ((fields or {}).get(self.category_field) or {}).get("allowedValues")
                self.cache.category_options = (
                    _category_options(allowed) if isinstance(allowed, list) else []
                )

            logger.info(
                "Loaded Jira metadata: %d priorities, %d category options",
                len(self.cache.priorities),
                len(self.cache.category_options),
            )
        return self.cache

    async def _fetch_schema_fields(self) -> dict | None:
        try:
            return await fetch_create_meta_fields(self.project_key, self.issue_type)
        except RemoteError as exc:
            logger.warning(
                "Create-meta fetch failed for %s/%s: %s",
                self.project_key,
                self.issue_type,
                exc,
            )
            return None

    def resolve_priority_id(self, label: str | None) -> str | None:
        """Map a priority label to its id.

        Tries an exact normalized match, then the canonical Portuguese name the
        label is a synonym of, then substring containment. None when nothing matches.
        """
        target = normalize_label(label)
        if not target:
            return None
        priorities = [(normalize_label(p.name), p.id) for p in self.cache.priorities or []]

        for name, priority_id in priorities:
            if name == target:
                return priority_id

        canonical = PRIORITY_SYNONYMS.get(target)
        if canonical:
            for name, priority_id in priorities:
                if name == canonical:
                    return priority_id

        for name, priority_id in priorities:
            if target in name:
                return priority_id
        return None

    def resolve_category_option_id(self, label: str | None) -> str | None:
        """Map a category label to its option id. Exact normalized match only."""
        target = normalize_label(label)
        if not target:
            return None
        for option in self.cache.category_options or []:
            if normalize_label(option.value) == target:
                return option.id
        return None

    def priority_name(self, priority_id: str) -> str | None:
        """Cached display name for a priority id."""
        for option in self.cache.priorities or []:
            if option.id == priority_id:
                return option.name
        return None

    def available_priorities(self) -> list[str]:
        return [p.name for p in self.cache.priorities or []]

    def available_categories(self) -> list[str]:
        return [o.value for o in self.cache.category_options or []]


_resolver: MetadataResolver | None = None


def get_metadata_resolver() -> MetadataResolver:
    """Return the process-wide resolver, created from settings on first use."""
    global _resolver
    if _resolver is None:
        settings = get_settings()
        _resolver = MetadataResolver(
            project_key=settings.jira_project_key,
            issue_type=settings.jira_issue_type,
            category_field=settings.jira_category_field,
        )
    return _resolver


def reset_resolver() -> None:
    """Drop the process-wide resolver and its cache. Used for testing."""
    global _resolver
    _resolver = None
