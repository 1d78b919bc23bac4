"""Query parameter models.

``QueryParams`` is populated straight from a request's query string, so
field aliases follow the public camelCase parameter names.  Malformed
numeric values never fail validation: they fall back to their defaults.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_FROM = 0
DEFAULT_SIZE = 10


def _non_negative_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(str(value).strip())
    except ValueError:
        return None
    return number if number >= 0 else None


class QueryParams(BaseModel):
    """Flat filter parameters for a catalog query.

    List-valued parameters are comma-separated strings; they are split by
    the query compiler.  ``site`` accepts both ``arcSite`` and ``arc-site``,
    with ``arcSite`` taking precedence.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    site: str | None = Field(default=None, validation_alias=AliasChoices("site", "arcSite", "arc-site"))
    days_back: int | None = Field(default=None, alias="daysBack")

    include_content_types: str | None = Field(default=None, alias="includeContentTypes")
    include_subtypes: str | None = Field(default=None, alias="includeSubtypes")
    include_sections: str | None = Field(default=None, alias="includeSections")
    include_distributor: str | None = Field(default=None, alias="includeDistributor")
    include_tags: str | None = Field(default=None, alias="includeTags")
    must_include_all_tags: bool = Field(default=False, alias="mustIncludeAllTags")
    must_include_thumbnail: bool = Field(default=False, alias="mustIncludeThumbnail")

    exclude_content_types: str | None = Field(default=None, alias="excludeContentTypes")
    exclude_subtypes: str | None = Field(default=None, alias="excludeSubtypes")
    exclude_sections: str | None = Field(default=None, alias="excludeSections")
    exclude_distributor: str | None = Field(default=None, alias="excludeDistributor")
    exclude_tags: str | None = Field(default=None, alias="excludeTags")
    exclude_story_ids: str | None = Field(default=None, alias="excludeTheseStoryIds")

    from_: int = Field(default=DEFAULT_FROM, alias="from")
    size: int = Field(default=DEFAULT_SIZE, alias="size")

    @classmethod
    def from_multi_items(cls, items: Iterable[tuple[str, str]]) -> QueryParams:
        """Build from ``(name, value)`` pairs in which names may repeat.

        Repeated list parameters (``?includeTags=a&includeTags=b``) are joined;
        for every other parameter the last value wins.
        """
        data: dict[str, Any] = {}
        for name, value in items:
            if name in _LIST_ALIASES and name in data:
                previous = data[name]
                data[name] = [*previous, value] if isinstance(previous, list) else [previous, value]
            else:
                data[name] = value
        return cls.model_validate(data)

    @field_validator("site", mode="before")
    @classmethod
    def _blank_site_is_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("days_back", mode="before")
    @classmethod
    def _parse_days_back(cls, v: Any) -> int | None:
        return _non_negative_int(v)

    @field_validator(
        "include_content_types",
        "include_subtypes",
        "include_sections",
        "include_distributor",
        "include_tags",
        "exclude_content_types",
        "exclude_subtypes",
        "exclude_sections",
        "exclude_distributor",
        "exclude_tags",
        "exclude_story_ids",
        mode="before",
    )
    @classmethod
    def _join_lists(cls, v: Any) -> Any:
        """Accept repeated parameters (lists) as well as comma-separated strings."""
        if isinstance(v, (list, tuple)):
            return ",".join(str(item) for item in v)
        return v

    @field_validator("must_include_all_tags", "must_include_thumbnail", mode="before")
    @classmethod
    def _parse_flag(cls, v: Any) -> bool:
        # Only the literal "true" switches a flag on.
        return v is True or v == "true"

    @field_validator("from_", mode="before")
    @classmethod
    def _parse_from(cls, v: Any) -> int:
        parsed = _non_negative_int(v)
        return DEFAULT_FROM if parsed is None else parsed

    @field_validator("size", mode="before")
    @classmethod
    def _parse_size(cls, v: Any) -> int:
        parsed = _non_negative_int(v)
        return DEFAULT_SIZE if parsed is None else parsed


_LIST_ALIASES = frozenset(
    field.alias
    for name, field in QueryParams.model_fields.items()
    if name.startswith(("include_", "exclude_")) and field.alias
)
