"""Query compiler — translate flat request parameters into a boolean query.

Each recognized parameter is handled by one clause contributor.  A
contributor looks only at its own parameter and yields ``(slot, clause)``
pairs; the compiler appends them, in contributor order, to the matching
collection of a fresh :class:`BoolQuery`.  No contributor reads another
parameter's value (the tag matching mode flag belongs to the tag
contributor), so any combination of parameters compiles to the AND of the
individual contributions.

Example::

    >>> tree = compile_query(QueryParams(arcSite="siteA", excludeSections="/sports"))
    >>> tree.to_dsl()["bool"]["must_not"]
    [{'nested': {'path': 'taxonomy.sections', 'query': {'terms': {'taxonomy.sections._id': ['/sports']}}}}]
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from arcsearch.core.query_tree import AnyOf, BoolQuery, DateRange, Exists, Nested, QueryNode, Term, Terms
from arcsearch.exceptions import MissingScopeError
from arcsearch.models import schema
from arcsearch.models.query import QueryParams

logger = logging.getLogger(__name__)

SORT = [{schema.DISPLAY_DATE: {"order": "desc"}}]
_EARLIEST = datetime.min.replace(tzinfo=UTC)


class Slot(str, Enum):
    MUST = "must"
    MUST_NOT = "must_not"
    FILTER = "filter"


Contribution = Iterator[tuple[Slot, QueryNode]]
ClauseContributor = Callable[[QueryParams, datetime], Contribution]


def split_items(value: str | None) -> list[str]:
    """Split a comma-separated parameter, trimming entries and dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def tag_match(tag: str) -> Nested:
    """A single tag element whose text or slug equals ``tag``."""
    return Nested(
        path=schema.TAGS_PATH,
        query=AnyOf(clauses=(Term(field=schema.TAG_TEXT, value=tag), Term(field=schema.TAG_SLUG, value=tag))),
    )


def _section_match(sections: list[str]) -> Nested:
    return Nested(path=schema.SECTIONS_PATH, query=Terms(field=schema.SECTION_ID, values=tuple(sections)))


# ── Contributors ────────────────────────────────────────────────────────────


def _terms_contributor(attr: str, field: str, slot: Slot) -> ClauseContributor:
    """Build a contributor emitting ``terms`` on ``field`` for a list parameter."""

    def contribute(params: QueryParams, now: datetime) -> Contribution:
        values = split_items(getattr(params, attr))
        if values:
            yield slot, Terms(field=field, values=tuple(values))

    contribute.__name__ = f"contribute_{attr}"
    return contribute


def _sections_contributor(attr: str, slot: Slot) -> ClauseContributor:
    def contribute(params: QueryParams, now: datetime) -> Contribution:
        sections = split_items(getattr(params, attr))
        if sections:
            yield slot, _section_match(sections)

    contribute.__name__ = f"contribute_{attr}"
    return contribute


def contribute_days_back(params: QueryParams, now: datetime) -> Contribution:
    if params.days_back is None:
        return
    try:
        start = now - timedelta(days=params.days_back)
    except OverflowError:
        # Window reaches past the earliest representable date.
        start = _EARLIEST
    yield Slot.FILTER, DateRange(field=schema.DISPLAY_DATE, gte=start, lte=now)


def contribute_include_tags(params: QueryParams, now: datetime) -> Contribution:
    tags = split_items(params.include_tags)
    if not tags:
        return
    if params.must_include_all_tags:
        # One nested clause per tag: different tags may match different elements.
        for tag in tags:
            yield Slot.MUST, tag_match(tag)
    else:
        yield Slot.MUST, AnyOf(clauses=tuple(tag_match(tag) for tag in tags))


def contribute_exclude_tags(params: QueryParams, now: datetime) -> Contribution:
    for tag in split_items(params.exclude_tags):
        yield Slot.MUST_NOT, tag_match(tag)


def contribute_thumbnail(params: QueryParams, now: datetime) -> Contribution:
    if params.must_include_thumbnail:
        yield Slot.MUST, Exists(field=schema.THUMBNAIL)


CONTRIBUTORS: tuple[ClauseContributor, ...] = (
    contribute_days_back,
    _terms_contributor("include_content_types", schema.TYPE, Slot.MUST),
    _terms_contributor("include_subtypes", schema.SUBTYPE, Slot.MUST),
    _sections_contributor("include_sections", Slot.MUST),
    _terms_contributor("include_distributor", schema.DISTRIBUTOR_REFERENCE_ID, Slot.MUST),
    contribute_include_tags,
    _terms_contributor("exclude_content_types", schema.TYPE, Slot.MUST_NOT),
    _terms_contributor("exclude_subtypes", schema.SUBTYPE, Slot.MUST_NOT),
    _sections_contributor("exclude_sections", Slot.MUST_NOT),
    _terms_contributor("exclude_distributor", schema.DISTRIBUTOR_REFERENCE_ID, Slot.MUST_NOT),
    contribute_exclude_tags,
    contribute_thumbnail,
    _terms_contributor("exclude_story_ids", schema.ID, Slot.MUST_NOT),
)


# ── Compilation ─────────────────────────────────────────────────────────────


def compile_query(params: QueryParams, now: datetime | None = None) -> BoolQuery:
    """Compile request parameters into a site-scoped boolean query.

    Args:
        params: Parsed request parameters.
        now: Clock instant for the ``daysBack`` window.  Read once per call
            when omitted.

    Returns:
        The compiled query tree.

    Raises:
        MissingScopeError: If no site was supplied.
    """
    if not params.site:
        raise MissingScopeError()

    now = now or datetime.now(UTC)
    tree = BoolQuery(must=[Term(field=schema.CANONICAL_WEBSITE, value=params.site)])
    slots = {Slot.MUST: tree.must, Slot.MUST_NOT: tree.must_not, Slot.FILTER: tree.filter}

    for contributor in CONTRIBUTORS:
        for slot, clause in contributor(params, now):
            slots[slot].append(clause)

    logger.debug(
        "Compiled query for site %s: %d must, %d must_not, %d filter",
        params.site,
        len(tree.must),
        len(tree.must_not),
        len(tree.filter),
    )
    return tree


def build_search_body(tree: BoolQuery, from_: int, size: int) -> dict[str, Any]:
    """Wrap a compiled tree with the fixed sort and pagination bounds."""
    return {
        "query": tree.to_dsl(),
        "from": from_,
        "size": size,
        "sort": SORT,
    }
