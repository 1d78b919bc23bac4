"""Document projector — reduce a raw ANS story to its indexed subset.

The projection is an explicit allow-list: only fields the index queries on
(plus the site associations blob and the lead promo image reference) are
kept.  ``content_elements`` and every other heavy ANS structure never reach
the index.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from arcsearch.exceptions import ValidationError
from arcsearch.models.document import (
    DistributorRef,
    IndexedDocument,
    PromoImage,
    PromoItems,
    SectionRef,
    TagRef,
    Taxonomy,
)

def project(raw: Mapping[str, Any]) -> IndexedDocument:
    """Project a raw ANS story onto the indexed document schema.

    Args:
        raw: The ANS object from a content event payload.

    Returns:
        The indexed document.

    Raises:
        ValidationError: If the story has no ``_id`` or a projected field has
            the wrong shape.
    """
    story_id = raw.get("_id")
    if not story_id:
        raise ValidationError("missing id for projection")

    taxonomy = _mapping(raw.get("taxonomy"), "taxonomy") or {}

    try:
        return IndexedDocument(
            id=str(story_id),
            # Unpublished stories have no display_date yet.
            display_date=raw.get("display_date") or raw.get("created_date"),
            canonical_website=raw.get("canonical_website"),
            type=raw.get("type"),
            subtype=raw.get("subtype"),
            distributor=_project_distributor(_mapping(raw.get("distributor"), "distributor")),
            taxonomy=Taxonomy(
                sections=[SectionRef(id=s["_id"]) for s in _entries(taxonomy, "sections") if s.get("_id")],
                tags=[TagRef(text=t.get("text"), slug=t.get("slug")) for t in _entries(taxonomy, "tags")],
            ),
            websites=raw.get("websites") or None,
            promo_items=_project_promo(_mapping(raw.get("promo_items"), "promo_items")),
        )
    except PydanticValidationError as e:
        raise ValidationError(f"malformed story {story_id}: {e.errors()[0]['msg']}") from e


def _mapping(value: Any, name: str) -> Mapping[str, Any] | None:
    if value is None or isinstance(value, Mapping):
        return value
    raise ValidationError(f"malformed {name}: expected an object")


def _entries(taxonomy: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    entries = taxonomy.get(key) or []
    if not isinstance(entries, list) or not all(isinstance(entry, Mapping) for entry in entries):
        raise ValidationError(f"malformed taxonomy.{key}: expected a list of objects")
    return entries


def _project_distributor(distributor: Mapping[str, Any] | None) -> DistributorRef | None:
    # Staff stories carry a distributor without a reference id; nothing to index.
    if not distributor or not distributor.get("reference_id"):
        return None
    return DistributorRef(reference_id=distributor["reference_id"])


def _project_promo(promo_items: Mapping[str, Any] | None) -> PromoItems | None:
    basic = _mapping((promo_items or {}).get("basic"), "promo_items.basic")
    if not basic:
        return None
    return PromoItems(basic=PromoImage(id=basic.get("_id"), type=basic.get("type"), url=basic.get("url")))
