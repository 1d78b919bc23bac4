"""Index schema — field names and the OpenSearch mapping for projected stories.

The field-name constants are shared by the projector (write path) and the
query compiler (read path), so both sides always agree on where a value
lives in the index.
"""

from __future__ import annotations

from typing import Any

from arcsearch.config.settings import MappingMode

# ── Field names ─────────────────────────────────────────────────────────────

ID = "_id"
DISPLAY_DATE = "display_date"
CANONICAL_WEBSITE = "canonical_website"
TYPE = "type"
SUBTYPE = "subtype"
DISTRIBUTOR_REFERENCE_ID = "distributor.reference_id"

SECTIONS_PATH = "taxonomy.sections"
SECTION_ID = "taxonomy.sections._id"

TAGS_PATH = "taxonomy.tags"
TAG_TEXT = "taxonomy.tags.text"
TAG_SLUG = "taxonomy.tags.slug"

WEBSITES = "websites"
THUMBNAIL = "promo_items.basic"

# ANS date strings carry milliseconds and a zone; older feeds send the bare layout.
DATE_FORMAT = "strict_date_optional_time||yyyy-MM-dd'T'HH:mm:ss"


def _properties() -> dict[str, Any]:
    return {
        # _id is metadata in OpenSearch; the stable story id is the document id.
        DISPLAY_DATE: {"type": "date", "format": DATE_FORMAT},
        CANONICAL_WEBSITE: {"type": "keyword"},
        TYPE: {"type": "keyword"},
        SUBTYPE: {"type": "keyword"},
        "distributor": {
            "properties": {
                "reference_id": {"type": "keyword"},
            },
        },
        "taxonomy": {
            "properties": {
                "sections": {
                    "type": "nested",
                    "properties": {
                        "_id": {"type": "keyword"},
                    },
                },
                "tags": {
                    "type": "nested",
                    "properties": {
                        "text": {"type": "keyword"},
                        "slug": {"type": "keyword"},
                    },
                },
            },
        },
        WEBSITES: {"type": "flattened"},
        "promo_items": {
            "properties": {
                "basic": {
                    "properties": {
                        "_id": {"type": "keyword"},
                        "type": {"type": "keyword"},
                        "url": {"type": "keyword", "index": False},
                    },
                },
            },
        },
    }


def build_index_mappings(mode: MappingMode | str = MappingMode.STRICT) -> dict[str, Any]:
    """Build the index creation body for the story schema.

    Args:
        mode: ``strict`` rejects documents carrying undeclared fields;
            ``loose`` accepts and dynamically maps them.

    Returns:
        A body suitable for ``indices.create`` (``{"mappings": {...}}``).
    """
    mode = MappingMode(mode)
    dynamic: str | bool = "strict" if mode is MappingMode.STRICT else True
    return {
        "mappings": {
            "dynamic": dynamic,
            "properties": _properties(),
        },
    }
