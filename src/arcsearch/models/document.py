"""Indexed document model — the subset of an ANS story stored in the index.

Only fields declared in :mod:`arcsearch.models.schema` appear here.  The
story id is the OpenSearch document id rather than a ``_source`` field.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SectionRef(BaseModel):
    """A section reference reduced to its id."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id", description="Section id, e.g. '/sports'")


class TagRef(BaseModel):
    """A tag reference reduced to its matchable representations."""

    text: str | None = Field(default=None, description="Display text of the tag")
    slug: str | None = Field(default=None, description="URL slug of the tag")


class DistributorRef(BaseModel):
    """Distributor reference (wire service, syndication partner)."""

    reference_id: str | None = Field(default=None, description="Distributor reference id")


class Taxonomy(BaseModel):
    """Nested taxonomy arrays; each element is matched independently."""

    sections: list[SectionRef] = Field(default_factory=list)
    tags: list[TagRef] = Field(default_factory=list)


class PromoImage(BaseModel):
    """Lead promo image, kept only to answer thumbnail-presence queries."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, alias="_id")
    type: str | None = None
    url: str | None = None


class PromoItems(BaseModel):
    basic: PromoImage | None = None


class IndexedDocument(BaseModel):
    """A projected story, ready to be written to the index."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id", description="Story id; the write key for every index operation")
    display_date: str | None = Field(default=None, description="Publish date, or creation date when unpublished")
    canonical_website: str | None = Field(default=None, description="Owning site id")
    type: str | None = Field(default=None, description="ANS type, e.g. 'story'")
    subtype: str | None = Field(default=None, description="ANS subtype")
    distributor: DistributorRef | None = Field(default=None, description="Omitted when the story has none")
    taxonomy: Taxonomy = Field(default_factory=Taxonomy)
    websites: dict[str, Any] | None = Field(default=None, description="Site associations blob")
    promo_items: PromoItems | None = Field(default=None)

    def to_source(self) -> dict[str, Any]:
        """Serialize to the ``_source`` body written to OpenSearch.

        The id travels as the document id, so it is excluded here.  ``None``
        fields are dropped so an absent distributor never becomes a
        placeholder object.
        """
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"id"})
