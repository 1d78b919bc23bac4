"""Data models shared by the write and read paths."""

from arcsearch.models.document import IndexedDocument
from arcsearch.models.events import ContentEvent, EventOutcome, EventType, Operation
from arcsearch.models.query import QueryParams

__all__ = ["ContentEvent", "EventOutcome", "EventType", "IndexedDocument", "Operation", "QueryParams"]
