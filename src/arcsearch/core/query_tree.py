"""Query tree — typed boolean query nodes rendered to the OpenSearch DSL.

Nodes are immutable value objects: compiling the same parameters twice
yields trees that compare equal.  ``Nested`` scopes its sub-predicate to a
single element of a nested array, which is what makes "has tag A and has
tag B" different from "one tag element is both A and B".
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class QueryNode(BaseModel):
    """Base class for every query tree node."""

    model_config = ConfigDict(frozen=True)

    @abstractmethod
    def to_dsl(self) -> dict[str, Any]:
        """Render the node as an OpenSearch query DSL fragment."""


class Term(QueryNode):
    """Exact match on a keyword field."""

    field: str
    value: str

    def to_dsl(self) -> dict[str, Any]:
        return {"term": {self.field: self.value}}


class Terms(QueryNode):
    """Field value is any of ``values``."""

    field: str
    values: tuple[str, ...]

    def to_dsl(self) -> dict[str, Any]:
        return {"terms": {self.field: list(self.values)}}


class DateRange(QueryNode):
    """Inclusive date window on ``field``."""

    field: str
    gte: datetime
    lte: datetime

    def to_dsl(self) -> dict[str, Any]:
        return {"range": {self.field: {"gte": _iso(self.gte), "lte": _iso(self.lte)}}}


class Exists(QueryNode):
    """Field (or any sub-field of an object) has a value."""

    field: str

    def to_dsl(self) -> dict[str, Any]:
        return {"exists": {"field": self.field}}


class AnyOf(QueryNode):
    """Disjunction: at least one clause must match."""

    clauses: tuple[QueryNode, ...]

    def to_dsl(self) -> dict[str, Any]:
        return {"bool": {"should": [c.to_dsl() for c in self.clauses]}}


class Nested(QueryNode):
    """Match ``query`` against one element of the nested array at ``path``."""

    path: str
    query: QueryNode

    def to_dsl(self) -> dict[str, Any]:
        return {"nested": {"path": self.path, "query": self.query.to_dsl()}}


class BoolQuery(BaseModel):
    """The compiled query: three ordered clause collections.

    Attributes:
        must: Every clause must match (scoring).
        must_not: No clause may match.
        filter: Every clause must match (non-scoring).
    """

    must: list[QueryNode] = Field(default_factory=list)
    must_not: list[QueryNode] = Field(default_factory=list)
    filter: list[QueryNode] = Field(default_factory=list)

    def to_dsl(self) -> dict[str, Any]:
        return {
            "bool": {
                "must": [c.to_dsl() for c in self.must],
                "must_not": [c.to_dsl() for c in self.must_not],
                "filter": [c.to_dsl() for c in self.filter],
            }
        }


def _iso(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
