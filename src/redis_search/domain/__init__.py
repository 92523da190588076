"""Domain layer: query value objects."""

from redis_search.domain.query import (
    AnyOfValues,
    ExactValue,
    FieldCriterion,
    FreeText,
    MatchMode,
    Scalar,
    SearchQuery,
)


__all__ = [
    "AnyOfValues",
    "ExactValue",
    "FieldCriterion",
    "FreeText",
    "MatchMode",
    "Scalar",
    "SearchQuery",
]
