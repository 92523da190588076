"""Domain models for structured queries.

A query maps field names to exactly one criterion variant. The planner
resolves the variants with ``match`` statements, so arbitrary caller shapes
are converted here, once, by ``SearchQuery.from_mapping``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from redis_search.exceptions import SearchValidationError


Scalar = Union[str, int, float, bool, None]

_SCALAR_TYPES = (str, int, float, bool, type(None))


class MatchMode(str, Enum):
    """How the terms of a free-text criterion are combined."""

    ALL = "all"
    ANY = "any"

    @classmethod
    def parse(cls, value: MatchMode | str | None, default: MatchMode | str = "all") -> MatchMode:
        raw = default if value is None else value
        try:
            return cls(raw.lower() if isinstance(raw, str) else raw)
        except ValueError:
            msg = f"Unknown match mode {value!r}; expected one of {[mode.value for mode in cls]}"
            raise SearchValidationError(msg) from None


@dataclass(frozen=True)
class ExactValue:
    """Field must equal ``value``."""

    value: Scalar


@dataclass(frozen=True)
class AnyOfValues:
    """Field must equal at least one of ``values``."""

    values: tuple[Scalar, ...]


@dataclass(frozen=True)
class FreeText:
    """Text analyzed into phonetic terms and combined per the match mode."""

    text: str


FieldCriterion = Union[ExactValue, AnyOfValues, FreeText]


@dataclass(frozen=True)
class SearchQuery:
    """Structured query: every field criterion must hold (cross-field AND)."""

    fields: Mapping[str, FieldCriterion] = field(default_factory=dict)
    match_words: MatchMode = MatchMode.ALL

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        *,
        free_text_field: str = "content",
        default_match_words: MatchMode | str = MatchMode.ALL,
    ) -> SearchQuery:
        """Build a query from ``{"query": {...}, "matchWords": "any"}``.

        ``match_words`` is accepted as an alias of ``matchWords``. Lists,
        tuples and sets become ``AnyOfValues``; the free-text field always
        becomes ``FreeText``.
        """
        if not isinstance(data, Mapping):
            raise SearchValidationError("query must be a mapping")
        raw_fields = data.get("query") or {}
        if not isinstance(raw_fields, Mapping):
            raise SearchValidationError("query['query'] must map field names to values")

        match_words = MatchMode.parse(data.get("matchWords", data.get("match_words")), default_match_words)
        fields: dict[str, FieldCriterion] = {}
        for name, value in raw_fields.items():
            fields[str(name)] = _to_criterion(str(name), value, free_text_field)
        return cls(fields=fields, match_words=match_words)


def _to_criterion(name: str, value: Any, free_text_field: str) -> FieldCriterion:
    if name == free_text_field:
        return FreeText("" if value is None else str(value))
    if isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            _check_scalar(name, item)
        return AnyOfValues(tuple(value))
    _check_scalar(name, value)
    return ExactValue(value)


def _check_scalar(name: str, value: Any) -> None:
    if not isinstance(value, _SCALAR_TYPES):
        msg = f"Field '{name}' must be a scalar or a list of scalars, got {type(value).__name__}"
        raise SearchValidationError(msg)
