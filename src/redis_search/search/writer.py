"""Index writer: turns a document's fields into one atomic batch."""

from __future__ import annotations

from collections.abc import Mapping
import logging
import math
from typing import Any

from redis_search.exceptions import SearchValidationError
from redis_search.search import commands
from redis_search.search.commands import StoreCommand
from redis_search.search.keys import KeyScheme, format_value
from redis_search.search.normalizer import Normalizer


logger = logging.getLogger(__name__)


def coerce_score(value: Any) -> float:
    """Score stored for an exact-match value.

    Numbers (and numeric strings) score as themselves; anything else scores 0
    so a batch is never rejected halfway by the store.
    """
    if isinstance(value, bool):
        return float(value)
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(score) else score


def is_missing_id(doc_id: Any) -> bool:
    return doc_id is None or (isinstance(doc_id, str) and not doc_id.strip())


class IndexWriter:
    """Builds the store mutations that index one document."""

    def __init__(self, keys: KeyScheme, normalizer: Normalizer, *, free_text_field: str = "content") -> None:
        self.keys = keys
        self.normalizer = normalizer
        self.free_text_field = free_text_field

    def build(self, fields: Mapping[str, Any], doc_id: Any) -> list[StoreCommand]:
        if is_missing_id(doc_id):
            raise SearchValidationError("index requires a document id")
        if not isinstance(fields, Mapping):
            raise SearchValidationError("index requires a mapping of field names to values")

        member = format_value(doc_id)
        batch: list[StoreCommand] = []
        for field_name, value in fields.items():
            if not value or not field_name:
                logger.debug("Skipping empty field %r for document %s", field_name, member)
                continue
            field_name = str(field_name)
            if field_name == self.free_text_field:
                self._add_free_text(batch, field_name, value, member)
            else:
                self._add_exact(batch, field_name, value, member)
            batch.append(commands.set_add(self.keys.field_registry_key(member), field_name))
            batch.append(commands.set_add(self.keys.ids_key(), member))
        return batch

    def _add_free_text(self, batch: list[StoreCommand], field_name: str, text: Any, member: str) -> None:
        reverse_key = self.keys.reverse_index_key(member, field_name)
        for phonetic_class, frequency in self.normalizer.index_terms(text).items():
            batch.append(commands.sorted_set_add(self.keys.value_key(field_name, phonetic_class), frequency, member))
            batch.append(commands.set_add(reverse_key, phonetic_class))

    def _add_exact(self, batch: list[StoreCommand], field_name: str, value: Any, member: str) -> None:
        reverse_key = self.keys.reverse_index_key(member, field_name)
        values = value if isinstance(value, (list, tuple, set, frozenset)) else (value,)
        for item in values:
            if not item:
                continue
            if isinstance(item, Mapping):
                msg = f"Field '{field_name}' must hold scalars, got a mapping"
                raise SearchValidationError(msg)
            batch.append(commands.sorted_set_add(self.keys.value_key(field_name, item), coerce_score(item), member))
            batch.append(commands.set_add(reverse_key, format_value(item)))
