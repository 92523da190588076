"""Key naming scheme for the inverted index.

The layout must stay byte-compatible with data already persisted in the
store:

- ``{ns}:{field}:{value}:id``   sorted set of doc ids per value/phonetic class
- ``{ns}:id:{doc}:{field}``     set of tokens indexed for one document field
- ``{ns}:id:{doc}:indices``     set of fields indexed for one document
- ``{ns}:ids``                  every document id ever indexed
- ``{ns}:{field}:temp`` and ``{ns}:tempFinal``  per-query aggregates
"""

from __future__ import annotations

from dataclasses import dataclass
import math


def format_value(value: object) -> str:
    """Render a scalar the way it appears inside key names and set members."""

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class KeyScheme:
    """Key builders bound to one namespace."""

    namespace: str

    def value_key(self, field: str, value: object) -> str:
        return f"{self.namespace}:{field}:{format_value(value)}:id"

    def reverse_index_key(self, doc_id: object, field: str) -> str:
        return f"{self.namespace}:id:{format_value(doc_id)}:{field}"

    def field_registry_key(self, doc_id: object) -> str:
        return f"{self.namespace}:id:{format_value(doc_id)}:indices"

    def ids_key(self) -> str:
        return f"{self.namespace}:ids"

    def field_aggregate_key(self, field: str) -> str:
        return f"{self.namespace}:{field}:temp"

    def final_aggregate_key(self) -> str:
        return f"{self.namespace}:tempFinal"
