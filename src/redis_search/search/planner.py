"""Query planner.

Turns a ``SearchQuery`` into a single atomic batch of set-algebra commands:

1. every field yields candidate keys (exact values are OR'd, free-text terms
   are AND'd unless the match mode is ``any``);
2. a field with one key is used directly, a field with several is aggregated
   into ``{ns}:{field}:temp``;
3. field results are intersected into ``{ns}:tempFinal`` unless there is only
   one;
4. the final key is read by descending score over ``[start, stop]``;
5. every aggregate the plan created is trimmed over the same rank window.

Aggregate names are shared between concurrent queries, which is safe only
because the whole plan runs as one indivisible batch.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from redis_search.domain.query import AnyOfValues, ExactValue, FieldCriterion, FreeText, MatchMode, SearchQuery
from redis_search.search import commands
from redis_search.search.commands import StoreCommand, StoreOp
from redis_search.search.keys import KeyScheme
from redis_search.search.normalizer import Normalizer


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldPlan:
    """Candidate keys for one field and how they combine."""

    field: str
    keys: tuple[str, ...]
    op: StoreOp


@dataclass(frozen=True)
class QueryPlan:
    commands: tuple[StoreCommand, ...]
    result_index: int
    final_key: str
    aggregate_keys: tuple[str, ...]


class QueryPlanner:
    def __init__(self, keys: KeyScheme, normalizer: Normalizer) -> None:
        self.keys = keys
        self.normalizer = normalizer

    def field_plan(self, field_name: str, criterion: FieldCriterion, match_words: MatchMode) -> FieldPlan:
        match criterion:
            case ExactValue(value=value):
                return FieldPlan(field_name, (self.keys.value_key(field_name, value),), StoreOp.UNION_STORE)
            case AnyOfValues(values=values):
                keys = tuple(dict.fromkeys(self.keys.value_key(field_name, value) for value in values))
                return FieldPlan(field_name, keys, StoreOp.UNION_STORE)
            case FreeText(text=text):
                terms = self.normalizer.query_terms(text)
                keys = tuple(self.keys.value_key(field_name, term) for term in terms)
                op = StoreOp.UNION_STORE if match_words is MatchMode.ANY else StoreOp.INTERSECT_STORE
                return FieldPlan(field_name, keys, op)
            case _:
                raise TypeError(f"Unsupported criterion for field '{field_name}': {criterion!r}")

    def plan(self, query: SearchQuery, start: int = 0, stop: int = -1) -> QueryPlan | None:
        """Build the batch for ``query``, or ``None`` when no field yields a key."""

        batch: list[StoreCommand] = []
        result_keys: list[str] = []
        aggregate_keys: list[str] = []

        for field_name, criterion in query.fields.items():
            field_plan = self.field_plan(field_name, criterion, query.match_words)
            if not field_plan.keys:
                continue
            if len(field_plan.keys) == 1:
                result_keys.append(field_plan.keys[0])
                continue
            dest = self.keys.field_aggregate_key(field_name)
            batch.append(_aggregate(field_plan.op, dest, field_plan.keys))
            result_keys.append(dest)
            aggregate_keys.append(dest)

        if not result_keys:
            logger.debug("Query on %s produced no candidate keys", self.keys.namespace)
            return None

        if len(result_keys) == 1:
            final_key = result_keys[0]
        else:
            final_key = self.keys.final_aggregate_key()
            batch.append(commands.intersect_store(final_key, result_keys))
            aggregate_keys.append(final_key)

        result_index = len(batch)
        batch.append(commands.range_desc(final_key, start, stop))
        for key in dict.fromkeys(aggregate_keys):
            batch.append(commands.trim_by_rank(key, start, stop))

        return QueryPlan(
            commands=tuple(batch),
            result_index=result_index,
            final_key=final_key,
            aggregate_keys=tuple(dict.fromkeys(aggregate_keys)),
        )


def _aggregate(op: StoreOp, dest: str, sources: tuple[str, ...]) -> StoreCommand:
    if op is StoreOp.INTERSECT_STORE:
        return commands.intersect_store(dest, sources)
    return commands.union_store(dest, sources)
