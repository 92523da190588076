"""Free-text normalization: text -> stems -> phonetic classes."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from redis_search.search.analyzers import PHONETIC_ATTR, Analyzer, StandardAnalyzer
from redis_search.search.phonetic import DEFAULT_MAX_LENGTH


@dataclass(frozen=True)
class AnalyzedText:
    """Result of running free text through the analyzer.

    ``stems`` keeps every surviving stem in input order (a multiset);
    ``phonetic`` maps each distinct stem to its class in first-seen order.
    """

    stems: tuple[str, ...] = ()
    phonetic: dict[str, str] = field(default_factory=dict)

    @property
    def frequencies(self) -> Counter[str]:
        return Counter(self.stems)

    def index_terms(self) -> dict[str, int]:
        """Map phonetic class -> frequency of the stem stored under it.

        When two stems fold into one class the stem processed last wins; its
        count replaces the earlier one rather than being added to it.
        """
        counts = self.frequencies
        terms: dict[str, int] = {}
        for stem, phonetic_class in self.phonetic.items():
            terms[phonetic_class] = counts[stem]
        return terms

    def query_terms(self) -> list[str]:
        """Distinct phonetic classes in order of first occurrence."""
        return list(dict.fromkeys(self.phonetic.values()))


class Normalizer:
    """Turns raw free text into the terms used as index key components."""

    def __init__(self, analyzer: Analyzer | None = None, *, phonetic_max_length: int = DEFAULT_MAX_LENGTH) -> None:
        self.analyzer = analyzer or StandardAnalyzer(phonetic_max_length=phonetic_max_length)

    def analyze(self, text: object) -> AnalyzedText:
        if text is None:
            return AnalyzedText()
        tokens = self.analyzer(str(text))
        phonetic: dict[str, str] = {}
        for token in tokens:
            phonetic.setdefault(token.text, token.attributes[PHONETIC_ATTR])
        return AnalyzedText(stems=tuple(token.text for token in tokens), phonetic=phonetic)

    def index_terms(self, text: object) -> dict[str, int]:
        return self.analyze(text).index_terms()

    def query_terms(self, text: object) -> list[str]:
        return self.analyze(text).query_terms()
