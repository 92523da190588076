"""Analyzer utilities for free-text fields.

Composable tokenizer/filter pipeline in the Whoosh style. The standard
analyzer lowercases, removes stopwords, stems with the Porter algorithm and
finally tags every token with its Metaphone class, which is what the inverted
index is keyed on.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, MutableMapping, Sequence
from dataclasses import dataclass, field
import re
from typing import Any, Protocol

from nltk.stem.porter import PorterStemmer

from redis_search.search.phonetic import DEFAULT_MAX_LENGTH, metaphone


PHONETIC_ATTR = "phonetic"


@dataclass
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    attributes: MutableMapping[str, Any] = field(default_factory=dict)

    def copy_with(self, **updates: Any) -> Token:
        data = {
            "text": self.text,
            "attributes": dict(self.attributes),
        }
        data.update(updates)
        return Token(**data)


class Analyzer(Protocol):
    """Protocol implemented by analyzers."""

    def __call__(self, text: str) -> list[Token]:  # pragma: no cover - interface definition
        ...


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class LetterTokenizer:
    """Yields runs of Unicode letters (and underscores); digits split words."""

    _PATTERN = re.compile(r"[^\W\d]+", re.UNICODE)

    def __call__(self, text: str) -> Iterator[Token]:
        for match in self._PATTERN.finditer(text):
            yield Token(text=match.group(0))


class LowercaseFilter:
    """Filter that lowercases token text."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text.islower():
                yield token
            else:
                yield token.copy_with(text=token.text.lower())


# English stopword list; changing it changes
# which phonetic keys existing documents were stored under.
DEFAULT_STOPWORDS = [
    "about", "above", "after", "again", "all", "also", "am", "an", "and", "another",
    "any", "are", "as", "at", "be", "because", "been", "before", "being", "below",
    "between", "both", "but", "by", "came", "can", "cannot", "come", "could", "did",
    "do", "does", "doing", "during", "each", "few", "for", "from", "further", "get",
    "got", "has", "had", "he", "have", "her", "here", "him", "himself", "his", "how",
    "if", "in", "into", "is", "it", "its", "itself", "like", "make", "many", "me",
    "might", "more", "most", "much", "must", "my", "myself", "never", "now", "of",
    "on", "only", "or", "other", "our", "ours", "ourselves", "out", "over", "own",
    "said", "same", "see", "should", "since", "so", "some", "still", "such", "take",
    "than", "that", "the", "their", "theirs", "them", "themselves", "then", "there",
    "these", "they", "this", "those", "through", "to", "too", "under", "until", "up",
    "very", "was", "way", "we", "well", "were", "what", "where", "when", "which",
    "while", "who", "whom", "with", "would", "why", "you", "your", "yours", "yourself",
    "a", "b", "c", "d", "e", "f", "g", "h", "i", "j", "k", "l", "m", "n", "o", "p",
    "q", "r", "s", "t", "u", "v", "w", "x", "y", "z", "_",
]  # fmt: skip


class StopFilter:
    """Removes stopwords from the stream."""

    def __init__(self, stopwords: Sequence[str] | None = None) -> None:
        vocab = stopwords if stopwords is not None else DEFAULT_STOPWORDS
        self.stopwords = {word.lower() for word in vocab}

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text.lower() not in self.stopwords:
                yield token


class PorterStemFilter:
    """Applies the original Porter stemming algorithm.

    Words shorter than ``MIN_STEM_LENGTH`` pass through unchanged, so short
    terms such as "us" keep the keys they were first indexed under.
    """

    MIN_STEM_LENGTH = 3

    def __init__(self) -> None:
        self._stemmer = PorterStemmer(mode=PorterStemmer.ORIGINAL_ALGORITHM)

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if len(token.text) < self.MIN_STEM_LENGTH:
                yield token
            else:
                yield token.copy_with(text=self._stemmer.stem(token.text))


class PhoneticFilter:
    """Annotates each token with its Metaphone class; text is left untouched."""

    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH) -> None:
        self.max_length = max_length

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            clone = token.copy_with()
            clone.attributes[PHONETIC_ATTR] = metaphone(token.text, self.max_length)
            yield clone


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> list[Token]:
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        return list(stream)


class StandardAnalyzer:
    """Default analyzer for the free-text field."""

    def __init__(
        self,
        *,
        stopwords: Sequence[str] | None = None,
        phonetic_max_length: int = DEFAULT_MAX_LENGTH,
    ) -> None:
        filters: list[TokenFilter] = [
            LowercaseFilter(),
            StopFilter(stopwords),
            PorterStemFilter(),
            PhoneticFilter(phonetic_max_length),
        ]
        self.pipeline = AnalyzerPipeline(LetterTokenizer(), filters)

    def __call__(self, text: str) -> list[Token]:
        return self.pipeline(text)
