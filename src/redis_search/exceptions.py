"""Exception hierarchy for the search index."""


class SearchError(Exception):
    """Base class for every error raised by redis_search."""


class SearchValidationError(SearchError, ValueError):
    """Raised before any store interaction when input is malformed."""


class StoreError(SearchError):
    """Raised when the backing store rejects or fails an operation.

    Wraps the client exception so callers only need to handle one type per
    logical call (index, remove, query, count).
    """
