from .posting import Posting
from .search_term import JobSearchLink, SearchTerm
from .legacy_cache import JobSearchCache

__all__ = [
    "Posting",
    "SearchTerm",
    "JobSearchLink",
    "JobSearchCache",
]
