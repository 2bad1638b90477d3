"""Search pipeline: cache lookup, fetch, sort and projection."""

from typing import List, Optional, Protocol, Sequence, Tuple

from pydantic import BaseModel, Field

from gpsearch.cache.store import FingerprintCache
from gpsearch.errors import CacheMissError, CacheWriteError
from gpsearch.output.formatter import ProjectedView, render_projection
from gpsearch.ranking.comparator import SortSpec
from gpsearch.records import Record
from gpsearch.utils.logging import get_logger

logger = get_logger(__name__)


class SearchClient(Protocol):
    def search(self, query: str) -> List[Record]: ...


class SearchOutcome(BaseModel):
    """Result of one search invocation."""

    query: str
    from_cache: bool
    records: List[Record] = Field(default_factory=list)
    view: ProjectedView


class SearchOrchestrator:
    """
    Runs one query end to end.

    Cache problems never escape: a failed load is a miss, a failed save is
    logged and ignored. Fetch and decode errors propagate unchanged.
    """

    def __init__(self, cache: FingerprintCache, client: SearchClient):
        self.cache = cache
        self.client = client

    def load_records(self, query: str) -> Tuple[List[Record], bool]:
        """
        Return the records for ``query`` and whether they came from the cache.

        Raises:
            FetchError: If the upstream request fails
            DecodeError: If the upstream response cannot be decoded
        """
        if not self.cache.is_stale(query):
            try:
                records = self.cache.load(query)
                logger.debug(f"Loaded {len(records)} cached records for {query!r}")
                return records, True
            except CacheMissError as e:
                logger.info(f"Ignoring unusable cache entry: {e}")

        records = self.client.search(query)
        try:
            self.cache.save(query, records)
        except CacheWriteError as e:
            logger.warning(f"Cannot dump query result to cache, ignoring: {e}")
        return records, False

    def execute(
        self,
        query: str,
        sort_field: str,
        reverse: bool = False,
        fields: Sequence[str] = (),
        limit: Optional[int] = None,
    ) -> SearchOutcome:
        """
        Search, sort and project.

        Args:
            query: Query string, also the cache key source
            sort_field: Field to order records by
            reverse: Invert the per-field ordering
            fields: Fields to project, in display order
            limit: Maximum records to display (None = all)

        Returns:
            SearchOutcome with sorted records and the projected view
        """
        records, from_cache = self.load_records(query)
        ordered = SortSpec(field=sort_field, reverse=reverse).apply(records)
        view = render_projection(ordered, fields, limit)
        return SearchOutcome(query=query, from_cache=from_cache, records=ordered, view=view)


__all__ = ["SearchClient", "SearchOrchestrator", "SearchOutcome"]
