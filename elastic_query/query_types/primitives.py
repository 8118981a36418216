"""
Primitive type definitions for query construction.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum


class SortOrder(str, Enum):
    """Sort order for queries."""
    ASC = "asc"
    DESC = "desc"


class MatchMode(str, Enum):
    """Flavours of full-text match clause."""
    ALL_FIELDS = "_all"
    MATCH = "match"
    PHRASE = "match_phrase"
    MATCH_ALL = "match_all"
    MULTI_MATCH = "multi_match"


class Metric(str, Enum):
    """Single-value metric aggregations."""
    MAX = "max"
    MIN = "min"
    SUM = "sum"
    AVG = "avg"


class BulkAction(str, Enum):
    """Bulk action kinds."""
    INDEX = "index"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ScrollPhase(str, Enum):
    """Where a builder is in a scrolled read."""
    IDLE = "idle"
    FIRST_PAGE = "first_page"
    SCROLLING = "scrolling"
    EXHAUSTED = "exhausted"


@dataclass
class RangeSpec:
    """Range bounds with explicit inclusivity."""
    field: str
    from_: Any = None
    to: Any = None
    include_lower: bool = True
    include_upper: bool = True
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_query(self) -> Dict[str, Any]:
        """Convert to a range clause."""
        bounds = {
            "from": self.from_,
            "to": self.to,
            "include_lower": self.include_lower,
            "include_upper": self.include_upper,
        }
        bounds.update(self.extra)
        return {"range": {self.field: bounds}}


@dataclass
class AggregationSpec:
    """A metric aggregation stored under the fixed name ``total``."""
    metric: Metric
    field: str

    def to_dict(self) -> Dict[str, Any]:
        return {"total": {Metric(self.metric).value: {"field": self.field}}}


@dataclass
class ScrollState:
    """
    Cursor bookkeeping for a scrolled search.

    ``size`` is per shard: the engine returns up to ``size`` hits from
    each shard per batch, so the requested total is divided by the
    index's shard count when scrolling is configured.
    """
    size: Optional[int] = None
    expire: Optional[str] = None
    search_type: Optional[str] = None
    scroll_id: Optional[str] = None
    shard_count: int = 1
    phase: ScrollPhase = ScrollPhase.IDLE

    @property
    def enabled(self) -> bool:
        return self.phase is not ScrollPhase.IDLE

    def configure(
        self,
        size: int,
        expire: str,
        search_type: Optional[str] = None,
        shard_count: int = 1,
    ) -> None:
        """Enter scroll mode; the next search returns the first batch."""
        self.shard_count = max(1, int(shard_count))
        self.size = max(1, int(size) // self.shard_count)
        self.expire = expire
        self.search_type = search_type or None
        self.scroll_id = None
        self.phase = ScrollPhase.FIRST_PAGE

    def record(self, response: Dict[str, Any]) -> None:
        """Store the cursor from a scroll response and advance the phase."""
        scroll_id = response.get("_scroll_id")
        if scroll_id:
            self.scroll_id = scroll_id
        hits = response.get("hits", {}).get("hits", [])
        self.phase = ScrollPhase.SCROLLING if hits else ScrollPhase.EXHAUSTED

    def reset(self) -> None:
        self.size = None
        self.expire = None
        self.search_type = None
        self.scroll_id = None
        self.shard_count = 1
        self.phase = ScrollPhase.IDLE


@dataclass
class SearchRequest:
    """Assembled search call, ready to hand to the client."""
    index: str
    body: Dict[str, Any] = field(default_factory=dict)
    scroll: Optional[str] = None
    search_type: Optional[str] = None
    explain: bool = False

    def to_params(self) -> Dict[str, Any]:
        """Convert to keyword arguments for ``Elasticsearch.search``."""
        params: Dict[str, Any] = {
            "index": self.index,
            "body": self.body,
        }

        if self.scroll:
            params["scroll"] = self.scroll
        if self.search_type:
            params["search_type"] = self.search_type
        if self.explain:
            params["explain"] = True

        return params


class SearchResult(list):
    """
    Ordered list of documents with result metadata.

    Each record is the stored ``_source`` with its ``_id`` injected.
    """

    def __init__(
        self,
        records: Optional[List[Dict[str, Any]]] = None,
        total: int = 0,
        scroll_id: Optional[str] = None,
    ):
        super().__init__(records or [])
        self.total = total
        self.scroll_id = scroll_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "records": list(self),
            "total": self.total,
            "scroll_id": self.scroll_id,
        }
