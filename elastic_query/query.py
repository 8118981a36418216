"""
Fluent query builder.

A ``Query`` accumulates conditions into a where-tree through chained
calls and turns it into a request when a terminal call (search, count,
update, delete, bulk...) is made::

    records = (
        Query("articles", "post")
        .where("age", ">=", 18)
        .or_where("status", "active")
        .order_by({"created_at": "desc"})
        .limit(0, 20)
        .search(paging=True)
    )

One builder holds the state of one logical query. It is not safe to
share between threads; the client behind its ``ClientContext`` is.
"""

import copy
import importlib
import json
import logging
from types import SimpleNamespace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from elasticsearch import Elasticsearch

from elastic_query.config import indices as index_config
from elastic_query.exceptions import ConfigurationError
from elastic_query.query_types.primitives import (
    AggregationSpec,
    MatchMode,
    Metric,
    ScrollState,
    SearchRequest,
    SearchResult,
    SortOrder,
)
from elastic_query.tools.primitives import admin, search as read, write
from elastic_query.utils.connection import ClientContext, get_default_context
from elastic_query.utils.merge import merge_where
from elastic_query.utils.query_builder import (
    build_between_query,
    build_comparison,
    build_ids_query,
    build_in_group,
    build_match_query,
    build_missing_query,
    build_prefix_query,
    build_query_string,
    build_range_query,
    build_term_query,
    build_terms_query,
    wrap_query,
    wrap_where,
)
from elastic_query.utils.request_builder import (
    build_assignment_script,
    build_bulk_operations,
    build_counter_script,
    build_mget_docs,
    build_search_body,
    build_sort,
    build_update_by_query_body,
    chunk_bulk_operations,
    filter_fields,
    query_clause,
)
from elastic_query.utils.response_parser import (
    extract_metric_value,
    has_total,
    output_format,
    parse_hits,
    parse_total,
)
from elastic_query.utils.validation import validate_index_pattern, validate_size

logger = logging.getLogger(__name__)


class Query:
    """Chainable Elasticsearch query builder."""

    def __init__(
        self,
        index: Optional[str] = None,
        doc_type: Optional[str] = None,
        context: Optional[ClientContext] = None,
    ):
        self.context = context or get_default_context()
        self._index = index
        self._type = doc_type

        self.where_tree: Dict[str, Any] = {}
        self.aggregations: Dict[str, Any] = {}
        self._metric: Optional[Metric] = None
        self.columns: List[str] = []
        self.order: List[Dict[str, Any]] = []
        self.offset = 0
        self.size = int(self.context.defaults.get("limit", 10))
        self.scroll_state = ScrollState()
        self.output: Optional[Dict[str, Any]] = None
        self.last_request: Optional[Dict[str, Any]] = None

    # ========== TARGET & CONFIGURATION ==========

    def index(self, index: Optional[str] = None) -> "Query":
        """Set the index to query (``None`` falls back to the default)."""
        if index is not None:
            validate_index_pattern(index)
        self._index = index
        return self

    @property
    def index_name(self) -> str:
        return self._index or self.context.defaults.get("index", "default")

    @property
    def type_name(self) -> str:
        return self._type or self.context.defaults.get("type", "default")

    def type_config(self) -> Dict[str, Any]:
        """
        Configuration block of the current index/type.

        Raises:
            ConfigurationError: If either is not configured
        """
        return index_config.get_type_config(self.index_name, self.type_name, self.context.registry)

    def target(self) -> str:
        """Name requests are sent to: the index alias when one is configured."""
        return index_config.get_alias(self.index_name, self.context.registry) or self.index_name

    def get_client(self) -> Elasticsearch:
        """
        Get the shared client after checking the target is configured.

        Raises:
            ConfigurationError: If the index/type is not configured
        """
        self.type_config()
        return self.context.get_client(self.index_name)

    def get_shards_number(self) -> int:
        return index_config.get_shards_number(self.index_name, self.context.registry)

    def get_limit_by_config(self) -> int:
        """Maximum number of actions sent per bulk request."""
        return index_config.get_write_limit(self.index_name, self.type_name, self.context.registry)

    def get_model(self) -> Any:
        """
        Instantiate the model class configured for the type.

        The ``model`` entry is a dotted path (``package.module.Class`` or
        ``package.module:Class``). Without one an empty namespace is
        returned.
        """
        path = self.type_config().get("model")
        if not path:
            return SimpleNamespace()

        module_name, _, class_name = path.replace(":", ".").rpartition(".")
        module = importlib.import_module(module_name)
        return getattr(module, class_name)()

    def reset(self) -> "Query":
        """Clear all query state so the builder can start a new query."""
        self.where_tree = {}
        self.aggregations = {}
        self._metric = None
        self.columns = []
        self.order = []
        self.offset = 0
        self.size = int(self.context.defaults.get("limit", 10))
        self.scroll_state.reset()
        self.output = None
        return self

    # ========== CLAUSES ==========

    def _merge(self, fragment: Dict[str, Any]) -> "Query":
        self.where_tree = merge_where(self.where_tree, fragment)
        # A cached response no longer matches the tree
        self.output = None
        return self

    def query_string(self, text: str, fields: Optional[List[str]] = None) -> "Query":
        return self._merge(wrap_query(build_query_string(text, fields)))

    def match(
        self,
        field: Union[str, List[str]] = "",
        value: Any = "",
        mode: Union[MatchMode, str] = MatchMode.ALL_FIELDS,
        slop: int = 0,
    ) -> "Query":
        """
        Add a full-text match.

        Args:
            field: Field name, or field list for ``multi_match``
            value: Text to match
            mode: ``_all`` (default), ``match``, ``match_phrase``,
                ``match_all`` or ``multi_match``
            slop: Token gap allowed in ``match_phrase`` mode
        """
        return self._merge(wrap_query(build_match_query(field, value, mode, slop)))

    def term(self, field: str, value: Any, minimum_match: int = 1) -> "Query":
        return self._merge(wrap_query(build_term_query(field, value, minimum_match)))

    def terms(self, field: str, values: Iterable[Any]) -> "Query":
        """Match documents whose field holds any of the exact values."""
        return self._merge(wrap_query(build_terms_query(field, values)))

    def prefix(self, field: str, value: str) -> "Query":
        return self._merge(wrap_query(build_prefix_query(field, value)))

    def range(
        self,
        field: str,
        bounds: Sequence[Any] = (0, 100),
        operators: Sequence[str] = ("gte", "lte"),
        extra: Optional[Dict[str, Any]] = None,
    ) -> "Query":
        """
        Add a range clause.

        ``range("age", [10, 20])`` matches 10 through 20 inclusive;
        ``extra`` carries parameters such as ``format`` or
        ``time_zone``.
        """
        return self._merge(wrap_query(build_range_query(field, bounds, operators, extra)))

    def ids(self, ids: Iterable[Any]) -> "Query":
        return self._merge(wrap_query(build_ids_query(ids)))

    def where(
        self,
        field: str,
        operator: Any = None,
        value: Any = None,
        boolean: str = "and",
    ) -> "Query":
        """
        Add a comparison condition.

        Called with two arguments the second one is the value and the
        operator is ``=``. Supported operators are ``=``, ``!=``,
        ``<>``, ``>``, ``>=``, ``<``, ``<=`` and ``like``.

        Args:
            field: Field name
            operator: Comparison operator, or the value
            value: Value to compare with
            boolean: ``and`` adds to ``must``, ``or`` adds to ``should``

        Raises:
            ValueError: On an unsupported operator
        """
        if value is None:
            value, operator = operator, "="
        return self._merge(wrap_where(build_comparison(field, operator, value), boolean))

    def or_where(self, field: str, operator: Any = None, value: Any = None) -> "Query":
        return self.where(field, operator, value, "or")

    def where_in(self, field: str, values: Iterable[Any], boolean: str = "and") -> "Query":
        """Match any of the values (OR of phrase matches)."""
        return self._merge(wrap_where(build_in_group(field, values), boolean))

    def where_not_in(self, field: str, values: Iterable[Any], boolean: str = "and") -> "Query":
        return self._merge(wrap_where(build_in_group(field, values, negate=True), boolean))

    def where_between(self, field: str, bounds: Sequence[Any], boolean: str = "and") -> "Query":
        """Inclusive range; a no-op when the upper bound is missing."""
        if len(bounds) < 2 or bounds[1] is None:
            logger.info("where_between on %s skipped: upper bound missing", field)
            return self
        return self._merge(wrap_where(build_between_query(field, bounds), boolean))

    def where_not_between(self, field: str, bounds: Sequence[Any], boolean: str = "and") -> "Query":
        if len(bounds) < 2 or bounds[1] is None:
            logger.info("where_not_between on %s skipped: upper bound missing", field)
            return self
        return self._merge(wrap_where(build_between_query(field, bounds, negate=True), boolean))

    def is_null(self, field: str, boolean: str = "and") -> "Query":
        return self._merge(wrap_where(build_missing_query(field), boolean))

    def is_not_null(self, field: str, boolean: str = "and") -> "Query":
        return self._merge(wrap_where(build_missing_query(field, negate=True), boolean))

    def filter(self, field: str, value: Any) -> "Query":
        """Add a term filter under the root ``filter`` key."""
        return self._merge({"filter": {"term": {field: value}}})

    # ========== PROJECTION, PAGING, ORDER, SCROLL ==========

    def pluck(self, *columns: Union[str, Sequence[str]]) -> "Query":
        """Restrict returned source fields; accepts a list or varargs."""
        if len(columns) == 1 and not isinstance(columns[0], str):
            self.columns = list(columns[0])
        else:
            self.columns = list(columns)
        return self

    def limit(self, offset: int = 0, limit: int = 10) -> "Query":
        """Set pagination, applied by ``search(paging=True)``."""
        self.offset = max(0, int(offset))
        self.size = max(0, int(limit))
        return self

    def order_by(self, order: Mapping[str, Union[SortOrder, str]]) -> "Query":
        """Sort by ``{field: "asc" | "desc"}`` pairs, in the given order."""
        self.order = build_sort(order)
        return self

    def scroll(
        self,
        size: Optional[int] = None,
        expire: Optional[str] = None,
        search_type: Optional[str] = None,
    ) -> "Query":
        """
        Switch the next search to scroll mode.

        Every shard contributes up to the batch size to each scroll
        batch, so ``size`` is divided by the index's shard count: a
        size of 1000 over 5 shards requests 200 per shard.

        Args:
            size: Requested documents per batch
            expire: How long the engine keeps the cursor alive
            search_type: Optional alternate search type
        """
        defaults = self.context.defaults
        self.scroll_state.configure(
            size=validate_size(size if size is not None else defaults.get("scroll_size", 1000)),
            expire=expire or defaults.get("scroll_expire", "30s"),
            search_type=search_type,
            shard_count=self.get_shards_number(),
        )
        return self

    # ========== READS ==========

    def _remember(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> None:
        self.last_request = {"method": method, "path": path, "body": copy.deepcopy(body)}

    def search(self, paging: bool = False, version: bool = False, explain: bool = False) -> Any:
        """
        Run the accumulated query.

        Args:
            paging: Apply ``limit()`` offset and size
            version: Return document versions
            explain: Ask the engine to explain scoring

        Returns:
            A SearchResult; the metric value when an aggregation is set;
            the raw hits when ``explain`` is set
        """
        es = self.get_client()
        index = self.target()
        scrolling = self.scroll_state.enabled

        body = build_search_body(
            self.where_tree,
            columns=self.columns,
            aggregations=self.aggregations,
            paging=paging,
            offset=self.offset,
            limit=self.size,
            order=self.order,
            version=version,
            scroll=self.scroll_state,
        )
        request = SearchRequest(
            index=index,
            body=body,
            scroll=self.scroll_state.expire if scrolling else None,
            search_type=self.scroll_state.search_type if scrolling else None,
            explain=explain,
        )
        self._remember("POST", f"/{index}/_search", body)
        self.output = read.execute_search(es, request)

        if scrolling:
            self.scroll_state.record(self.output)

        if self.aggregations:
            return extract_metric_value(self.output, self._metric)
        if explain:
            return parse_hits(self.output)

        return self.output_format()

    def first(self) -> Dict[str, Any]:
        """First record of the search, or an empty dict."""
        records = self.search()
        return records[0] if records else {}

    def find(self, doc_id: Any) -> Optional[Dict[str, Any]]:
        """Raw get response for a document id, or None if it does not exist."""
        return read.get_document(self.get_client(), self.target(), doc_id)

    def mget(self, items: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Fetch documents from any configured index in one request.

        Each item has ``index`` and ``id`` plus optional ``include`` and
        ``exclude`` source field lists.
        """
        return read.multi_get(self.get_client(), build_mget_docs(items))

    def count(self) -> int:
        """
        Number of matching documents.

        Reuses the total of the last search when there is one instead
        of asking the engine again.
        """
        if has_total(self.output):
            return parse_total(self.output)

        index = self.target()
        body = {"query": query_clause(self.where_tree)}
        self._remember("POST", f"/{index}/_count", body)
        return read.count_documents(self.get_client(), index, body)

    def _current_scroll_id(self, scroll_id: Optional[str] = None) -> Optional[str]:
        return scroll_id or self.scroll_state.scroll_id or (self.output or {}).get("_scroll_id")

    def search_by_scroll_id(self, scroll_id: Optional[str] = None) -> "Query":
        """
        Fetch the next scroll batch into ``output``.

        Uses the given cursor or the last known one; with neither this
        is a no-op. Read the batch with ``output_format()``.
        """
        cursor = self._current_scroll_id(scroll_id)
        if not cursor:
            return self

        expire = self.scroll_state.expire or self.context.defaults.get("scroll_expire", "30s")
        self._remember("POST", "/_search/scroll", {"scroll": expire, "scroll_id": cursor})
        self.output = read.scroll_search(self.get_client(), cursor, expire)
        self.scroll_state.record(self.output)
        return self

    def clear_scroll(self, scroll_id: Optional[str] = None) -> bool:
        """
        Release the given cursor, or the last known one.

        Returns:
            False when there was no cursor or the engine no longer knew it
        """
        cursor = self._current_scroll_id(scroll_id)
        if not cursor:
            return False

        released = read.clear_scroll(self.get_client(), cursor)
        self.scroll_state.reset()
        if self.output and "_scroll_id" in self.output:
            self.output = {key: value for key, value in self.output.items() if key != "_scroll_id"}
        return released

    def output_format(self) -> SearchResult:
        return output_format(self.output or {})

    # ========== AGGREGATIONS ==========

    def _aggregate(self, metric: Metric, field: str) -> Any:
        self._metric = metric
        self.aggregations = AggregationSpec(metric, field).to_dict()
        try:
            return self.search()
        finally:
            self.aggregations = {}
            self._metric = None

    def max(self, field: str) -> Any:
        return self._aggregate(Metric.MAX, field)

    def min(self, field: str) -> Any:
        return self._aggregate(Metric.MIN, field)

    def sum(self, field: str) -> Any:
        return self._aggregate(Metric.SUM, field)

    def avg(self, field: str) -> Any:
        return self._aggregate(Metric.AVG, field)

    # ========== WRITES ==========

    def filter_fields(self, body: Mapping[str, Any]) -> Dict[str, Any]:
        """Drop every key not whitelisted for the current type."""
        return filter_fields(
            body, index_config.get_field_whitelist(self.index_name, self.type_name, self.context.registry)
        )

    def insert(self, body: Mapping[str, Any], doc_id: Optional[Any] = None) -> Dict[str, Any]:
        """Create a document; fails if ``doc_id`` already exists."""
        return write.create_document(self.get_client(), self.target(), self.filter_fields(body), doc_id)

    def insert_or_cover(self, body: Mapping[str, Any], doc_id: Optional[Any] = None) -> Dict[str, Any]:
        """Create or fully replace a document."""
        return write.index_document(self.get_client(), self.target(), self.filter_fields(body), doc_id)

    def update_by_id(self, body: Mapping[str, Any], doc_id: Any) -> Dict[str, Any]:
        return write.update_document(
            self.get_client(), self.target(), doc_id, doc=self.filter_fields(body)
        )

    def insert_or_update(self, body: Mapping[str, Any], doc_id: Any) -> Dict[str, Any]:
        """Update the given fields of a document, creating it when absent."""
        params = self.filter_fields(body)
        return write.update_document(
            self.get_client(),
            self.target(),
            doc_id,
            script=build_assignment_script(params),
            upsert=params,
        )

    def update(self, body: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Set fields on every document matching the where-tree.

        Does nothing and returns ``{}`` without conditions, so a missing
        ``where`` can never rewrite the whole index.
        """
        if not self.where_tree:
            logger.info("update skipped: no conditions set")
            return {}

        params = self.filter_fields(body)
        if not params:
            logger.info("update skipped: no whitelisted fields in %s", list(body))
            return {}

        return self._update_by_query(build_assignment_script(params))

    def increase(self, field: str, amount: Union[int, float] = 1) -> Dict[str, Any]:
        """Add ``amount`` to ``field`` on every matching document."""
        if not field or not self.where_tree:
            logger.info("increase skipped: no field or no conditions set")
            return {}
        return self._update_by_query(build_counter_script(field, amount, "+"))

    def decrease(self, field: str, amount: Union[int, float] = 1) -> Dict[str, Any]:
        if not field or not self.where_tree:
            logger.info("decrease skipped: no field or no conditions set")
            return {}
        return self._update_by_query(build_counter_script(field, amount, "-"))

    def _update_by_query(self, script: Dict[str, Any]) -> Dict[str, Any]:
        index = self.target()
        body = build_update_by_query_body(self.where_tree, script)
        self._remember("POST", f"/{index}/_update_by_query", body)
        return write.update_by_query(self.get_client(), index, body)

    def delete_by_id(self, doc_id: Any) -> Dict[str, Any]:
        return write.delete_document(self.get_client(), self.target(), doc_id)

    def delete(self) -> Dict[str, Any]:
        """
        Delete every document matching the where-tree.

        Does nothing and returns ``{}`` without conditions.
        """
        if not self.where_tree:
            logger.info("delete skipped: no conditions set")
            return {}

        index = self.target()
        body = {"query": query_clause(self.where_tree)}
        self._remember("POST", f"/{index}/_delete_by_query", body)
        return write.delete_by_query(self.get_client(), index, body)

    def bulk(self, items: Sequence[Any]) -> Dict[str, Any]:
        """
        Index, create, update or delete many documents.

        Items are dicts whose optional ``_op_type`` selects the action
        (``index`` by default), or ``(action, doc)`` pairs. Requests are
        split so none carries more actions than the type's configured
        limit; with several requests the responses are combined.

        Returns:
            Bulk response (``{}`` for no items)
        """
        if not items:
            return {}

        es = self.get_client()
        whitelist = index_config.get_field_whitelist(self.index_name, self.type_name, self.context.registry)
        operations = build_bulk_operations(items, self.target(), whitelist)
        chunks = chunk_bulk_operations(operations, self.get_limit_by_config())

        responses = [write.bulk_write(es, chunk) for chunk in chunks]
        if len(responses) == 1:
            return responses[0]

        return {
            "took": sum(response.get("took", 0) for response in responses),
            "errors": any(response.get("errors") for response in responses),
            "items": [item for response in responses for item in response.get("items", [])],
        }

    # ========== ADMINISTRATION ==========

    def get_stats(self) -> Dict[str, Any]:
        return admin.get_index_stats(self.get_client(), self.index_name)

    def validate_query(self) -> bool:
        """Ask the engine whether the current where-tree is a valid query."""
        body = {"query": query_clause(self.where_tree)}
        return admin.validate_query(self.get_client(), self.target(), body)

    def create_mapping(self) -> Dict[str, Any]:
        """Create the index with its configured settings and type mappings."""
        settings = index_config.get_index_config(self.index_name, self.context.registry).get("settings", {})
        return admin.create_index(
            self.get_client(), self.index_name, settings, self.type_config().get("mappings", {})
        )

    def update_mapping(self) -> Dict[str, Any]:
        return admin.put_mapping(self.get_client(), self.index_name, self.type_config().get("mappings", {}))

    def truncate(self) -> Dict[str, Any]:
        """Delete the whole index."""
        return admin.delete_index(self.get_client(), self.index_name)

    def create_template(self, name: str) -> Dict[str, Any]:
        """
        Create or replace an index template from configuration.

        Raises:
            ConfigurationError: If the template is not configured
        """
        body = index_config.get_template_config(name, self.context.templates)
        return admin.put_template(self.get_client(), name, body)

    def delete_template(self, name: str) -> Dict[str, Any]:
        return admin.delete_template(self.get_client(), name)

    def create_alias(self, alias_name: str = "") -> Dict[str, Any]:
        alias_name = alias_name or index_config.get_alias(self.index_name, self.context.registry)
        if not alias_name:
            raise ValueError(f"No alias given or configured for index '{self.index_name}'")
        return admin.put_alias(self.get_client(), self.index_name, alias_name)

    def is_alias(self, alias_name: str) -> bool:
        return admin.alias_exists(self.get_client(), self.index_name, alias_name)

    def delete_alias(self, alias_name: str) -> Dict[str, Any]:
        return admin.delete_alias(self.get_client(), self.index_name, alias_name)

    def migrate_index(self, alias_name: str, new_index: str) -> Dict[str, Any]:
        """Point an alias at ``new_index`` instead of the current index."""
        validate_index_pattern(new_index)
        return admin.swap_alias(self.get_client(), alias_name, self.index_name, new_index)

    # ========== DEBUGGING ==========

    def to_curl(self) -> Optional[str]:
        """Render the last assembled request as a curl command."""
        if not self.last_request:
            return None

        hosts = []
        try:
            hosts = index_config.get_connection_hosts(self.index_name, self.context.registry)
        except ConfigurationError:
            logger.debug("No configured hosts for %s, using the environment url", self.index_name)
        base = (hosts[0] if hosts else self.context.environment.get("elasticsearch", {}).get("url", "")).rstrip("/")

        command = f"curl -X{self.last_request['method']} '{base}{self.last_request['path']}?pretty'"
        if self.last_request["body"] is not None:
            body = json.dumps(self.last_request["body"], default=str)
            command += f" -H 'Content-Type: application/json' -d '{body}'"
        return command

    def debug(self) -> Optional[str]:
        """Log the last request as curl when debug mode is on."""
        if not self.context.debug_mode:
            return None
        command = self.to_curl()
        logger.info("Last request: %s", command)
        return command

    # These shadow builtins inside the class body; keep them last

    def type(self, doc_type: Optional[str] = None) -> "Query":
        """Set the document type (configuration namespace)."""
        self._type = doc_type
        return self

    def bool(self, field: str, value: Any, occur: str = "must") -> "Query":
        """Add a term clause to a slot (``must``, ``should``, ``must_not``) of the root bool."""
        return self._merge(wrap_query({"bool": {occur: {"term": {field: value}}}}))

