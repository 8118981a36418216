"""
Request assembly: turns accumulated builder state into request bodies.
"""

import copy
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from elastic_query.query_types.primitives import BulkAction, ScrollState, SortOrder
from elastic_query.utils.query_builder import build_bool_query
from elastic_query.utils.validation import validate_field_name

logger = logging.getLogger(__name__)


BULK_ACTIONS = tuple(action.value for action in BulkAction)

BulkItem = Union[Mapping[str, Any], Tuple[str, Mapping[str, Any]]]


def filter_fields(body: Mapping[str, Any], whitelist: Iterable[str]) -> Dict[str, Any]:
    """
    Keep only whitelisted keys of a document.

    Args:
        body: Document to write
        whitelist: Allowed field names; an empty whitelist allows nothing

    Returns:
        New dict holding the allowed keys, in the document's order
    """
    if not body:
        return {}
    allowed = set(whitelist)
    kept = {key: value for key, value in body.items() if key in allowed}
    dropped = [key for key in body if key not in allowed]
    if dropped:
        logger.debug("Dropped fields outside the whitelist: %s", dropped)
    return kept


def build_sort(order: Mapping[str, Union[SortOrder, str]]) -> List[Dict[str, Any]]:
    """Turn ``{field: direction}`` pairs into a sort list, keeping their order."""
    return [
        {field: {"order": SortOrder(direction).value}}
        for field, direction in order.items()
    ]


def query_clause(where: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Extract the query part of a where-tree for APIs that only take a query.

    A tree holding only a root ``filter`` is expressed as a bool filter.
    """
    query = copy.deepcopy(where.get("query")) if where.get("query") else None
    filters = where.get("filter")
    if not filters:
        return query or {"match_all": {}}

    clauses = [query] if query else []
    return build_bool_query(must=clauses or None, filter=[copy.deepcopy(filters)])


def build_search_body(
    where: Mapping[str, Any],
    columns: Optional[Sequence[str]] = None,
    aggregations: Optional[Mapping[str, Any]] = None,
    paging: bool = False,
    offset: int = 0,
    limit: int = 10,
    order: Optional[Sequence[Dict[str, Any]]] = None,
    version: bool = False,
    scroll: Optional[ScrollState] = None,
) -> Dict[str, Any]:
    """
    Build a search body from accumulated builder state.

    Args:
        where: Where-tree; a root ``filter`` is folded into a bool query
        columns: Source fields to return
        aggregations: Aggregation definitions
        paging: Apply ``from``/``size``
        offset: Pagination offset
        limit: Page size
        order: Sort list
        version: Return document versions
        scroll: Scroll state; an active one overrides ``size``

    Returns:
        Search body dict
    """
    body: Dict[str, Any] = copy.deepcopy(dict(where))
    if body.pop("filter", None):
        body["query"] = query_clause(where)

    if version:
        body["version"] = True
    if columns:
        body["_source"] = {"includes": list(columns)}
    if aggregations:
        body["aggregations"] = copy.deepcopy(dict(aggregations))
    if paging:
        body["from"] = offset
        body["size"] = limit
    if scroll is not None and scroll.enabled and scroll.size:
        body["size"] = scroll.size
    if order:
        body["sort"] = list(order)

    return body


def build_assignment_script(doc: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Painless script setting each document field from script params.

    Values only travel as params so the compiled script is reusable.
    """
    source = ";".join(
        f"ctx._source.{validate_field_name(key)} = params.{key}" for key in doc
    )
    return {
        "lang": "painless",
        "source": source,
        "params": dict(doc),
    }


def build_counter_script(field: str, amount: Union[int, float] = 1, sign: str = "+") -> Dict[str, Any]:
    """
    Painless script adding to or subtracting from a numeric field.

    Args:
        field: Field to change
        amount: Amount, passed as the ``count`` param
        sign: ``+`` or ``-``

    Raises:
        ValueError: On an invalid field name or sign
    """
    if sign not in ("+", "-"):
        raise ValueError(f"Unsupported counter sign: {sign!r}")
    return {
        "lang": "painless",
        "source": f"ctx._source.{validate_field_name(field)} {sign}= params.count",
        "params": {"count": amount},
    }


def build_update_by_query_body(where: Mapping[str, Any], script: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "conflicts": "proceed",
        "query": query_clause(where),
        "script": script,
    }


def _split_bulk_item(item: BulkItem) -> Tuple[str, Dict[str, Any]]:
    if isinstance(item, (tuple, list)):
        action, doc = item[0], dict(item[1] if len(item) > 1 else {})
    else:
        doc = dict(item)
        action = doc.pop("_op_type", BulkAction.INDEX.value)

    action = str(getattr(action, "value", action))
    if action not in BULK_ACTIONS:
        action = BulkAction.INDEX.value
    return action, doc


def build_bulk_operations(
    items: Iterable[BulkItem],
    index: str,
    whitelist: Iterable[str],
) -> List[Dict[str, Any]]:
    """
    Build interleaved action/document lines for the bulk API.

    The action comes from a dict item's ``_op_type`` key or from the
    first element of an ``(action, doc)`` pair and defaults to
    ``index``. ``_id`` (falling back to ``id``) selects the target
    document. ``delete`` emits no document line and ``update`` wraps
    the document under ``doc``. Documents pass through the whitelist.

    Args:
        items: Bulk items
        index: Target index or alias
        whitelist: Allowed field names

    Returns:
        List of bulk lines
    """
    whitelist = list(whitelist)
    operations: List[Dict[str, Any]] = []

    for item in items:
        action, doc = _split_bulk_item(item)
        doc_id = doc.pop("_id", None)
        if doc_id is None:
            doc_id = doc.get("id")

        meta: Dict[str, Any] = {"_index": index}
        if doc_id is not None:
            meta["_id"] = doc_id
        operations.append({action: meta})

        if action == BulkAction.DELETE.value:
            continue
        if action == BulkAction.UPDATE.value:
            operations.append({"doc": filter_fields(doc, whitelist)})
        else:
            operations.append(filter_fields(doc, whitelist))

    return operations


def chunk_bulk_operations(
    operations: Sequence[Dict[str, Any]],
    limit: int,
) -> List[List[Dict[str, Any]]]:
    """
    Split bulk lines into requests of at most ``limit`` actions each.

    An action line and its document line always stay together.
    """
    limit = max(1, int(limit))
    chunks: List[List[Dict[str, Any]]] = []
    current: List[Dict[str, Any]] = []
    actions = 0

    i = 0
    while i < len(operations):
        line = operations[i]
        group = [line]
        if BulkAction.DELETE.value not in line:
            group.append(operations[i + 1])
            i += 1
        i += 1

        if actions == limit:
            chunks.append(current)
            current, actions = [], 0
        current.extend(group)
        actions += 1

    if current:
        chunks.append(current)
    return chunks


def build_mget_docs(items: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Build multi-get doc specs.

    Each item carries ``index`` and ``id`` plus optional ``include`` and
    ``exclude`` source field lists.
    """
    docs = []
    for item in items:
        needle: Dict[str, Any] = {
            "_index": item["index"],
            "_id": item["id"],
        }
        include = item.get("include")
        exclude = item.get("exclude")
        if include and exclude:
            needle["_source"] = {"includes": list(include), "excludes": list(exclude)}
        elif include:
            needle["_source"] = list(include)
        docs.append(needle)
    return docs
