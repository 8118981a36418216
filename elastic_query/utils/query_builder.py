"""
Clause builders for the Elasticsearch query DSL.

Every builder is a pure function returning a fresh fragment; none of
them touch builder state.
"""

from typing import Dict, Any, Iterable, List, Optional, Sequence, Union

from elastic_query.query_types.primitives import MatchMode, RangeSpec


COMPARISON_OPERATORS = ("=", "!=", "<>", ">", ">=", "<", "<=", "like")


def resolve_mode(boolean: str = "and") -> str:
    """Map ``and``/``or`` onto the bool slot clauses are appended to."""
    return "must" if boolean == "and" else "should"


def build_match_query(
    field: Union[str, List[str]],
    value: Any,
    mode: Union[MatchMode, str] = MatchMode.ALL_FIELDS,
    slop: int = 0,
) -> Dict[str, Any]:
    """
    Build a full-text match clause.

    Args:
        field: Field name (a list of fields for multi_match)
        value: Text to search
        mode: Which match flavour to build
        slop: Allowed token gap, phrase mode only

    Returns:
        Match clause dict
    """
    mode = MatchMode(mode)

    if mode is MatchMode.MATCH:
        return {"match": {field: value}}

    if mode is MatchMode.PHRASE:
        phrase: Dict[str, Any] = {"query": value}
        if slop and slop > 0:
            phrase["slop"] = slop
        return {"match_phrase": {field: phrase}}

    if mode is MatchMode.MATCH_ALL:
        return {"match_all": {}}

    if mode is MatchMode.MULTI_MATCH:
        fields = [field] if isinstance(field, str) else list(field)
        return {
            "multi_match": {
                "type": "most_fields",
                "fields": fields,
                "query": value,
            }
        }

    return {"match": {"_all": value}}


def build_phrase_match(field: str, value: Any) -> Dict[str, Any]:
    """Phrase match used by the comparison operators."""
    return {"match": {field: {"query": value, "type": "phrase"}}}


def build_term_query(
    field: str,
    value: Any,
    minimum_match: int = 1,
) -> Dict[str, Any]:
    """
    Build a term query for exact matching.

    A list value embeds ``minimum_match``, the number of listed values
    that have to be present.
    """
    query: Dict[str, Any] = {"term": {field: value}}
    if isinstance(value, (list, tuple)):
        query["term"][field] = list(value)
        query["term"]["minimum_match"] = minimum_match
    return query


def build_terms_query(field: str, values: Iterable[Any]) -> Dict[str, Any]:
    return {"terms": {field: list(values)}}


def build_range_query(
    field: str,
    bounds: Sequence[Any] = (0, 100),
    operators: Sequence[str] = ("gte", "lte"),
    extra: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build a range query.

    Args:
        field: Field name
        bounds: ``[low, high]``
        operators: Comparator names for the two bounds
        extra: Additional range parameters (format, time_zone, ...)

    Returns:
        Range query dict
    """
    low, high = bounds[0], bounds[1]
    range_query: Dict[str, Any] = {
        operators[0]: low,
        operators[1]: high,
    }
    if extra:
        range_query.update(extra)

    return {"range": {field: range_query}}


def build_prefix_query(field: str, value: str) -> Dict[str, Any]:
    return {"prefix": {field: {"value": value}}}


def translate_like(pattern: str) -> str:
    """Translate SQL LIKE wildcards into Lucene ones."""
    return str(pattern).replace("_", "?").replace("%", "*")


def build_wildcard_query(field: str, pattern: str) -> Dict[str, Any]:
    return {"wildcard": {field: translate_like(pattern)}}


def build_ids_query(ids: Iterable[Any]) -> Dict[str, Any]:
    return {"ids": {"values": list(ids)}}


def build_query_string(text: str, fields: Optional[List[str]] = None) -> Dict[str, Any]:
    query: Dict[str, Any] = {"query_string": {"query": text}}
    if fields:
        query["query_string"]["fields"] = list(fields)
    return query


def build_missing_query(field: str, negate: bool = False) -> Dict[str, Any]:
    """Missing-field clause, wrapped in ``must_not`` when negated."""
    clause = {"missing": {"field": field}}
    if negate:
        return {"bool": {"must_not": clause}}
    return clause


def build_in_group(field: str, values: Iterable[Any], negate: bool = False) -> Dict[str, Any]:
    """
    OR together a phrase match per value.

    Args:
        field: Field name
        values: Accepted values
        negate: Wrap the group so none of the values may match

    Returns:
        Bool clause dict
    """
    group = {"bool": {"should": [build_phrase_match(field, value) for value in values]}}
    if negate:
        return {"bool": {"must_not": group}}
    return group


def build_comparison_range(field: str, operator: str, value: Any) -> RangeSpec:
    """Range bounds for ``>``, ``>=``, ``<`` and ``<=``."""
    if operator in (">", ">="):
        return RangeSpec(
            field=field,
            from_=value,
            to=None,
            include_lower=operator == ">=",
            include_upper=True,
        )
    return RangeSpec(
        field=field,
        from_=None,
        to=value,
        include_lower=True,
        include_upper=operator == "<=",
    )


def build_between_query(field: str, bounds: Sequence[Any], negate: bool = False) -> Dict[str, Any]:
    """Inclusive range over ``[low, high]``, under ``must_not`` when negated."""
    clause = RangeSpec(field=field, from_=bounds[0], to=bounds[1]).to_query()
    if negate:
        return {"bool": {"must_not": clause}}
    return clause


def build_comparison(field: str, operator: str, value: Any) -> Dict[str, Any]:
    """
    Build the clause for a ``where(field, operator, value)`` condition.

    Raises:
        ValueError: If the operator is not supported
    """
    if operator == "=":
        return build_phrase_match(field, value)
    if operator in ("!=", "<>"):
        return {"bool": {"must_not": build_phrase_match(field, value)}}
    if operator in (">", ">=", "<", "<="):
        return build_comparison_range(field, operator, value).to_query()
    if operator == "like":
        return build_wildcard_query(field, value)

    raise ValueError(
        f"Unsupported operator {operator!r}, expected one of {', '.join(COMPARISON_OPERATORS)}"
    )


def wrap_where(clause: Dict[str, Any], boolean: str = "and") -> Dict[str, Any]:
    """
    Wrap a clause as a where-tree fragment.

    Conditions live under ``query.bool.must.bool``; ``and`` conditions
    are appended to its ``must`` list and ``or`` conditions to its
    ``should`` list.
    """
    return {"query": {"bool": {"must": {"bool": {resolve_mode(boolean): [clause]}}}}}


def wrap_query(clause: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap a clause directly under the root ``query`` key."""
    return {"query": clause}


def build_bool_query(
    must: Optional[List[Dict[str, Any]]] = None,
    must_not: Optional[List[Dict[str, Any]]] = None,
    should: Optional[List[Dict[str, Any]]] = None,
    filter: Optional[List[Dict[str, Any]]] = None,
    minimum_should_match: Optional[Union[int, str]] = None,
) -> Dict[str, Any]:
    """
    Build a bool query combining multiple conditions.

    Args:
        must: Queries that must match
        must_not: Queries that must not match
        should: Optional queries (OR logic)
        filter: Filter context queries (no scoring)
        minimum_should_match: Minimum number of should clauses

    Returns:
        Bool query dict
    """
    bool_query = {}

    if must:
        bool_query["must"] = must
    if must_not:
        bool_query["must_not"] = must_not
    if should:
        bool_query["should"] = should
    if filter:
        bool_query["filter"] = filter
    if minimum_should_match is not None:
        bool_query["minimum_should_match"] = minimum_should_match

    return {"bool": bool_query}
