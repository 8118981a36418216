"""
Index configuration registry.

Each index entry describes how to reach the cluster holding it, its
alias and settings, and one block per document type with the field
whitelist applied on every write, the bulk write limit, an optional
model class and the mappings used when the index is created.
"""

from typing import Dict, Any, Optional, List
import os

from elastic_query.exceptions import ConfigurationError


DEFAULT_SHARDS_NUMBER = 5
DEFAULT_WRITE_LIMIT = 10000


# Index registry keyed by index name
INDEX_REGISTRY: Dict[str, Dict[str, Any]] = {
    "default": {
        "connection": [os.getenv("ELASTIC_URL", "http://localhost:9200")],
        "alias": "",
        "settings": {
            "number_of_shards": DEFAULT_SHARDS_NUMBER,
            "number_of_replicas": 1,
        },
        "indices": {
            "default": {
                "fields": ["id", "title", "content", "status", "created_at", "updated_at"],
                "limit": DEFAULT_WRITE_LIMIT,
                "model": None,
                "mappings": {
                    "properties": {
                        "id": {"type": "long"},
                        "title": {"type": "text"},
                        "content": {"type": "text"},
                        "status": {"type": "keyword"},
                        "created_at": {"type": "date"},
                        "updated_at": {"type": "date"},
                    }
                },
            },
        },
    },
}


# Index templates keyed by template name
TEMPLATE_REGISTRY: Dict[str, Dict[str, Any]] = {
    "default_template": {
        "index_patterns": ["default-*"],
        "settings": {"number_of_shards": DEFAULT_SHARDS_NUMBER},
    },
}


def get_index_config(
    index: str,
    registry: Optional[Dict[str, Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Get configuration for an index.

    Args:
        index: Index name
        registry: Registry to look in (defaults to INDEX_REGISTRY)

    Returns:
        Index configuration dict

    Raises:
        ConfigurationError: If the index is not configured
    """
    registry = INDEX_REGISTRY if registry is None else registry
    config = registry.get(index)
    if not config:
        raise ConfigurationError(
            f"Index '{index}' is not configured",
            details={"index": index, "available": list(registry.keys())},
        )
    return config


def get_type_config(
    index: str,
    doc_type: str,
    registry: Optional[Dict[str, Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Get configuration for a document type within an index.

    Raises:
        ConfigurationError: If the index or the type is not configured
    """
    types = get_index_config(index, registry).get("indices", {})
    config = types.get(doc_type)
    if not config:
        raise ConfigurationError(
            f"Type '{doc_type}' is not configured for index '{index}'",
            details={"index": index, "type": doc_type, "available": list(types.keys())},
        )
    return config


def get_field_whitelist(
    index: str,
    doc_type: str,
    registry: Optional[Dict[str, Dict[str, Any]]] = None,
) -> List[str]:
    """Fields allowed on write for a type; empty when none are listed."""
    return list(get_type_config(index, doc_type, registry).get("fields", []))


def get_shards_number(
    index: str,
    registry: Optional[Dict[str, Dict[str, Any]]] = None,
) -> int:
    settings = get_index_config(index, registry).get("settings", {})
    return int(settings.get("number_of_shards", DEFAULT_SHARDS_NUMBER))


def get_write_limit(
    index: str,
    doc_type: str,
    registry: Optional[Dict[str, Dict[str, Any]]] = None,
) -> int:
    return int(get_type_config(index, doc_type, registry).get("limit", DEFAULT_WRITE_LIMIT))


def get_alias(
    index: str,
    registry: Optional[Dict[str, Dict[str, Any]]] = None,
) -> str:
    return get_index_config(index, registry).get("alias", "") or ""


def get_connection_hosts(
    index: str,
    registry: Optional[Dict[str, Dict[str, Any]]] = None,
) -> List[str]:
    """Hosts configured for an index; empty when it relies on the environment URL."""
    return list(get_index_config(index, registry).get("connection", []))


def get_template_config(
    name: str,
    templates: Optional[Dict[str, Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Get an index template body.

    Raises:
        ConfigurationError: If the template is not configured
    """
    templates = TEMPLATE_REGISTRY if templates is None else templates
    config = templates.get(name)
    if not config:
        raise ConfigurationError(
            f"Template '{name}' is not configured",
            details={"template": name, "available": list(templates.keys())},
        )
    return config
