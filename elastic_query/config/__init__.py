"""
Configuration management for the query builder.
"""

from .indices import (
    INDEX_REGISTRY,
    TEMPLATE_REGISTRY,
    get_index_config,
    get_type_config,
    get_field_whitelist,
    get_shards_number,
    get_write_limit,
    get_alias,
    get_connection_hosts,
    get_template_config,
)
from .environments import (
    get_environment_config,
    get_current_environment,
    get_elasticsearch_config,
)

__all__ = [
    "INDEX_REGISTRY",
    "TEMPLATE_REGISTRY",
    "get_index_config",
    "get_type_config",
    "get_field_whitelist",
    "get_shards_number",
    "get_write_limit",
    "get_alias",
    "get_connection_hosts",
    "get_template_config",
    "get_environment_config",
    "get_current_environment",
    "get_elasticsearch_config",
]
