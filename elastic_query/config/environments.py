"""
Environment configuration management.
"""

import os
from typing import Dict, Any, Optional

from dotenv import load_dotenv

# Pick up a local .env before the defaults below are read
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Single environment configuration - reads directly from env vars
DEFAULT_CONFIG = {
    "name": "default",
    "elasticsearch": {
        "url": os.getenv("ELASTIC_URL", os.getenv("ELASTICSEARCH_URL", "http://localhost:9200")),
        "username": os.getenv("ELASTIC_USERNAME", os.getenv("ELASTICSEARCH_USERNAME")),
        "password": os.getenv("ELASTIC_PASSWORD", os.getenv("ELASTICSEARCH_PASSWORD")),
        "api_key": os.getenv("ELASTIC_API_KEY", os.getenv("ELASTICSEARCH_API_KEY")),
        "timeout_ms": int(os.getenv("ELASTIC_TIMEOUT", os.getenv("ELASTICSEARCH_TIMEOUT", "30000"))),
        "verify_certs": True,
        "ca_certs": os.getenv("ELASTIC_CA_CERTS"),
    },
    "defaults": {
        "index": os.getenv("ELASTIC_DEFAULT_INDEX", "default"),
        "type": os.getenv("ELASTIC_DEFAULT_TYPE", "default"),
        "limit": 10,
        "scroll_size": 1000,
        "scroll_expire": "30s",
    },
    "debug_mode": _env_flag("ELASTIC_DEBUG"),
}


def get_current_environment() -> str:
    """
    Get the current environment name.

    Returns:
        Always returns 'default' since we use a single environment
    """
    return "default"


def get_environment_config(environment: Optional[str] = None) -> Dict[str, Any]:
    """
    Get configuration for the environment.

    Args:
        environment: Ignored (kept for compatibility)

    Returns:
        Environment configuration dictionary
    """
    return DEFAULT_CONFIG


def get_elasticsearch_config(environment: Optional[str] = None) -> Dict[str, Any]:
    """
    Get Elasticsearch connection configuration.

    Args:
        environment: Ignored (kept for compatibility)

    Returns:
        Elasticsearch configuration dictionary
    """
    return DEFAULT_CONFIG["elasticsearch"]

