"""
Elasticsearch connection management.

The client lives in a ``ClientContext``. Builders receive a context
explicitly; those that are not given one share a process-wide default
created on first use.
"""

import logging
from typing import Any, Dict, Optional

from elasticsearch import Elasticsearch

from elastic_query.config.environments import get_elasticsearch_config, get_environment_config
from elastic_query.config.indices import INDEX_REGISTRY, TEMPLATE_REGISTRY, get_connection_hosts
from elastic_query.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


_default_context: Optional["ClientContext"] = None


def build_elasticsearch_client(
    config: Dict[str, Any],
    hosts: Optional[list] = None,
) -> Elasticsearch:
    """
    Create an Elasticsearch client from connection settings.

    Args:
        config: Connection settings (url, timeout_ms, credentials, TLS)
        hosts: Hosts overriding the configured url

    Returns:
        Configured Elasticsearch client
    """
    params = {
        "hosts": list(hosts) if hosts else [config["url"]],
        "request_timeout": config["timeout_ms"] / 1000.0,
        "verify_certs": config.get("verify_certs", True),
    }

    # Add CA certificates if provided
    if config.get("ca_certs"):
        params["ca_certs"] = config["ca_certs"]

    # Credentials are passed through as-is
    if config.get("api_key"):
        params["api_key"] = config["api_key"]
    elif config.get("username") and config.get("password"):
        params["basic_auth"] = (config["username"], config["password"])

    return Elasticsearch(**params)


class ClientContext:
    """
    Application context shared by query builders.

    Holds the lazily created client together with the index and
    template registries the builders read their configuration from.
    The client is created once and reused for every later request.
    """

    def __init__(
        self,
        client: Optional[Elasticsearch] = None,
        registry: Optional[Dict[str, Dict[str, Any]]] = None,
        templates: Optional[Dict[str, Dict[str, Any]]] = None,
        environment: Optional[Dict[str, Any]] = None,
    ):
        self._client = client
        self.registry = INDEX_REGISTRY if registry is None else registry
        self.templates = TEMPLATE_REGISTRY if templates is None else templates
        self.environment = environment or get_environment_config()

    @property
    def defaults(self) -> Dict[str, Any]:
        return self.environment.get("defaults", {})

    @property
    def debug_mode(self) -> bool:
        return bool(self.environment.get("debug_mode", False))

    def get_client(self, index: Optional[str] = None) -> Elasticsearch:
        """
        Get the shared client, creating it on first use.

        Args:
            index: Index whose ``connection`` hosts seed the client

        Returns:
            Elasticsearch client
        """
        if self._client is None:
            hosts = None
            if index:
                try:
                    hosts = get_connection_hosts(index, self.registry)
                except ConfigurationError:
                    hosts = None
            config = self.environment.get("elasticsearch") or get_elasticsearch_config()
            self._client = build_elasticsearch_client(config, hosts)
            logger.debug("Created Elasticsearch client for hosts %s", hosts or [config["url"]])
        return self._client


def get_default_context() -> ClientContext:
    """Get the process-wide context, creating it on first use."""
    global _default_context

    if _default_context is None:
        _default_context = ClientContext()
    return _default_context


def set_default_context(context: Optional[ClientContext]) -> None:
    """Replace the process-wide context (``None`` drops it)."""
    global _default_context
    _default_context = context


def check_connection(context: Optional[ClientContext] = None) -> bool:
    """
    Test Elasticsearch connection using a low-privilege operation.

    Args:
        context: Context to test (defaults to the process-wide one)

    Returns:
        True if connection successful
    """
    context = context or get_default_context()
    try:
        es = context.get_client()

        # A zero-size search works with read-only roles, unlike ping()
        response = es.search(
            index="*",
            size=0,
            query={"match_all": {}},
            timeout="5s"
        )

        return "hits" in response

    except Exception:
        logger.warning("Search probe failed, falling back to count", exc_info=True)
        try:
            response = context.get_client().count(index="*")
            return "count" in response
        except Exception:
            logger.warning("Elasticsearch connection test failed", exc_info=True)
            return False
