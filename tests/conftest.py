"""
Pytest configuration and fixtures for elastic-query tests.
"""

import pytest
import os
import sys
from unittest.mock import Mock

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(__file__))
sys.path.insert(0, project_root)

from elastic_query.query import Query  # noqa: E402
from elastic_query.utils.connection import ClientContext  # noqa: E402


@pytest.fixture
def mock_elasticsearch():
    """Mock Elasticsearch client for testing."""
    mock_es = Mock()

    # Mock search response
    mock_es.search.return_value = {
        "took": 5,
        "timed_out": False,
        "hits": {
            "total": {"value": 2, "relation": "eq"},
            "hits": [
                {"_index": "articles", "_id": "1", "_source": {"title": "First", "age": 21}},
                {"_index": "articles", "_id": "2", "_source": {"title": "Second", "age": 34}},
            ]
        }
    }

    mock_es.count.return_value = {"count": 42}
    mock_es.scroll.return_value = {"_scroll_id": "scroll-2", "hits": {"total": 2, "hits": []}}
    mock_es.clear_scroll.return_value = {"succeeded": True, "num_freed": 1}
    mock_es.update_by_query.return_value = {"updated": 3, "failures": []}
    mock_es.delete_by_query.return_value = {"deleted": 3, "failures": []}
    mock_es.bulk.return_value = {"took": 7, "errors": False, "items": [{"index": {"status": 201}}]}
    mock_es.indices.validate_query.return_value = {"valid": True}
    mock_es.indices.stats.return_value = {
        "indices": {
            "articles": {"primaries": {"docs": {"count": 1000, "deleted": 0}}}
        }
    }

    return mock_es


@pytest.fixture
def test_registry():
    """Index registry used by the tests."""
    return {
        "articles": {
            "connection": ["http://es-test:9200"],
            "alias": "",
            "settings": {"number_of_shards": 5},
            "indices": {
                "post": {
                    "fields": ["title", "status", "age", "views"],
                    "limit": 2,
                    "model": None,
                    "mappings": {"properties": {"title": {"type": "text"}}},
                },
            },
        },
        "aliased": {
            "connection": [],
            "alias": "aliased_v2",
            "settings": {},
            "indices": {
                "post": {"fields": ["title"]},
            },
        },
    }


@pytest.fixture
def test_environment_config():
    """Test environment configuration."""
    return {
        "name": "test",
        "elasticsearch": {
            "url": "http://localhost:9200",
            "username": None,
            "password": None,
            "api_key": None,
            "timeout_ms": 5000,
            "verify_certs": False,
        },
        "defaults": {
            "index": "articles",
            "type": "post",
            "limit": 10,
            "scroll_size": 1000,
            "scroll_expire": "30s",
        },
        "debug_mode": True,
    }


@pytest.fixture
def context(mock_elasticsearch, test_registry, test_environment_config):
    """Client context wired to the mock client."""
    return ClientContext(
        client=mock_elasticsearch,
        registry=test_registry,
        templates={"articles_template": {"index_patterns": ["articles-*"]}},
        environment=test_environment_config,
    )


@pytest.fixture
def query(context):
    """Fresh builder on the articles/post target."""
    return Query("articles", "post", context=context)
