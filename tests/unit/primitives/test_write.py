"""
Unit tests for primitive write and admin operations.
"""

import pytest
from unittest.mock import Mock

from elasticsearch import ConflictError

from elastic_query.exceptions import ClientError
from elastic_query.tools.primitives.admin import alias_exists, swap_alias
from elastic_query.tools.primitives.write import (
    bulk_write,
    create_document,
    index_document,
    update_document,
)


class TestCreateDocument:
    """Test cases for create_document."""

    def test_with_id(self, mock_elasticsearch):
        create_document(mock_elasticsearch, "articles", {"title": "a"}, doc_id="1")
        mock_elasticsearch.create.assert_called_once_with(index="articles", id="1", document={"title": "a"})

    def test_without_id_uses_create_op(self, mock_elasticsearch):
        create_document(mock_elasticsearch, "articles", {"title": "a"})
        mock_elasticsearch.index.assert_called_once_with(
            index="articles", document={"title": "a"}, op_type="create"
        )

    def test_existing_id_is_client_error(self, mock_elasticsearch):
        mock_elasticsearch.create.side_effect = ConflictError(
            "version_conflict_engine_exception", meta=Mock(status=409), body={}
        )

        with pytest.raises(ClientError) as exc_info:
            create_document(mock_elasticsearch, "articles", {"title": "a"}, doc_id="1")

        assert exc_info.value.status_code == 409


class TestOtherWrites:
    """Test cases for index, update and bulk."""

    def test_index_without_id(self, mock_elasticsearch):
        index_document(mock_elasticsearch, "articles", {"title": "a"})
        mock_elasticsearch.index.assert_called_once_with(index="articles", document={"title": "a"})

    def test_update_only_sends_given_parts(self, mock_elasticsearch):
        update_document(mock_elasticsearch, "articles", "1", script={"source": "x"}, upsert={"a": 1})
        mock_elasticsearch.update.assert_called_once_with(
            index="articles", id="1", script={"source": "x"}, upsert={"a": 1}
        )

    def test_bulk_item_errors_are_returned(self, mock_elasticsearch):
        mock_elasticsearch.bulk.return_value = {"took": 1, "errors": True, "items": [{"index": {"status": 400}}]}

        response = bulk_write(mock_elasticsearch, [{"index": {"_index": "articles"}}, {"title": "a"}])

        assert response["errors"] is True
        mock_elasticsearch.bulk.assert_called_once_with(
            operations=[{"index": {"_index": "articles"}}, {"title": "a"}]
        )


class TestAliases:
    """Test cases for alias administration."""

    def test_swap_alias_is_one_request(self, mock_elasticsearch):
        swap_alias(mock_elasticsearch, "articles", "articles_v1", "articles_v2")
        mock_elasticsearch.indices.update_aliases.assert_called_once_with(actions=[
            {"remove": {"index": "articles_v1", "alias": "articles"}},
            {"add": {"index": "articles_v2", "alias": "articles"}},
        ])

    def test_alias_exists(self, mock_elasticsearch):
        mock_elasticsearch.indices.exists_alias.return_value = False
        assert alias_exists(mock_elasticsearch, "articles", "x") is False
