"""
Unit tests for input validation helpers.
"""

import pytest

from elastic_query.utils.validation import validate_field_name, validate_index_pattern, validate_size


class TestValidateSize:
    """Test cases for validate_size."""

    def test_within_bounds(self):
        assert validate_size(50) == 50

    def test_clamped(self):
        assert validate_size(0) == 1
        assert validate_size(5000, max_size=1000) == 1000


class TestNames:
    """Test cases for field and index name validation."""

    def test_dotted_field(self):
        assert validate_field_name("user.name") == "user.name"

    def test_rejects_script_fragment(self):
        with pytest.raises(ValueError):
            validate_field_name("a; ctx.op")

    def test_rejects_empty_index(self):
        with pytest.raises(ValueError):
            validate_index_pattern("")
