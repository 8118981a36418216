"""
Input validation utilities.
"""

import re
from typing import Any


_FIELD_NAME = re.compile(r"^[A-Za-z_@][A-Za-z0-9_@\-]*(\.[A-Za-z_@][A-Za-z0-9_@\-]*)*$")


def validate_index_pattern(pattern: str) -> None:
    """
    Validate an Elasticsearch index name or pattern.

    Args:
        pattern: Index pattern to validate

    Raises:
        ValueError: If pattern is invalid
    """
    if not pattern:
        raise ValueError("Index pattern cannot be empty")

    if pattern.startswith("_"):
        raise ValueError("Index pattern cannot start with underscore")

    # Check for invalid characters
    invalid_chars = re.findall(r'[^a-zA-Z0-9\-_.*,]', pattern)
    if invalid_chars:
        raise ValueError(f"Invalid characters in index pattern: {invalid_chars}")


def validate_field_name(name: str) -> str:
    """
    Validate a field name that ends up inside a painless script.

    Only dotted identifiers are accepted, so a field name can never
    carry script code.

    Args:
        name: Field name, e.g. ``stats.views``

    Returns:
        The unchanged field name

    Raises:
        ValueError: If the name is empty or not a dotted identifier
    """
    if not name:
        raise ValueError("Field name cannot be empty")
    if not _FIELD_NAME.match(name):
        raise ValueError(f"Invalid field name: {name!r}")
    return name


def validate_size(size: int, max_size: int = 10000) -> int:
    """
    Validate and clamp size parameter.

    Args:
        size: Requested size
        max_size: Maximum allowed size

    Returns:
        Valid size value
    """
    return clamp_value(size, min_value=1, max_value=max_size)


def clamp_value(value: Any, min_value: Any, max_value: Any) -> Any:
    """
    Clamp a value between min and max.

    Args:
        value: Value to clamp
        min_value: Minimum allowed value
        max_value: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_value, min(value, max_value))
