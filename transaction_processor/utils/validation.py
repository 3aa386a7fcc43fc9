"""
Input validation utilities for operator-supplied values.

Checks file paths, snapshot keys and SQL identifiers before they reach the
file system or the database.
"""

import re


class InputValidationError(ValueError):
    """Raised when operator input fails validation."""
    pass


def validate_file_path(file_path: str, field_name: str = "file_path") -> str:
    """
    Validate an upload file path.

    Rejects obviously broken paths. Relative paths, including ones that
    contain "..", are accepted.

    Args:
        file_path: The file path to validate
        field_name: Name of the field (for error messages)

    Returns:
        The validated file path (stripped of whitespace)

    Raises:
        InputValidationError: If validation fails

    Examples:
        >>> validate_file_path("/data/transactions.csv")
        '/data/transactions.csv'
    """
    if not file_path or not isinstance(file_path, str):
        raise InputValidationError(f"{field_name} must be a non-empty string")

    file_path = file_path.strip()

    if not file_path:
        raise InputValidationError(f"{field_name} cannot be empty or whitespace-only")

    if "\x00" in file_path:
        raise InputValidationError(f"{field_name} contains null bytes")

    if len(file_path) > 4096:  # Linux PATH_MAX
        raise InputValidationError(f"{field_name} exceeds maximum length of 4096 characters")

    return file_path


def validate_snapshot_key(key: str, field_name: str = "snapshot_key") -> str:
    """
    Validate the key the snapshot is stored under.

    Keys are short identifiers: alphanumerics, hyphens, underscores, dots
    and colons.

    Raises:
        InputValidationError: If validation fails
    """
    if not key or not isinstance(key, str):
        raise InputValidationError(f"{field_name} must be a non-empty string")

    key = key.strip()

    if not re.match(r'^[a-zA-Z0-9_\-\.:]+$', key):
        raise InputValidationError(
            f"{field_name} contains invalid characters. "
            "Only alphanumeric, hyphens, underscores, dots and colons are allowed."
        )

    if len(key) > 255:
        raise InputValidationError(f"{field_name} exceeds maximum length of 255 characters")

    return key


def sanitize_sql_identifier(identifier: str, field_name: str = "identifier") -> str:
    """
    Sanitize an SQL identifier (table name).

    Args:
        identifier: The identifier to sanitize
        field_name: Name of the field (for error messages)

    Returns:
        The validated identifier

    Raises:
        InputValidationError: If validation fails

    Examples:
        >>> sanitize_sql_identifier("ledger_snapshot")
        'ledger_snapshot'
    """
    if not identifier or not isinstance(identifier, str):
        raise InputValidationError(f"{field_name} must be a non-empty string")

    identifier = identifier.strip()

    if not re.match(r'^[a-zA-Z_][a-zA-Z0-9_]*$', identifier):
        raise InputValidationError(
            f"{field_name} contains invalid characters. "
            "SQL identifiers must start with a letter or underscore and contain only "
            "alphanumeric characters and underscores."
        )

    if len(identifier) > 63:  # PostgreSQL limit
        raise InputValidationError(f"{field_name} exceeds PostgreSQL maximum length of 63 characters")

    return identifier
