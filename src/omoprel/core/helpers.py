"""Shared helpers: SQL literal escaping, input validation and sqlglot parsing."""

import numbers
import re
from typing import Any, Iterable, List, Mapping, Optional, Tuple

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from ..schemas import PATTERN_TYPES
from .errors import InvalidArgument, SchemaError

# A schema, optionally qualified by its database: "cdm" or "warehouse.cdm"
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*(\.[A-Za-z_][A-Za-z0-9_$]*)?$")


def normalize_name(s: str) -> str:
    """Normalize identifier names to lowercase."""
    return s.lower().strip()


def escape_sql_string(s: str) -> str:
    """Double every single quote so ``s`` can sit inside a SQL string literal.

    Not idempotent: escaping "a''b" yields "a''''b", so apply it once.
    """
    return s.replace("'", "''")


def sql_literal(value: str) -> str:
    """Render ``value`` as an escaped, quoted SQL string literal."""
    return f"'{escape_sql_string(value)}'"


def sql_literal_list(values: Iterable[str]) -> str:
    """Render values as a comma separated list of SQL string literals."""
    return ", ".join(sql_literal(v) for v in values)


def get_column(row: Mapping[str, Any], column: str) -> Any:
    """Look up ``column`` in an executor row, ignoring case.

    Raises:
        SchemaError: If the row has no such column
    """
    if column in row:
        return row[column]
    target = normalize_name(column)
    for key in row.keys():
        if isinstance(key, str) and normalize_name(key) == target:
            return row[key]
    raise SchemaError(
        f"Expected column '{column}' not found in result row. "
        f"Available columns: {list(row.keys())}"
    )


# =========================
# Input validation
# =========================

def validate_cdm_schema(cdm_schema: Any) -> str:
    """Check that cdm_schema is a single, plain SQL identifier.

    Schema names are interpolated as identifiers, not literals, so they are
    restricted to [A-Za-z_][A-Za-z0-9_$]* with an optional database prefix.
    """
    if not isinstance(cdm_schema, str) or not cdm_schema:
        raise InvalidArgument(
            f"cdm_schema must be a single non-empty character string, got {cdm_schema!r}"
        )
    if not _IDENTIFIER_RE.match(cdm_schema):
        raise InvalidArgument(
            f"cdm_schema must be a plain identifier such as 'cdm' or 'database.cdm', "
            f"got {cdm_schema!r}"
        )
    return cdm_schema


def validate_connection(connection: Any) -> None:
    """Check that a connection handle was supplied."""
    if connection is None:
        raise InvalidArgument(
            "connection cannot be None. Please establish a database connection first."
        )


def validate_pattern_args(pattern_type: Any, pattern_values: Any) -> Tuple[str, List[str]]:
    """Check a pattern_type / pattern_values combination.

    Args:
        pattern_type: "like" or "in"
        pattern_values: One pattern string for "like" (a bare string or a
            one-element sequence); a non-empty sequence of codes for "in"

    Returns:
        Tuple of (pattern_type, list_of_values)
    """
    if pattern_type not in PATTERN_TYPES:
        raise InvalidArgument(
            f"pattern_type must be one of {list(PATTERN_TYPES)}, got {pattern_type!r}"
        )

    values = [pattern_values] if isinstance(pattern_values, str) else pattern_values
    try:
        values = list(values)
    except TypeError:
        raise InvalidArgument(
            f"pattern_values must be a string or a sequence of strings, got {pattern_values!r}"
        ) from None

    if pattern_type == "like":
        if len(values) != 1 or not isinstance(values[0], str):
            raise InvalidArgument(
                "For pattern_type='like', provide a single pattern string (e.g., 'C16%'), "
                f"got {pattern_values!r}"
            )
    else:
        if not values:
            raise InvalidArgument(
                "For pattern_type='in', provide a non-empty sequence of codes "
                "(e.g., ['C16.0', 'C16.1'])"
            )
        if not all(isinstance(v, str) for v in values):
            raise InvalidArgument(
                f"For pattern_type='in', every code must be a string, got {pattern_values!r}"
            )

    return pattern_type, values


def validate_vocabulary_ids(vocabulary_ids: Any, argument: str) -> List[str]:
    """Check a vocabulary_id argument: a string or non-empty sequence of strings."""
    try:
        values = [vocabulary_ids] if isinstance(vocabulary_ids, str) else list(vocabulary_ids or [])
    except TypeError:
        raise InvalidArgument(
            f"{argument} must be a string or a sequence of strings, got {vocabulary_ids!r}"
        ) from None
    if not values or not all(isinstance(v, str) and v for v in values):
        raise InvalidArgument(
            f"{argument} must be a non-empty sequence of non-empty strings, got {vocabulary_ids!r}"
        )
    return values


def validate_string(value: Any, argument: str) -> str:
    """Check that value is a single non-empty string."""
    if not isinstance(value, str) or not value:
        raise InvalidArgument(f"{argument} must be a single non-empty string, got {value!r}")
    return value


def validate_ids(ids: Any) -> List[int]:
    """Check concept IDs and return them as ints, unique, in first-seen order."""
    if isinstance(ids, (str, bytes)) or ids is None:
        raise InvalidArgument(f"snomed_ids must be a sequence of integer concept IDs, got {ids!r}")
    values = list(ids)
    if not values:
        raise InvalidArgument("snomed_ids cannot be empty")

    unique: List[int] = []
    seen = set()
    for value in values:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidArgument(
                f"snomed_ids must be a numeric or integer sequence, got element {value!r}"
            )
        if not isinstance(value, numbers.Integral) and not float(value).is_integer():
            raise InvalidArgument(f"snomed_ids must hold whole numbers, got element {value!r}")
        concept_id = int(value)
        if concept_id not in seen:
            seen.add(concept_id)
            unique.append(concept_id)
    return unique


# =========================
# SQL parsing
# =========================

def parse_sql(sql: str, dialect: str = "redshift") -> Tuple[Optional[List[exp.Expression]], Optional[str]]:
    """Parse SQL and return list of statement trees.

    Args:
        sql: The SQL string to parse
        dialect: SQL dialect for parsing

    Returns:
        Tuple of (list_of_trees, error_message). If parsing succeeds,
        error_message is None. If it fails, list_of_trees is None.
    """
    try:
        trees = [t for t in sqlglot.parse(sql, read=dialect) if t is not None]
        if not trees:
            return None, "Failed to parse SQL: empty result"
        return trees, None
    except SqlglotError as e:
        return None, f"SQL parse error: {str(e)}"


def is_single_statement(sql: str, dialect: str = "redshift") -> bool:
    """True when ``sql`` parses into exactly one statement."""
    trees, error = parse_sql(sql, dialect)
    return error is None and len(trees) == 1


__all__ = [
    "normalize_name",
    "escape_sql_string",
    "sql_literal",
    "sql_literal_list",
    "get_column",
    "validate_cdm_schema",
    "validate_connection",
    "validate_pattern_args",
    "validate_vocabulary_ids",
    "validate_string",
    "validate_ids",
    "parse_sql",
    "is_single_statement",
]
