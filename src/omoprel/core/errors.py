"""Error taxonomy for omoprel."""

from sqlalchemy.exc import DBAPIError


class OmopRelError(Exception):
    """Base class for errors raised by omoprel itself."""


class InvalidArgument(OmopRelError, ValueError):
    """Malformed or missing caller input (schema, connection, patterns, IDs)."""


class SchemaError(OmopRelError, LookupError):
    """An expected result column is absent from an executor row."""


# Driver failures are never wrapped; this name exists so callers can catch them.
ExecutorError = DBAPIError


__all__ = ["OmopRelError", "InvalidArgument", "SchemaError", "ExecutorError"]
