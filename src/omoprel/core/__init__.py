"""omoprel core module - errors, row types, helpers and the category registry."""

from .base import Direction, MappingRow, RelationshipCategory, RelationshipRow, RelCategory
from .errors import ExecutorError, InvalidArgument, OmopRelError, SchemaError
from .registry import get_all_categories, get_category, list_categories, register

__all__ = [
    "Direction",
    "MappingRow",
    "RelationshipCategory",
    "RelationshipRow",
    "RelCategory",
    "ExecutorError",
    "InvalidArgument",
    "OmopRelError",
    "SchemaError",
    "register",
    "get_all_categories",
    "get_category",
    "list_categories",
]
