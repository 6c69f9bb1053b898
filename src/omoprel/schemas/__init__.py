"""omoprel schemas submodule."""

from .vocabulary_columns import (
    MAPPING_COLUMNS,
    RELATIONSHIP_COLUMNS,
    VOCABULARY_COLUMNS,
    get_table_columns,
)
from .vocabulary_defaults import (
    DEFAULT_SOURCE_VOCABS,
    DEFAULT_TARGET_VOCAB,
    MAPS_TO_RELATIONSHIP,
    NULL_LEVELS_SORT_VALUE,
    PATTERN_TYPES,
    STANDARD_CONCEPT_FLAG,
)

__all__ = [
    "VOCABULARY_COLUMNS",
    "MAPPING_COLUMNS",
    "RELATIONSHIP_COLUMNS",
    "get_table_columns",
    "DEFAULT_SOURCE_VOCABS",
    "DEFAULT_TARGET_VOCAB",
    "MAPS_TO_RELATIONSHIP",
    "STANDARD_CONCEPT_FLAG",
    "NULL_LEVELS_SORT_VALUE",
    "PATTERN_TYPES",
]
