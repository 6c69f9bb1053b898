"""omoprel - OMOP vocabulary relationship queries.

Maps ICD codes to SNOMED concepts through 'Maps to' and expands SNOMED
concepts into their ancestors, descendants, direct relationships and
synonyms by composing SQL for an externally supplied executor.
"""

from .config import ConnectionConfig
from .connection import Executor, build_connection_url, create_db_connection, sqlalchemy_executor
from .core.base import Direction, MappingRow, RelationshipRow, RelCategory
from .core.errors import ExecutorError, InvalidArgument, OmopRelError, SchemaError
from .core.helpers import escape_sql_string, is_single_statement, parse_sql
from .core.registry import get_all_categories, get_category, list_categories
from .queries import build_icd_to_snomed_query, build_relationship_query
from .workflow import (
    WorkflowResult,
    WorkflowState,
    extract_snomed_ids,
    icd_to_concept_relationships,
    map_icd_to_snomed,
    query_concept_relationships,
)

# Operation names used in the design notes
build_mapping_query = build_icd_to_snomed_query
execute_mapping = map_icd_to_snomed
extract_ids = extract_snomed_ids
execute_relationships = query_concept_relationships
run_workflow = icd_to_concept_relationships


__all__ = [
    # Query builders
    "build_icd_to_snomed_query",
    "build_relationship_query",

    # Workflow
    "map_icd_to_snomed",
    "extract_snomed_ids",
    "query_concept_relationships",
    "icd_to_concept_relationships",
    "WorkflowResult",
    "WorkflowState",

    # Aliases
    "build_mapping_query",
    "execute_mapping",
    "extract_ids",
    "execute_relationships",
    "run_workflow",

    # Rows
    "MappingRow",
    "RelationshipRow",
    "RelCategory",
    "Direction",

    # Errors
    "OmopRelError",
    "InvalidArgument",
    "SchemaError",
    "ExecutorError",

    # Registry
    "get_all_categories",
    "get_category",
    "list_categories",

    # SQL helpers
    "escape_sql_string",
    "parse_sql",
    "is_single_statement",

    # Connections
    "ConnectionConfig",
    "Executor",
    "build_connection_url",
    "create_db_connection",
    "sqlalchemy_executor",
]
