"""Executing wrappers and the ICD to concept relationship workflow.

The workflow runs three stages against a caller supplied connection:

    START -> MAPPED -> IDS_EXTRACTED -> RELATIONSHIPS_FETCHED

and stops at EMPTY_RESULT when the mapping query finds nothing, without
issuing the relationship query. No stage is retried; any error aborts the
workflow and propagates unchanged.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from omoprel.connection import Executor, sqlalchemy_executor
from omoprel.core.base import MappingRow, RelationshipRow
from omoprel.core.helpers import get_column, validate_connection, validate_ids
from omoprel.queries import build_icd_to_snomed_query, build_relationship_query
from omoprel.schemas import DEFAULT_SOURCE_VOCABS, DEFAULT_TARGET_VOCAB, MAPS_TO_RELATIONSHIP

logger = logging.getLogger(__name__)


class WorkflowState(Enum):
    """Stages of icd_to_concept_relationships."""

    START = "start"
    MAPPED = "mapped"
    IDS_EXTRACTED = "ids_extracted"
    RELATIONSHIPS_FETCHED = "relationships_fetched"
    EMPTY_RESULT = "empty_result"


@dataclass
class WorkflowResult:
    """Mappings and relationships produced by one workflow run."""

    mappings: List[MappingRow] = field(default_factory=list)
    relationships: List[RelationshipRow] = field(default_factory=list)
    state: WorkflowState = WorkflowState.START

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "state": self.state.value,
            "mappings": [m.to_dict() for m in self.mappings],
            "relationships": [r.to_dict() for r in self.relationships],
        }


def _execute(connection: Any, sql: str, executor: Optional[Executor], print_sql: bool):
    if print_sql:
        print("Executing SQL:")
        print(sql, "\n")
    logger.debug("Executing SQL:\n%s", sql)
    return (executor or sqlalchemy_executor)(connection, sql)


def map_icd_to_snomed(
    connection: Any,
    cdm_schema: str,
    pattern_type: str,
    pattern_values: Union[str, Sequence[str]],
    source_vocabulary_id: Sequence[str] = DEFAULT_SOURCE_VOCABS,
    target_vocabulary_id: str = DEFAULT_TARGET_VOCAB,
    relationship_id: str = MAPS_TO_RELATIONSHIP,
    print_sql: bool = False,
    executor: Optional[Executor] = None,
) -> List[MappingRow]:
    """Map ICD codes to SNOMED concepts.

    Builds the query with build_icd_to_snomed_query and runs it.

    Returns:
        One MappingRow per (ICD concept, SNOMED concept) pair
    """
    validate_connection(connection)
    sql = build_icd_to_snomed_query(
        cdm_schema=cdm_schema,
        pattern_type=pattern_type,
        pattern_values=pattern_values,
        source_vocabulary_id=source_vocabulary_id,
        target_vocabulary_id=target_vocabulary_id,
        relationship_id=relationship_id,
    )

    logger.info("Querying ICD to SNOMED mappings...")
    rows = [MappingRow.from_mapping(r) for r in _execute(connection, sql, executor, print_sql)]
    logger.info("Found %d mappings", len(rows))
    return rows


def extract_snomed_ids(
    mapping_results: Union[Iterable[Union[MappingRow, Mapping[str, Any]]], Mapping[str, Sequence[Any]]],
    as_string: bool = False,
) -> Union[List[int], str]:
    """Extract the unique SNOMED concept IDs from mapping results.

    Args:
        mapping_results: MappingRow objects, row mappings, or a column
            oriented mapping (column name -> values)
        as_string: Return "id1, id2, ..." for display instead of a list.
            Not meant for building SQL.

    Returns:
        IDs in first-seen order, or their comma separated rendering

    Raises:
        SchemaError: If the snomed_concept_id column is missing
    """
    if isinstance(mapping_results, Mapping):
        values = get_column(mapping_results, "snomed_concept_id")
    else:
        values = [
            row.snomed_concept_id if isinstance(row, MappingRow)
            else get_column(row, "snomed_concept_id")
            for row in mapping_results
        ]

    snomed_ids = list(dict.fromkeys(int(v) for v in values))

    if as_string:
        return ", ".join(str(i) for i in snomed_ids)
    return snomed_ids


def shape_relationship_rows(rows: Iterable[Mapping[str, Any]]) -> List[RelationshipRow]:
    """Validate, deduplicate and sort raw relationship rows.

    Sorting here keeps the ordering independent of the database collation.
    """
    unique = dict.fromkeys(RelationshipRow.from_mapping(r) for r in rows)
    return sorted(unique, key=RelationshipRow.sort_key)


def query_concept_relationships(
    snomed_ids: Iterable[int],
    cdm_schema: str,
    connection: Any,
    only_standard: bool = True,
    only_direct: bool = False,
    print_sql: bool = False,
    executor: Optional[Executor] = None,
    categories: Optional[Iterable[str]] = None,
) -> List[RelationshipRow]:
    """Retrieve ancestors, descendants, relationships and synonyms of concepts.

    Args:
        snomed_ids: Seed concept IDs
        cdm_schema: Schema holding the vocabulary tables
        connection: Open connection handle, passed to the executor
        only_standard: Keep only standard related concepts
        only_direct: Keep only direct parent/child hierarchy edges
        print_sql: Print the SQL before executing it
        executor: Callable (connection, sql) -> rows (default: SQLAlchemy)
        categories: Optional subset of category CTE names

    Returns:
        Deduplicated RelationshipRows in rel_category, direction,
        levels_of_separation, vocabulary_id, related_concept_name order
    """
    validate_connection(connection)
    ids = validate_ids(snomed_ids)
    sql = build_relationship_query(
        snomed_ids=ids,
        cdm_schema=cdm_schema,
        only_standard=only_standard,
        only_direct=only_direct,
        categories=categories,
    )

    logger.info("Querying relationships for %d SNOMED concept IDs...", len(ids))
    rows = shape_relationship_rows(_execute(connection, sql, executor, print_sql))
    logger.info("Query completed. Returned %d relationship rows", len(rows))
    return rows


def icd_to_concept_relationships(
    connection: Any,
    cdm_schema: str,
    pattern_type: str,
    pattern_values: Union[str, Sequence[str]],
    source_vocabulary_id: Sequence[str] = DEFAULT_SOURCE_VOCABS,
    target_vocabulary_id: str = DEFAULT_TARGET_VOCAB,
    relationship_id: str = MAPS_TO_RELATIONSHIP,
    only_standard: bool = True,
    only_direct: bool = False,
    print_sql: bool = False,
    return_mappings: bool = False,
    executor: Optional[Executor] = None,
) -> Union[List[RelationshipRow], WorkflowResult]:
    """Run the full ICD to concept relationship workflow.

    1. Map ICD codes to SNOMED concepts
    2. Extract the SNOMED concept IDs
    3. Query all relationships of those concepts

    Returns:
        The relationship rows, or a WorkflowResult holding mappings,
        relationships and the final state when return_mappings is True
    """
    result = WorkflowResult()

    logger.info("=== Step 1: Mapping ICD codes to SNOMED ===")
    result.mappings = map_icd_to_snomed(
        connection=connection,
        cdm_schema=cdm_schema,
        pattern_type=pattern_type,
        pattern_values=pattern_values,
        source_vocabulary_id=source_vocabulary_id,
        target_vocabulary_id=target_vocabulary_id,
        relationship_id=relationship_id,
        print_sql=print_sql,
        executor=executor,
    )
    result.state = WorkflowState.MAPPED

    if not result.mappings:
        logger.warning("No ICD to SNOMED mappings found. Returning empty result.")
        result.state = WorkflowState.EMPTY_RESULT
        return result if return_mappings else result.relationships

    logger.info("=== Step 2: Extracting SNOMED concept IDs ===")
    snomed_ids = extract_snomed_ids(result.mappings)
    result.state = WorkflowState.IDS_EXTRACTED
    logger.info("Found %d unique SNOMED concept IDs", len(snomed_ids))

    logger.info("=== Step 3: Querying concept relationships ===")
    result.relationships = query_concept_relationships(
        snomed_ids=snomed_ids,
        cdm_schema=cdm_schema,
        connection=connection,
        only_standard=only_standard,
        only_direct=only_direct,
        print_sql=print_sql,
        executor=executor,
    )
    result.state = WorkflowState.RELATIONSHIPS_FETCHED

    logger.info("=== Workflow complete ===")
    return result if return_mappings else result.relationships


__all__ = [
    "WorkflowState",
    "WorkflowResult",
    "map_icd_to_snomed",
    "extract_snomed_ids",
    "shape_relationship_rows",
    "query_concept_relationships",
    "icd_to_concept_relationships",
]
