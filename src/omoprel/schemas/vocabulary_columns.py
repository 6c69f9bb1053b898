"""
OMOP CDM v5.4 vocabulary tables and derived result shapes.

VOCABULARY_COLUMNS lists the columns of the four vocabulary tables the
generated queries read. MAPPING_COLUMNS and RELATIONSHIP_COLUMNS are the
ordered column lists of the two result sets; the relationship CTEs and the
final SELECT are all rendered from RELATIONSHIP_COLUMNS so every branch of
the UNION lines up.

Source: https://ohdsi.github.io/CommonDataModel/cdm54.html
"""

from typing import Tuple

# Format: "table_name": set of column names (lowercase)
VOCABULARY_COLUMNS = {
    "concept": {
        "concept_id",
        "concept_name",
        "domain_id",
        "vocabulary_id",
        "concept_class_id",
        "standard_concept",
        "concept_code",
        "valid_start_date",
        "valid_end_date",
        "invalid_reason",
    },

    "concept_relationship": {
        "concept_id_1",
        "concept_id_2",
        "relationship_id",
        "valid_start_date",
        "valid_end_date",
        "invalid_reason",
    },

    "concept_ancestor": {
        "ancestor_concept_id",
        "descendant_concept_id",
        "min_levels_of_separation",
        "max_levels_of_separation",
    },

    "concept_synonym": {
        "concept_id",
        "concept_synonym_name",
        "language_concept_id",
    },
}

# One row per (ICD concept, mapped SNOMED concept) pair
MAPPING_COLUMNS: Tuple[str, ...] = (
    "icd_concept_id",
    "icd_code",
    "icd_name",
    "icd_vocabulary",
    "snomed_concept_id",
    "snomed_code",
    "snomed_name",
)

RELATIONSHIP_COLUMNS: Tuple[str, ...] = (
    "seed_concept_id",
    "seed_concept_name",
    "rel_category",
    "direction",
    "relationship_id",
    "levels_of_separation",
    "related_concept_id",
    "related_concept_name",
    "vocabulary_id",
    "domain_id",
    "standard_concept",
    "invalid_reason",
)


def get_table_columns(table_name: str) -> set:
    """
    Get all column names for a vocabulary table.

    Args:
        table_name: Name of the table (case-insensitive)

    Returns:
        Set of column names (lowercase), or empty set if table not found
    """
    return VOCABULARY_COLUMNS.get(table_name.lower(), set())


__all__ = [
    "VOCABULARY_COLUMNS",
    "MAPPING_COLUMNS",
    "RELATIONSHIP_COLUMNS",
    "get_table_columns",
]
