"""ICD to SNOMED mapping query.

Maps ICD9CM / ICD10CM codes to their standard SNOMED concepts through the
'Maps to' relationship:

    filtered_icd  --(concept_id = concept_id_1)-->  filtered_relationships
                  --(concept_id_2 = concept_id)-->  filtered_snomed

concept_id_1 is always the source (ICD) side and concept_id_2 the standard
side. A code mapping to several SNOMED concepts yields one row per target;
no deduplication is applied here.
"""

from typing import Sequence, Union

from omoprel.core.helpers import (
    sql_literal,
    sql_literal_list,
    validate_cdm_schema,
    validate_pattern_args,
    validate_string,
    validate_vocabulary_ids,
)
from omoprel.schemas import DEFAULT_SOURCE_VOCABS, DEFAULT_TARGET_VOCAB, MAPS_TO_RELATIONSHIP


def _code_condition(pattern_type: str, values: Sequence[str]) -> str:
    if pattern_type == "like":
        return f"concept_code LIKE {sql_literal(values[0])}"
    return f"concept_code IN ({sql_literal_list(values)})"


def build_icd_to_snomed_query(
    cdm_schema: str,
    pattern_type: str,
    pattern_values: Union[str, Sequence[str]],
    source_vocabulary_id: Sequence[str] = DEFAULT_SOURCE_VOCABS,
    target_vocabulary_id: str = DEFAULT_TARGET_VOCAB,
    relationship_id: str = MAPS_TO_RELATIONSHIP,
) -> str:
    """Build the SQL mapping ICD codes to SNOMED concepts.

    Args:
        cdm_schema: Schema holding the vocabulary tables
            (e.g., "healthverity_marketplace_omop_20250331")
        pattern_type: "like" for a single LIKE pattern (e.g., "C16%"),
            "in" for exact codes (e.g., ["C16.0", "C16.1"])
        pattern_values: The pattern string or the codes
        source_vocabulary_id: Source vocabularies to search
        target_vocabulary_id: Vocabulary to map into
        relationship_id: Relationship linking source to target

    Returns:
        SQL text of a single statement returning icd_concept_id, icd_code,
        icd_name, icd_vocabulary, snomed_concept_id, snomed_code, snomed_name

    Raises:
        InvalidArgument: On a malformed schema or pattern combination
    """
    validate_cdm_schema(cdm_schema)
    pattern_type, values = validate_pattern_args(pattern_type, pattern_values)
    source_vocabs = validate_vocabulary_ids(source_vocabulary_id, "source_vocabulary_id")
    validate_string(target_vocabulary_id, "target_vocabulary_id")
    validate_string(relationship_id, "relationship_id")

    concept_tbl = f"{cdm_schema}.concept"
    concept_relationship_tbl = f"{cdm_schema}.concept_relationship"

    return f"""WITH filtered_relationships AS (
  SELECT concept_id_1, concept_id_2
  FROM {concept_relationship_tbl}
  WHERE relationship_id = {sql_literal(relationship_id)}
),
filtered_icd AS (
  SELECT concept_id, concept_code, concept_name, vocabulary_id
  FROM {concept_tbl}
  WHERE vocabulary_id IN ({sql_literal_list(source_vocabs)})
    AND {_code_condition(pattern_type, values)}
    AND invalid_reason IS NULL
),
filtered_snomed AS (
  SELECT concept_id, concept_code, concept_name
  FROM {concept_tbl}
  WHERE vocabulary_id = {sql_literal(target_vocabulary_id)}
    AND invalid_reason IS NULL
)
SELECT
  icd.concept_id      AS icd_concept_id,
  icd.concept_code    AS icd_code,
  icd.concept_name    AS icd_name,
  icd.vocabulary_id   AS icd_vocabulary,
  snomed.concept_id   AS snomed_concept_id,
  snomed.concept_code AS snomed_code,
  snomed.concept_name AS snomed_name
FROM filtered_icd AS icd
JOIN filtered_relationships AS m
  ON icd.concept_id = m.concept_id_1
JOIN filtered_snomed AS snomed
  ON m.concept_id_2 = snomed.concept_id"""


__all__ = ["build_icd_to_snomed_query"]
