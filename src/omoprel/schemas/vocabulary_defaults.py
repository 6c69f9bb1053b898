"""
Vocabulary constants shared by the query builders:
┌────────────────────────────┬──────────────────────────────────────────────────────────┐
│          Constant          │                         Purpose                          │
├────────────────────────────┼──────────────────────────────────────────────────────────┤
│ DEFAULT_SOURCE_VOCABS      │ ICD vocabularies searched for the input codes            │
├────────────────────────────┼──────────────────────────────────────────────────────────┤
│ DEFAULT_TARGET_VOCAB       │ Vocabulary the ICD codes are mapped into                 │
├────────────────────────────┼──────────────────────────────────────────────────────────┤
│ MAPS_TO_RELATIONSHIP       │ relationship_id linking a source concept to its standard │
├────────────────────────────┼──────────────────────────────────────────────────────────┤
│ STANDARD_CONCEPT_FLAG      │ concept.standard_concept value of a standard concept     │
├────────────────────────────┼──────────────────────────────────────────────────────────┤
│ NULL_LEVELS_SORT_VALUE     │ levels_of_separation used when sorting non-hierarchy rows │
└────────────────────────────┴──────────────────────────────────────────────────────────┘
"""

DEFAULT_SOURCE_VOCABS = ("ICD10CM", "ICD9CM")

DEFAULT_TARGET_VOCAB = "SNOMED"

MAPS_TO_RELATIONSHIP = "Maps to"

STANDARD_CONCEPT_FLAG = "S"

NULL_LEVELS_SORT_VALUE = 999

PATTERN_TYPES = ("like", "in")

__all__ = [
    "DEFAULT_SOURCE_VOCABS",
    "DEFAULT_TARGET_VOCAB",
    "MAPS_TO_RELATIONSHIP",
    "STANDARD_CONCEPT_FLAG",
    "NULL_LEVELS_SORT_VALUE",
    "PATTERN_TYPES",
]
