"""Synonyms of the seed concepts from concept_synonym.

Each synonym row repeats the seed as the related concept and carries the
synonym text as related_concept_name. only_standard is not applied: the
synonyms of a seed are listed whether or not the seed is standard.
"""

from omoprel.core.base import Direction, RelationshipCategory, RelCategory
from omoprel.core.registry import register


@register
class SynonymCategory(RelationshipCategory):
    """Alternate display names of each seed concept."""

    cte_name = "syn"
    rel_category = RelCategory.SYNONYM
    direction = Direction.SYNONYM_OF_SEED
    description = "Alternate names of the seed from concept_synonym"
    standard_filter = False

    def build(self, cdm_schema: str, only_standard: bool = True, only_direct: bool = False) -> str:
        select = self.render_select({
            "seed_concept_id": "s.concept_id",
            "seed_concept_name": "s.concept_name",
            "relationship_id": "CAST(NULL AS VARCHAR)",
            "levels_of_separation": "CAST(NULL AS INTEGER)",
            "related_concept_id": "s.concept_id",
            "related_concept_name": "cs.concept_synonym_name",
            "vocabulary_id": "s.vocabulary_id",
            "domain_id": "s.domain_id",
            "standard_concept": "s.standard_concept",
            "invalid_reason": "s.invalid_reason",
        })
        return (
            f"{select}\n"
            "FROM seed s\n"
            f"JOIN {cdm_schema}.concept_synonym cs\n"
            "  ON cs.concept_id = s.concept_id"
        )


__all__ = ["SynonymCategory"]
