"""Hierarchy categories built on concept_ancestor.

concept_ancestor holds the transitive closure of the hierarchy, so one join
reaches every level. min_levels_of_separation = 1 marks a direct
parent/child edge, which is what only_direct keeps.

  descendants: seed = ancestor_concept_id, related = descendant_concept_id
  ancestors:   seed = descendant_concept_id, related = ancestor_concept_id
"""

from omoprel.core.base import Direction, RelationshipCategory, RelCategory
from omoprel.core.registry import register

SEED = "s"
RELATED = "rc"


class _HierarchyCategory(RelationshipCategory):
    """Shared SQL for both directions of the concept_ancestor walk."""

    hierarchical = True
    seed_column: str
    related_column: str

    def build(self, cdm_schema: str, only_standard: bool = True, only_direct: bool = False) -> str:
        select = self.render_select({
            "seed_concept_id": f"{SEED}.concept_id",
            "seed_concept_name": f"{SEED}.concept_name",
            "relationship_id": "CAST(NULL AS VARCHAR)",
            "levels_of_separation": "ca.min_levels_of_separation",
            "related_concept_id": f"{RELATED}.concept_id",
            "related_concept_name": f"{RELATED}.concept_name",
            "vocabulary_id": f"{RELATED}.vocabulary_id",
            "domain_id": f"{RELATED}.domain_id",
            "standard_concept": f"{RELATED}.standard_concept",
            "invalid_reason": f"{RELATED}.invalid_reason",
        })

        filters = self.related_concept_filters(RELATED, SEED, only_standard)
        filters += self.direct_edge_filters("ca", only_direct)

        return (
            f"{select}\n"
            f"FROM seed {SEED}\n"
            f"JOIN {cdm_schema}.concept_ancestor ca\n"
            f"  ON ca.{self.seed_column} = {SEED}.concept_id\n"
            f"JOIN {cdm_schema}.concept {RELATED}\n"
            f"  ON {RELATED}.concept_id = ca.{self.related_column}\n"
            "WHERE " + "\n  AND ".join(filters)
        )


@register
class DescendantCategory(_HierarchyCategory):
    """Every descendant of a seed concept, at any depth."""

    cte_name = "descendants"
    rel_category = RelCategory.HIERARCHY_DESCENDANT
    direction = Direction.DESCENDANT_OF
    description = "Concepts below the seed in the concept_ancestor hierarchy"
    seed_column = "ancestor_concept_id"
    related_column = "descendant_concept_id"


@register
class AncestorCategory(_HierarchyCategory):
    """Every ancestor of a seed concept, at any depth."""

    cte_name = "ancestors"
    rel_category = RelCategory.HIERARCHY_ANCESTOR
    direction = Direction.ANCESTOR_OF
    description = "Concepts above the seed in the concept_ancestor hierarchy"
    seed_column = "descendant_concept_id"
    related_column = "ancestor_concept_id"


__all__ = ["DescendantCategory", "AncestorCategory"]
