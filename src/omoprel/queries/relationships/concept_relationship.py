"""Direct terminology relationships from concept_relationship.

A relationship is active when its invalid_reason is NULL and today falls
within [valid_start_date, valid_end_date]. Outgoing rows have the seed as
concept_id_1, incoming rows have it as concept_id_2; relationship_id is
reported as stored, in the direction of the stored edge.
"""

from omoprel.core.base import Direction, RelationshipCategory, RelCategory
from omoprel.core.registry import register

SEED = "s"
RELATED = "rc"

ACTIVE_RELATIONSHIP_FILTERS = [
    "cr.invalid_reason IS NULL",
    "CURRENT_DATE BETWEEN cr.valid_start_date AND cr.valid_end_date",
]


class _ConceptRelationshipCategory(RelationshipCategory):
    seed_column: str
    related_column: str

    def build(self, cdm_schema: str, only_standard: bool = True, only_direct: bool = False) -> str:
        # only_direct has no meaning for a single relationship edge
        select = self.render_select({
            "seed_concept_id": f"{SEED}.concept_id",
            "seed_concept_name": f"{SEED}.concept_name",
            "relationship_id": "cr.relationship_id",
            "levels_of_separation": "CAST(NULL AS INTEGER)",
            "related_concept_id": f"{RELATED}.concept_id",
            "related_concept_name": f"{RELATED}.concept_name",
            "vocabulary_id": f"{RELATED}.vocabulary_id",
            "domain_id": f"{RELATED}.domain_id",
            "standard_concept": f"{RELATED}.standard_concept",
            "invalid_reason": f"{RELATED}.invalid_reason",
        })

        filters = ACTIVE_RELATIONSHIP_FILTERS + self.related_concept_filters(
            RELATED, SEED, only_standard
        )

        return (
            f"{select}\n"
            f"FROM seed {SEED}\n"
            f"JOIN {cdm_schema}.concept_relationship cr\n"
            f"  ON cr.{self.seed_column} = {SEED}.concept_id\n"
            f"JOIN {cdm_schema}.concept {RELATED}\n"
            f"  ON {RELATED}.concept_id = cr.{self.related_column}\n"
            "WHERE " + "\n  AND ".join(filters)
        )


@register
class OutgoingRelationshipCategory(_ConceptRelationshipCategory):
    """Active relationships pointing away from the seed."""

    cte_name = "cr_out"
    rel_category = RelCategory.RELATIONSHIP
    direction = Direction.OUTGOING
    description = "Active concept_relationship edges with the seed as concept_id_1"
    seed_column = "concept_id_1"
    related_column = "concept_id_2"


@register
class IncomingRelationshipCategory(_ConceptRelationshipCategory):
    """Active relationships pointing at the seed."""

    cte_name = "cr_in"
    rel_category = RelCategory.RELATIONSHIP
    direction = Direction.INCOMING
    description = "Active concept_relationship edges with the seed as concept_id_2"
    seed_column = "concept_id_2"
    related_column = "concept_id_1"


__all__ = ["OutgoingRelationshipCategory", "IncomingRelationshipCategory"]
