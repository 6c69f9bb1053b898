"""Concept relationship query.

Expands a set of seed concept IDs into their relationship neighbourhood.
Each category module registers one CTE builder; this module unions them:

    seed          concept rows for the requested IDs
    descendants   HIERARCHY_DESCENDANT / descendant_of
    ancestors     HIERARCHY_ANCESTOR   / ancestor_of
    cr_out        RELATIONSHIP         / outgoing
    cr_in         RELATIONSHIP         / incoming
    syn           SYNONYM              / synonym_of_seed
    combined      UNION ALL of the categories
    deduplicated  SELECT DISTINCT over full rows

The final SELECT orders by rel_category, direction,
COALESCE(levels_of_separation, 999), vocabulary_id, related_concept_name.
"""

import textwrap
from typing import Iterable, List, Optional, Type

# Import category modules to trigger registration, in UNION order
from . import hierarchy, concept_relationship, synonym

from omoprel.core.base import RelationshipCategory
from omoprel.core.errors import InvalidArgument
from omoprel.core.helpers import validate_cdm_schema, validate_ids
from omoprel.core.registry import get_all_categories, get_category
from omoprel.schemas import NULL_LEVELS_SORT_VALUE, RELATIONSHIP_COLUMNS

ORDER_BY = (
    "rel_category",
    "direction",
    f"COALESCE(levels_of_separation, {NULL_LEVELS_SORT_VALUE})",
    "vocabulary_id",
    "related_concept_name",
)


def _cte(name: str, body: str) -> str:
    return f"{name} AS (\n{textwrap.indent(body, '  ')}\n)"


def _select_categories(categories: Optional[Iterable[str]]) -> List[Type[RelationshipCategory]]:
    if categories is None:
        return get_all_categories()
    if isinstance(categories, str):
        categories = [categories]
    selected = [get_category(name) for name in dict.fromkeys(categories)]
    if not selected:
        raise InvalidArgument(
            f"categories must name at least one of {[c.cte_name for c in get_all_categories()]}"
        )
    # Keep registration order whatever order the caller listed them in
    return [cls for cls in get_all_categories() if cls in selected]


def build_seed_cte(snomed_ids: Iterable[int], cdm_schema: str) -> str:
    """Render the seed CTE selecting the concept rows for the given IDs."""
    id_list = ", ".join(str(i) for i in snomed_ids)
    return _cte(
        "seed",
        f"SELECT c.*\nFROM {cdm_schema}.concept c\nWHERE c.concept_id IN ({id_list})",
    )


def build_relationship_query(
    snomed_ids: Iterable[int],
    cdm_schema: str,
    only_standard: bool = True,
    only_direct: bool = False,
    categories: Optional[Iterable[str]] = None,
) -> str:
    """Build the SQL returning every relationship of the seed concepts.

    Args:
        snomed_ids: Seed concept IDs; duplicates are removed
        cdm_schema: Schema holding the vocabulary tables
        only_standard: Keep only standard related concepts (synonyms exempt)
        only_direct: Keep only direct parent/child hierarchy edges
        categories: Optional CTE names to include (default: all registered)

    Returns:
        SQL text of a single statement returning RELATIONSHIP_COLUMNS

    Raises:
        InvalidArgument: On an empty or non-numeric ID set, a malformed
            schema, or an unknown category
    """
    ids = validate_ids(snomed_ids)
    validate_cdm_schema(cdm_schema)
    category_classes = _select_categories(categories)

    ctes = [build_seed_cte(ids, cdm_schema)]
    for category_cls in category_classes:
        body = category_cls().build(cdm_schema, only_standard=bool(only_standard), only_direct=bool(only_direct))
        ctes.append(_cte(category_cls.cte_name, body))

    union = "\nUNION ALL\n".join(f"SELECT * FROM {cls.cte_name}" for cls in category_classes)
    ctes.append(_cte("combined", union))

    columns = ",\n  ".join(RELATIONSHIP_COLUMNS)
    ctes.append(_cte("deduplicated", f"SELECT DISTINCT\n  {columns}\nFROM combined"))

    order_by = ",\n  ".join(ORDER_BY)
    return (
        "WITH " + ",\n".join(ctes) + "\n"
        f"SELECT\n  {columns}\n"
        "FROM deduplicated\n"
        f"ORDER BY\n  {order_by}"
    )


__all__ = [
    "hierarchy",
    "concept_relationship",
    "synonym",
    "build_seed_cte",
    "build_relationship_query",
]
