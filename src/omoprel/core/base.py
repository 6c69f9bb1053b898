"""Base classes for omoprel: result rows and relationship categories."""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..schemas import (
    MAPPING_COLUMNS,
    NULL_LEVELS_SORT_VALUE,
    RELATIONSHIP_COLUMNS,
    STANDARD_CONCEPT_FLAG,
)
from .errors import SchemaError
from .helpers import get_column, sql_literal


class RelCategory(Enum):
    """Kind of relationship a result row describes."""

    HIERARCHY_DESCENDANT = "HIERARCHY_DESCENDANT"
    HIERARCHY_ANCESTOR = "HIERARCHY_ANCESTOR"
    RELATIONSHIP = "RELATIONSHIP"
    SYNONYM = "SYNONYM"


class Direction(Enum):
    """How the related concept stands relative to the seed concept."""

    DESCENDANT_OF = "descendant_of"
    ANCESTOR_OF = "ancestor_of"
    OUTGOING = "outgoing"
    INCOMING = "incoming"
    SYNONYM_OF_SEED = "synonym_of_seed"


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def _nulls_last(value: Optional[str]) -> Tuple[bool, str]:
    return (value is None, value or "")


@dataclass(frozen=True)
class MappingRow:
    """One (ICD concept, mapped SNOMED concept) pair."""

    icd_concept_id: int
    icd_code: str
    icd_name: str
    icd_vocabulary: str
    snomed_concept_id: int
    snomed_code: str
    snomed_name: str

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "MappingRow":
        """Validate a raw executor row. Column lookup is case-insensitive."""
        values = {column: get_column(row, column) for column in MAPPING_COLUMNS}
        values["icd_concept_id"] = int(values["icd_concept_id"])
        values["snomed_concept_id"] = int(values["snomed_concept_id"])
        return cls(**values)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class RelationshipRow:
    """One related concept (or synonym) of a seed concept."""

    seed_concept_id: int
    seed_concept_name: str
    rel_category: RelCategory
    direction: Direction
    relationship_id: Optional[str]
    levels_of_separation: Optional[int]
    related_concept_id: int
    related_concept_name: str
    vocabulary_id: Optional[str]
    domain_id: Optional[str]
    standard_concept: Optional[str]
    invalid_reason: Optional[str]

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "RelationshipRow":
        """Validate a raw executor row. Column lookup is case-insensitive."""
        values = {column: get_column(row, column) for column in RELATIONSHIP_COLUMNS}
        try:
            values["rel_category"] = RelCategory(values["rel_category"])
            values["direction"] = Direction(values["direction"])
        except ValueError as e:
            raise SchemaError(f"Unexpected relationship row value: {e}") from e
        values["seed_concept_id"] = int(values["seed_concept_id"])
        values["related_concept_id"] = int(values["related_concept_id"])
        values["levels_of_separation"] = _optional_int(values["levels_of_separation"])
        return cls(**values)

    def sort_key(self) -> tuple:
        """Ordering key: category, direction, separation (999 if null), vocabulary, name."""
        levels = self.levels_of_separation
        return (
            self.rel_category.value,
            self.direction.value,
            NULL_LEVELS_SORT_VALUE if levels is None else levels,
            _nulls_last(self.vocabulary_id),
            _nulls_last(self.related_concept_name),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = asdict(self)
        result["rel_category"] = self.rel_category.value
        result["direction"] = self.direction.value
        return result


class RelationshipCategory(ABC):
    """Base class for the CTE builders unioned by the relationship query.

    Subclasses must define class attributes:
        cte_name: Name of the CTE (e.g., "descendants")
        rel_category: RelCategory emitted in every row
        direction: Direction emitted in every row
        description: What the category collects
        hierarchical: Whether only_direct applies (see direct_edge_filters)
        standard_filter: Whether only_standard applies to the related concept

    Subclasses must implement:
        build(cdm_schema, only_standard, only_direct) -> str
    """

    cte_name: str
    rel_category: RelCategory
    direction: Direction
    description: str
    hierarchical: bool = False
    standard_filter: bool = True

    @abstractmethod
    def build(self, cdm_schema: str, only_standard: bool = True, only_direct: bool = False) -> str:
        """Return the SELECT body of this category's CTE.

        The body reads the seed concepts from a CTE named ``seed`` and must
        emit RELATIONSHIP_COLUMNS in order.

        Args:
            cdm_schema: Validated schema holding the vocabulary tables
            only_standard: Keep only standard related concepts
            only_direct: Keep only direct parent/child hierarchy edges

        Returns:
            SQL text of the SELECT statement
        """
        pass

    def render_select(self, expressions: Dict[str, str]) -> str:
        """Render a SELECT list in RELATIONSHIP_COLUMNS order.

        rel_category and direction are filled in from the class attributes.
        """
        exprs = dict(expressions)
        exprs["rel_category"] = sql_literal(self.rel_category.value)
        exprs["direction"] = sql_literal(self.direction.value)
        width = max(len(exprs[c]) for c in RELATIONSHIP_COLUMNS)
        lines = [f"{exprs[c]:<{width}} AS {c}" for c in RELATIONSHIP_COLUMNS]
        return "SELECT\n  " + ",\n  ".join(lines)

    def related_concept_filters(self, alias: str, seed_alias: str, only_standard: bool) -> List[str]:
        """Predicates shared by the hierarchy and relationship categories."""
        filters = [
            f"{seed_alias}.concept_id <> {alias}.concept_id",
            f"{alias}.invalid_reason IS NULL",
        ]
        if only_standard and self.standard_filter:
            filters.append(f"{alias}.standard_concept = {sql_literal(STANDARD_CONCEPT_FLAG)}")
        return filters

    def direct_edge_filters(self, ancestor_alias: str, only_direct: bool) -> List[str]:
        """Predicates keeping only parent/child edges; empty unless hierarchical."""
        if only_direct and self.hierarchical:
            return [f"{ancestor_alias}.min_levels_of_separation = 1"]
        return []


__all__ = [
    "RelCategory",
    "Direction",
    "MappingRow",
    "RelationshipRow",
    "RelationshipCategory",
]
