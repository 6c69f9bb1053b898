"""omoprel query builders.

Builders are pure: they validate their inputs and return SQL text. They
never touch a connection.
"""

from .mapping import build_icd_to_snomed_query
from .relationships import build_relationship_query

__all__ = ["build_icd_to_snomed_query", "build_relationship_query"]
