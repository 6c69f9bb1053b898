"""Registry of relationship categories unioned by the relationship query."""

from typing import Dict, List, Type

from .base import RelationshipCategory
from .errors import InvalidArgument

_registry: Dict[str, Type[RelationshipCategory]] = {}


def register(cls: Type[RelationshipCategory]) -> Type[RelationshipCategory]:
    """Decorator to register a relationship category class.

    Registration order is the order of the branches in the UNION.

    Usage:
        @register
        class MyCategory(RelationshipCategory):
            cte_name = "my_cte"
            ...
    """
    if not hasattr(cls, "cte_name"):
        raise ValueError(f"Category class {cls.__name__} must define 'cte_name' attribute")
    _registry[cls.cte_name] = cls
    return cls


def get_all_categories() -> List[Type[RelationshipCategory]]:
    """Return all registered category classes in registration order."""
    return list(_registry.values())


def get_category(cte_name: str) -> Type[RelationshipCategory]:
    """Get a specific category by CTE name.

    Args:
        cte_name: The CTE name (e.g., "descendants")

    Returns:
        The RelationshipCategory class

    Raises:
        InvalidArgument: If cte_name is not registered
    """
    if cte_name not in _registry:
        raise InvalidArgument(
            f"Relationship category '{cte_name}' not found. Available: {list(_registry.keys())}"
        )
    return _registry[cte_name]


def list_categories() -> Dict[str, str]:
    """List all registered categories with their descriptions.

    Returns:
        Dictionary mapping cte_name to description
    """
    return {cte_name: cls.description for cte_name, cls in _registry.items()}


__all__ = [
    "register",
    "get_all_categories",
    "get_category",
    "list_categories",
]
