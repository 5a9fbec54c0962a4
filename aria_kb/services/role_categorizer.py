"""
Role Categorizer

Assigns every role exactly one RoleCategory. Checks run in a fixed order
and the first hit decides:

    abstract flag or abstract list -> landmark -> liveRegion -> window
    -> composite -> widget -> document (fallback)
"""

from typing import Callable, Dict, List, Tuple

from aria_kb.core.category_constants import (
    ABSTRACT_ROLE_NAMES,
    COMPOSITE_ROLE_NAMES,
    LANDMARK_ROLE_NAMES,
    LIVE_REGION_ROLE_NAMES,
    WIDGET_ROLE_NAMES,
    WINDOW_ROLE_NAMES,
)
from aria_kb.core.data_models import Role, RoleCategory

CATEGORY_RULES: Tuple[Tuple[RoleCategory, Callable[[Role], bool]], ...] = (
    (RoleCategory.ABSTRACT, lambda role: role.is_abstract or role.name in ABSTRACT_ROLE_NAMES),
    (RoleCategory.LANDMARK, lambda role: role.name in LANDMARK_ROLE_NAMES),
    (RoleCategory.LIVE_REGION, lambda role: role.name in LIVE_REGION_ROLE_NAMES),
    (RoleCategory.WINDOW, lambda role: role.name in WINDOW_ROLE_NAMES),
    (RoleCategory.COMPOSITE, lambda role: role.name in COMPOSITE_ROLE_NAMES),
    (RoleCategory.WIDGET, lambda role: role.name in WIDGET_ROLE_NAMES),
)

# Key order of the roleCategories section of the output
CATEGORY_INDEX_ORDER: Tuple[RoleCategory, ...] = (
    RoleCategory.ABSTRACT,
    RoleCategory.WIDGET,
    RoleCategory.DOCUMENT,
    RoleCategory.LANDMARK,
    RoleCategory.LIVE_REGION,
    RoleCategory.WINDOW,
    RoleCategory.COMPOSITE,
)


def categorize_role(role: Role) -> RoleCategory:
    for category, predicate in CATEGORY_RULES:
        if predicate(role):
            return category
    return RoleCategory.DOCUMENT


def categorize_roles(roles: Dict[str, Role]) -> Dict[str, List[str]]:
    """Categorize every role in place and build the category index

    Each role in ``roles`` is replaced by a copy with ``category`` set.

    Returns:
        Category value -> role names in role order, with every category key
        present even when empty
    """
    index: Dict[str, List[str]] = {category.value: [] for category in CATEGORY_INDEX_ORDER}
    for role_name, role in list(roles.items()):
        category = categorize_role(role)
        roles[role_name] = role.evolve(category=category)
        index[category.value].append(role_name)
    return index
