"""Tests for role categorization"""

import pytest

from aria_kb.core.category_constants import DOCUMENT_ROLE_NAMES
from aria_kb.core.data_models import Role, RoleCategory
from aria_kb.services.role_categorizer import categorize_role, categorize_roles


@pytest.mark.parametrize("name, category", [
    ("roletype", RoleCategory.ABSTRACT),
    ("banner", RoleCategory.LANDMARK),
    ("alert", RoleCategory.LIVE_REGION),
    ("dialog", RoleCategory.WINDOW),
    ("alertdialog", RoleCategory.WINDOW),
    ("tablist", RoleCategory.COMPOSITE),
    ("button", RoleCategory.WIDGET),
    ("article", RoleCategory.DOCUMENT),
    ("doc-unknown", RoleCategory.DOCUMENT),
])
def test_categorize_by_name(name, category):
    assert categorize_role(Role(name=name)) is category


@pytest.mark.parametrize("name", sorted(DOCUMENT_ROLE_NAMES))
def test_document_roles_fall_back_to_document(name):
    assert categorize_role(Role(name=name)) is RoleCategory.DOCUMENT


def test_abstract_flag_wins_over_lists():
    assert categorize_role(Role(name="button", is_abstract=True)) is RoleCategory.ABSTRACT


def test_abstract_list_without_flag():
    assert categorize_role(Role(name="window", is_abstract=False)) is RoleCategory.ABSTRACT


def test_index_has_every_category_in_order():
    roles = {name: Role(name=name) for name in ["switch", "checkbox", "main"]}
    index = categorize_roles(roles)

    assert list(index) == [
        "abstract", "widget", "document", "landmark", "liveRegion", "window", "composite",
    ]
    assert index["widget"] == ["switch", "checkbox"]
    assert index["landmark"] == ["main"]
    assert index["composite"] == []


def test_each_role_in_exactly_one_category():
    names = ["roletype", "button", "banner", "status", "dialog", "menu", "paragraph"]
    roles = {name: Role(name=name) for name in names}
    index = categorize_roles(roles)

    listed = [name for members in index.values() for name in members]
    assert sorted(listed) == sorted(names)
    for name, role in roles.items():
        assert name in index[role.category.value]
