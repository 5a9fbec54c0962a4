"""
Entity Extractor - roles, states and properties from the ARIA specification

Every definition block (``div.role``, ``div.state``, ``div.property``) with an
``id`` becomes one record. Fields come from the block's characteristics table
(``table.def``) through the ordered rule tables in characteristic_rules.
"""

from typing import Dict, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from aria_kb.core.data_models import Attribute, AttributeKind, ModuleRole, Role
from aria_kb.core.logging_config import get_logger
from aria_kb.tools.characteristic_rules import (
    ATTRIBUTE_RULES,
    ROLE_RULES,
    CharacteristicRule,
    Draft,
    match_rule,
)
from aria_kb.tools.html_utils import clean_text, tag_text

logger = get_logger(__name__)

ROLE_BLOCK = "div.role"
ATTRIBUTE_BLOCK = "div.state, div.property"
CHARACTERISTICS_ROWS = "table.def tr"


def apply_characteristics(block: Tag, rules: Sequence[CharacteristicRule], draft: Draft) -> None:
    """Fill ``draft`` from the characteristics rows of a definition block

    Rows without a recognised header are ignored. A row feeds at most one
    field: the first matching rule's.
    """
    for row in block.select(CHARACTERISTICS_ROWS):
        header = clean_text(" ".join(th.get_text() for th in row.find_all("th"))).lower()
        rule = match_rule(rules, header)
        if rule is None:
            continue
        rule.apply(draft, row.find_all("td"))


class RoleExtractor:
    """Extract Role records from a parsed specification"""

    def extract(self, soup: BeautifulSoup) -> Dict[str, Role]:
        roles: Dict[str, Role] = {}
        for block in soup.select(ROLE_BLOCK):
            role_id = block.get("id")
            if not role_id:
                logger.debug("Skipping role block without id")
                continue

            draft: Draft = {
                "name": role_id,
                "description": tag_text(block.select_one(".role-description")),
            }
            apply_characteristics(block, ROLE_RULES, draft)
            roles[role_id] = Role.model_validate(draft)
        return roles


class AttributeExtractor:
    """Extract state and property records from a parsed specification"""

    def extract(self, soup: BeautifulSoup) -> Dict[str, Attribute]:
        attributes: Dict[str, Attribute] = {}
        for block in soup.select(ATTRIBUTE_BLOCK):
            attr_id = block.get("id")
            if not attr_id:
                logger.debug("Skipping state/property block without id")
                continue

            kind = AttributeKind.STATE if "state" in block.get("class", []) else AttributeKind.PROPERTY
            draft: Draft = {
                "name": attr_id,
                "kind": kind,
                "description": tag_text(
                    block.select_one(".state-description, .property-description")
                ),
            }
            apply_characteristics(block, ATTRIBUTE_RULES, draft)
            attributes[attr_id] = Attribute.model_validate(draft)
        return attributes


def extract_module_roles(soup: BeautifulSoup, module_label: str) -> Dict[str, ModuleRole]:
    """Role identifiers and descriptions of an extension module document"""
    roles: Dict[str, ModuleRole] = {}
    for block in soup.select(ROLE_BLOCK):
        role_id = block.get("id")
        if not role_id:
            continue
        roles[role_id] = ModuleRole(
            name=role_id,
            module=module_label,
            description=tag_text(block.select_one(".role-description")),
        )
    return roles


def split_by_kind(attributes: Dict[str, Attribute]) -> Tuple[Dict[str, Attribute], Dict[str, Attribute]]:
    """Split attributes into (states, properties), keeping document order"""
    states = {n: a for n, a in attributes.items() if a.kind is AttributeKind.STATE}
    properties = {n: a for n, a in attributes.items() if a.kind is AttributeKind.PROPERTY}
    return states, properties
