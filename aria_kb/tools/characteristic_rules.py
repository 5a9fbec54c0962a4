"""
Characteristics table rules

Each row of a role or attribute characteristics table is dispatched by its
header text to exactly one rule. Rules are checked in list order and the
first rule with a phrase contained in the lower-cased header wins, so the
order of ROLE_RULES and ATTRIBUTE_RULES matters: "required state" must be
tried before "supported state" and so on.

A rule writes into a draft dict keyed by the record's field names; the
extractor turns the finished draft into a Role or Attribute.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from bs4 import Tag

from aria_kb.tools.html_utils import cells_text, referenced_names

Draft = Dict[str, Any]
CellSetter = Callable[[Draft, List[Tag]], None]

ROLE_REFS = "rref, a"
ATTRIBUTE_REFS = "sref, pref, a"
CONCEPT_REFS = "a, code"

_IMPLICIT_VALUE = re.compile(r"([a-z-]+)\s*:\s*([^;,]+)", re.IGNORECASE)
_ENUMERATED_TOKENS = re.compile(r"token(?:s)?\s*:?\s*([^|]+(?:\|[^|]+)*)", re.IGNORECASE)
_ALL_ELEMENTS = re.compile(r"\b(?:all|any)\s+elements?\b", re.IGNORECASE)
_NAME_FROM_SEPARATORS = re.compile(r"[,\s]+")


@dataclass(frozen=True)
class CharacteristicRule:
    """Header predicate plus the setter that fills one field"""
    field: str
    phrases: Tuple[str, ...]
    setter: CellSetter

    def matches(self, header: str) -> bool:
        return any(phrase in header for phrase in self.phrases)

    def apply(self, draft: Draft, cells: List[Tag]) -> None:
        self.setter(draft, cells)


def match_rule(rules: Sequence[CharacteristicRule], header: str) -> Optional[CharacteristicRule]:
    """First rule whose predicate accepts the (lower-cased) header"""
    for rule in rules:
        if rule.matches(header):
            return rule
    return None


# --- value parsers -----------------------------------------------------------

def parse_bool(text: str) -> bool:
    """True only when the cell holds the token 'true' (any case)"""
    return "true" in text.lower().split()


def parse_name_from(text: str) -> List[str]:
    return [token for token in _NAME_FROM_SEPARATORS.split(text) if token]


def parse_implicit_values(text: str) -> Dict[str, str]:
    """Parse 'aria-live: assertive; aria-atomic: true' style cells

    Fragments that do not look like ``name: value`` are dropped.
    """
    values: Dict[str, str] = {}
    for match in _IMPLICIT_VALUE.finditer(text):
        name, value = match.group(1).strip(), match.group(2).strip()
        if value:
            values[name] = value
    return values


def parse_enumerated_values(value_type: str) -> List[str]:
    """Token list of a value type such as 'token: polite | assertive | off'"""
    match = _ENUMERATED_TOKENS.search(value_type)
    if not match:
        return []
    return [token.strip() for token in match.group(1).split("|") if token.strip()]


def signals_all_elements(text: str) -> bool:
    """Whether an applicability cell says the attribute applies everywhere"""
    return bool(_ALL_ELEMENTS.search(text))


# --- setters -----------------------------------------------------------------

def _refs(field: str, selector: str) -> CellSetter:
    def setter(draft: Draft, cells: List[Tag]) -> None:
        draft[field] = referenced_names(cells, selector)
    return setter


def _flag(field: str) -> CellSetter:
    def setter(draft: Draft, cells: List[Tag]) -> None:
        draft[field] = parse_bool(cells_text(cells))
    return setter


def _text(field: str) -> CellSetter:
    def setter(draft: Draft, cells: List[Tag]) -> None:
        draft[field] = cells_text(cells)
    return setter


def _set_name_from(draft: Draft, cells: List[Tag]) -> None:
    draft["name_from"] = parse_name_from(cells_text(cells))


def _set_implicit_values(draft: Draft, cells: List[Tag]) -> None:
    draft["implicit_value_for_role"] = parse_implicit_values(cells_text(cells))


def _set_value_type(draft: Draft, cells: List[Tag]) -> None:
    value_type = cells_text(cells)
    draft["value_type"] = value_type
    values = parse_enumerated_values(value_type)
    if values:
        draft["values"] = values


def _set_applicability(draft: Draft, cells: List[Tag]) -> None:
    draft["applicable_roles"] = referenced_names(cells, ROLE_REFS)
    if signals_all_elements(cells_text(cells)):
        draft["is_global"] = True


def _rule(field: str, phrases: Tuple[str, ...], setter: CellSetter) -> CharacteristicRule:
    return CharacteristicRule(field=field, phrases=phrases, setter=setter)


ROLE_RULES: Tuple[CharacteristicRule, ...] = (
    _rule("superclass_roles", ("superclass",), _refs("superclass_roles", ROLE_REFS)),
    _rule("subclass_roles", ("subclass",), _refs("subclass_roles", ROLE_REFS)),
    _rule("related_concepts", ("related concept",), _refs("related_concepts", CONCEPT_REFS)),
    _rule("required_context_role", ("required context",), _refs("required_context_role", ROLE_REFS)),
    _rule("required_owned_elements", ("required owned", "required children"),
          _refs("required_owned_elements", ROLE_REFS)),
    _rule("required_states", ("required state", "required properties"),
          _refs("required_states", ATTRIBUTE_REFS)),
    _rule("supported_states", ("supported state", "supported properties"),
          _refs("supported_states", ATTRIBUTE_REFS)),
    _rule("inherited_states", ("inherited state",), _refs("inherited_states", ATTRIBUTE_REFS)),
    _rule("prohibited_states", ("prohibited state", "prohibited properties"),
          _refs("prohibited_states", ATTRIBUTE_REFS)),
    _rule("name_from", ("name from",), _set_name_from),
    _rule("accessible_name_required", ("accessible name required",),
          _flag("accessible_name_required")),
    _rule("children_presentational", ("children are presentational", "children presentational"),
          _flag("children_presentational")),
    _rule("is_abstract", ("is abstract",), _flag("is_abstract")),
    _rule("implicit_value_for_role", ("implicit value",), _set_implicit_values),
)

# "default value" has to be claimed before the generic "value" rule
ATTRIBUTE_RULES: Tuple[CharacteristicRule, ...] = (
    _rule("default_value", ("default",), _text("default_value")),
    _rule("value_type", ("value type", "value"), _set_value_type),
    _rule("applicable_roles", ("used in role", "applicable to"), _set_applicability),
    _rule("inherited_into_roles", ("inherited into", "inherits into"),
          _refs("inherited_into_roles", ROLE_REFS)),
    _rule("related_concepts", ("related concept",), _refs("related_concepts", CONCEPT_REFS)),
)
