"""Core Data Models - Typed records of the ARIA knowledge base

Records are pydantic models with snake_case attributes and the camelCase
JSON names downstream consumers read. Field declaration order is the JSON
key order of the output document, so do not reorder fields.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Dict, Mapping, Optional, Tuple

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer

# One entry of a role's localProps/allProps, carried verbatim from roleInfo:
# {"is": "property", "name": "aria-checked", "required": true, ...}
PropertyEntry = Dict[str, Any]


def _freeze(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


def _thaw(mapping: Mapping) -> Dict[str, Any]:
    return dict(mapping)


# Read-only mapping inside a frozen record, dumped as a plain dict
FrozenMapping = Annotated[Mapping[str, Any], AfterValidator(_freeze), PlainSerializer(_thaw)]

Names = Tuple[str, ...]


class RoleCategory(Enum):
    """Closed set of role categories"""
    ABSTRACT = "abstract"
    WIDGET = "widget"
    DOCUMENT = "document"
    LANDMARK = "landmark"
    LIVE_REGION = "liveRegion"
    WINDOW = "window"
    COMPOSITE = "composite"


class AttributeKind(Enum):
    STATE = "state"
    PROPERTY = "property"


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, validate_default=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON form used in the output document"""
        return self.model_dump(mode="json", by_alias=True)


class Role(_Record):
    """
    A role definition from the primary specification.

    The prose fields come from the role's characteristics table. The
    derived fields (parent_roles, local_props, all_props) are filled by the
    inheritance resolver from roleInfo, and category by the categorizer.
    Roles are frozen: pipeline stages derive updated copies with evolve().
    """
    name: str
    description: str = ""
    is_abstract: bool = Field(default=False, alias="isAbstract")
    superclass_roles: Names = Field(default_factory=tuple, alias="superclassRoles")
    subclass_roles: Names = Field(default_factory=tuple, alias="subclassRoles")
    related_concepts: Names = Field(default_factory=tuple, alias="relatedConcepts")
    required_context_role: Names = Field(default_factory=tuple, alias="requiredContextRole")
    required_owned_elements: Names = Field(default_factory=tuple, alias="requiredOwnedElements")
    required_states: Names = Field(default_factory=tuple, alias="requiredStates")
    supported_states: Names = Field(default_factory=tuple, alias="supportedStates")
    inherited_states: Names = Field(default_factory=tuple, alias="inheritedStates")
    prohibited_states: Names = Field(default_factory=tuple, alias="prohibitedStates")
    name_from: Names = Field(default_factory=tuple, alias="nameFrom")
    accessible_name_required: bool = Field(default=False, alias="accessibleNameRequired")
    children_presentational: bool = Field(default=False, alias="childrenPresentational")
    implicit_value_for_role: FrozenMapping = Field(default_factory=dict, alias="implicitValueForRole")

    parent_roles: Names = Field(default_factory=tuple, alias="parentRoles")
    local_props: Tuple[FrozenMapping, ...] = Field(default_factory=tuple, alias="localProps")
    all_props: Tuple[FrozenMapping, ...] = Field(default_factory=tuple, alias="allProps")
    category: Optional[RoleCategory] = None

    def evolve(self, **changes: Any) -> "Role":
        """Validated copy with some fields replaced"""
        return type(self).model_validate({**self.model_dump(), **changes})


class Attribute(_Record):
    """A state or property definition"""

    name: str
    kind: AttributeKind = Field(alias="type")
    description: str = ""
    value_type: str = Field(default="", alias="valueType")
    default_value: str = Field(default="", alias="defaultValue")
    applicable_roles: Names = Field(default_factory=tuple, alias="applicableRoles")
    inherited_into_roles: Names = Field(default_factory=tuple, alias="inheritedIntoRoles")
    related_concepts: Names = Field(default_factory=tuple, alias="relatedConcepts")
    values: Names = Field(default_factory=tuple)
    is_global: bool = Field(default=False, alias="isGlobal")


class ModuleRole(_Record):
    """A role contributed by an extension module, tagged with its module."""

    name: str
    module: str
    description: str = ""


class HtmlMapping(_Record):
    element: str
    implicit_role: str = Field(alias="implicitRole")


class AccNameSummary(_Record):
    title: str
    abstract: str = ""
    spec_url: str = Field(alias="specUrl")


@dataclass(frozen=True)
class Dataset:
    """The assembled knowledge base.

    Built once per run by the dataset assembler and read-only afterwards.
    Mappings are wrapped in MappingProxyType and sequences are tuples.
    """
    metadata: Mapping[str, Any]
    roles: Mapping[str, Role]
    role_categories: Mapping[str, Tuple[str, ...]]
    states: Mapping[str, Attribute]
    properties: Mapping[str, Attribute]
    global_states_and_properties: Tuple[str, ...]
    html_mappings: Mapping[str, HtmlMapping]
    extensions: Mapping[str, Mapping[str, ModuleRole]]
    accname: Optional[AccNameSummary]
    server_info: Mapping[str, Any]

    def __post_init__(self):
        object.__setattr__(self, "metadata", _freeze(self.metadata))
        object.__setattr__(self, "roles", _freeze(self.roles))
        object.__setattr__(self, "role_categories",
                           _freeze({k: tuple(v) for k, v in self.role_categories.items()}))
        object.__setattr__(self, "states", _freeze(self.states))
        object.__setattr__(self, "properties", _freeze(self.properties))
        object.__setattr__(self, "global_states_and_properties",
                           tuple(self.global_states_and_properties))
        object.__setattr__(self, "html_mappings", _freeze(self.html_mappings))
        object.__setattr__(self, "extensions",
                           _freeze({k: _freeze(v) for k, v in self.extensions.items()}))
        object.__setattr__(self, "server_info", _freeze(self.server_info))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the output document, top-level keys in contract order"""
        return {
            "metadata": dict(self.metadata),
            "roles": {name: role.to_dict() for name, role in self.roles.items()},
            "roleCategories": {cat: list(names) for cat, names in self.role_categories.items()},
            "states": {name: attr.to_dict() for name, attr in self.states.items()},
            "properties": {name: attr.to_dict() for name, attr in self.properties.items()},
            "globalStatesAndProperties": list(self.global_states_and_properties),
            "htmlMappings": {el: m.to_dict() for el, m in self.html_mappings.items()},
            "extensions": {
                module: {name: role.to_dict() for name, role in roles.items()}
                for module, roles in self.extensions.items()
            },
            "accname": self.accname.to_dict() if self.accname else None,
            "serverInfo": dict(self.server_info),
        }
