"""Output contract for the ARIA data document

JSON Schema for the document written by the pipeline. Downstream consumers
read these keys directly, so the schema pins the top-level layout and the
shape of every role, attribute and mapping record.
"""

from typing import Any, Dict

from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

from aria_kb.core.exceptions import DatasetValidationError

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

_PROPERTY_ENTRY = {
    "type": "object",
    "required": ["name"],
    "properties": {"name": {"type": "string"}},
}

ROLE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": [
        "name", "description", "isAbstract", "superclassRoles", "subclassRoles",
        "relatedConcepts", "requiredContextRole", "requiredOwnedElements",
        "requiredStates", "supportedStates", "inheritedStates", "prohibitedStates",
        "nameFrom", "accessibleNameRequired", "childrenPresentational",
        "implicitValueForRole", "parentRoles", "localProps", "allProps", "category",
    ],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "description": {"type": "string"},
        "isAbstract": {"type": "boolean"},
        "superclassRoles": _STRING_LIST,
        "subclassRoles": _STRING_LIST,
        "relatedConcepts": _STRING_LIST,
        "requiredContextRole": _STRING_LIST,
        "requiredOwnedElements": _STRING_LIST,
        "requiredStates": _STRING_LIST,
        "supportedStates": _STRING_LIST,
        "inheritedStates": _STRING_LIST,
        "prohibitedStates": _STRING_LIST,
        "nameFrom": _STRING_LIST,
        "accessibleNameRequired": {"type": "boolean"},
        "childrenPresentational": {"type": "boolean"},
        "implicitValueForRole": {"type": "object", "additionalProperties": {"type": "string"}},
        "parentRoles": _STRING_LIST,
        "localProps": {"type": "array", "items": _PROPERTY_ENTRY},
        "allProps": {"type": "array", "items": _PROPERTY_ENTRY},
        "category": {
            "enum": ["abstract", "widget", "document", "landmark", "liveRegion", "window", "composite"]
        },
    },
}

ATTRIBUTE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": [
        "name", "type", "description", "valueType", "defaultValue", "applicableRoles",
        "inheritedIntoRoles", "relatedConcepts", "values", "isGlobal",
    ],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "type": {"enum": ["state", "property"]},
        "description": {"type": "string"},
        "valueType": {"type": "string"},
        "defaultValue": {"type": "string"},
        "applicableRoles": _STRING_LIST,
        "inheritedIntoRoles": _STRING_LIST,
        "relatedConcepts": _STRING_LIST,
        "values": _STRING_LIST,
        "isGlobal": {"type": "boolean"},
    },
}

MODULE_ROLE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["name", "module", "description"],
    "properties": {
        "name": {"type": "string"},
        "module": {"type": "string"},
        "description": {"type": "string"},
    },
}

DATASET_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": [
        "metadata", "roles", "roleCategories", "states", "properties",
        "globalStatesAndProperties", "htmlMappings", "extensions", "accname", "serverInfo",
    ],
    "additionalProperties": False,
    "properties": {
        "metadata": {
            "type": "object",
            "required": ["version", "generatedAt", "sourceUrl", "specUrl"],
            "properties": {
                "version": {"type": "string"},
                "generatedAt": {"type": "string"},
                "sourceUrl": {"type": "string"},
                "specUrl": {"type": "string"},
                "sources": _STRING_LIST,
            },
        },
        "roles": {"type": "object", "additionalProperties": ROLE_SCHEMA},
        "roleCategories": {"type": "object", "additionalProperties": _STRING_LIST},
        "states": {"type": "object", "additionalProperties": ATTRIBUTE_SCHEMA},
        "properties": {"type": "object", "additionalProperties": ATTRIBUTE_SCHEMA},
        "globalStatesAndProperties": _STRING_LIST,
        "htmlMappings": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["element", "implicitRole"],
                "properties": {
                    "element": {"type": "string"},
                    "implicitRole": {"type": "string"},
                },
            },
        },
        "extensions": {
            "type": "object",
            "additionalProperties": {"type": "object", "additionalProperties": MODULE_ROLE_SCHEMA},
        },
        "accname": {
            "oneOf": [
                {"type": "null"},
                {
                    "type": "object",
                    "required": ["title", "abstract", "specUrl"],
                    "properties": {
                        "title": {"type": "string"},
                        "abstract": {"type": "string"},
                        "specUrl": {"type": "string"},
                    },
                },
            ]
        },
        "serverInfo": {
            "type": "object",
            "required": ["name", "version", "description"],
        },
    },
}


def validate_dataset(document: Dict[str, Any]) -> None:
    """Check a dataset document against the output contract

    Raises:
        DatasetValidationError: describing the most relevant violation
    """
    validator = Draft7Validator(DATASET_SCHEMA)
    error = best_match(validator.iter_errors(document))
    if error is not None:
        path = "/".join(str(part) for part in error.absolute_path) or "<root>"
        raise DatasetValidationError(path, error.message)
