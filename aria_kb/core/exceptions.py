"""
Custom exceptions for the ARIA knowledge base pipeline.

Only PrimaryDocumentError is allowed to reach the top level of a run.
Everything else is caught where it is detected and turned into an empty
contribution or a default value.
"""

from typing import Optional


class AriaKBError(Exception):
    """Base exception for all pipeline errors."""
    pass


class ConfigurationError(AriaKBError):
    """Raised when the pipeline configuration is invalid."""
    pass


class PrimaryDocumentError(AriaKBError):
    """Raised when the primary ARIA specification cannot be loaded."""
    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"Primary specification document unavailable: {path}")


class UnknownSourceError(AriaKBError):
    """Raised when a source identifier is not in the source registry."""
    def __init__(self, source_id: str):
        self.source_id = source_id
        super().__init__(f"Unknown document source '{source_id}'")


class RoleInfoSyntaxError(AriaKBError):
    """Raised by the role-info literal parser on malformed input."""
    def __init__(self, message: str, line: int, column: int):
        self.line = line
        self.column = column
        super().__init__(f"roleInfo syntax error at line {line}, column {column}: {message}")


class DatasetValidationError(AriaKBError):
    """Raised when the assembled dataset violates the output contract."""
    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Dataset does not match output contract at '{path}': {message}")
