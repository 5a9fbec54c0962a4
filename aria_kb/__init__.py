"""ARIA knowledge base builder

Extracts roles, states and properties from the WAI-ARIA specification
documents, resolves role property inheritance and writes one JSON dataset.
"""

__version__ = "1.0.0"
