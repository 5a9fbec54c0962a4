"""
Document Loader - reads the named ARIA source documents

Resolves source identifiers through the configured source registry and
parses HTML sources with BeautifulSoup. The primary specification is
required; every other source is optional and its absence only produces a
warning and a ``None`` result.
"""

from pathlib import Path
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from aria_kb.core.config_loader import PipelineSettings
from aria_kb.core.exceptions import PrimaryDocumentError, UnknownSourceError
from aria_kb.core.logging_config import get_logger

logger = get_logger(__name__)

PRIMARY_SOURCE = "primary"
ROLE_INFO_SOURCE = "role_info"
HTML_AAM_SOURCE = "html_aam"
ACCNAME_SOURCE = "accname"


class DocumentLoader:
    """Loads source documents from the ARIA data directory"""

    def __init__(self, settings: PipelineSettings):
        self.settings = settings
        self.aria_dir = settings.paths.aria_dir
        self.parser = settings.parsing.html_parser
        self.encoding = settings.parsing.encoding
        self.registry = self._build_registry()
        self.loaded_sources: List[str] = []

    def _build_registry(self) -> Dict[str, str]:
        """Map every source identifier to its path relative to aria_dir"""
        sources = self.settings.sources
        registry = {
            PRIMARY_SOURCE: sources.primary,
            ROLE_INFO_SOURCE: sources.role_info,
            HTML_AAM_SOURCE: sources.html_aam,
            ACCNAME_SOURCE: sources.accname,
        }
        for module_key, module in self.settings.extensions.items():
            registry[extension_source_id(module_key)] = module.path
        return registry

    def source_path(self, source_id: str) -> Path:
        """Absolute path of a registered source"""
        try:
            relative = self.registry[source_id]
        except KeyError:
            raise UnknownSourceError(source_id) from None
        return self.aria_dir / relative

    def load_primary(self) -> BeautifulSoup:
        """Load and parse the primary ARIA specification

        Raises:
            PrimaryDocumentError: if the document is missing, unreadable or
                does not parse into an HTML document
        """
        path = self.source_path(PRIMARY_SOURCE)
        if not path.is_file():
            raise PrimaryDocumentError(str(path), f"ARIA index.html not found at: {path}")

        try:
            html = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise PrimaryDocumentError(str(path), f"Failed to read {path}: {e}") from e

        soup = BeautifulSoup(html, self.parser)
        if soup.find(["html", "body", "div"]) is None:
            raise PrimaryDocumentError(str(path), f"No HTML content found in {path}")

        self._mark_loaded(PRIMARY_SOURCE)
        return soup

    def load_document(self, source_id: str) -> Optional[BeautifulSoup]:
        """Load and parse an optional HTML source, ``None`` when unavailable"""
        html = self.load_text(source_id)
        if html is None:
            return None
        return BeautifulSoup(html, self.parser)

    def load_text(self, source_id: str) -> Optional[str]:
        """Read an optional source as text, ``None`` when unavailable"""
        path = self.source_path(source_id)
        if not path.is_file():
            logger.warning(f"{self.registry[source_id]} not found, skipping")
            return None

        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path}: {e}")
            return None

        self._mark_loaded(source_id)
        return text

    def _mark_loaded(self, source_id: str) -> None:
        if source_id not in self.loaded_sources:
            self.loaded_sources.append(source_id)


def extension_source_id(module_key: str) -> str:
    """Source identifier of an extension module document"""
    return f"extension:{module_key}"
