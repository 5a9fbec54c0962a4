#!/usr/bin/env python3
"""
Cross-Document Merger

Collects what the companion documents add to the primary specification:

- extension-module roles (DPUB-ARIA, Graphics-ARIA), kept in one mapping per
  module and never mixed into the primary role map
- HTML-AAM element to implicit-role mappings
- the AccName document summary

A missing document, or one without the expected structure, contributes an
empty result and a warning.
"""

from typing import Dict, Optional

from bs4 import BeautifulSoup

from aria_kb.core.config_loader import PipelineSettings
from aria_kb.core.data_models import AccNameSummary, HtmlMapping, ModuleRole
from aria_kb.core.logging_config import get_logger, log_stage_count
from aria_kb.tools.document_loader import (
    ACCNAME_SOURCE,
    HTML_AAM_SOURCE,
    DocumentLoader,
    extension_source_id,
)
from aria_kb.tools.entity_extractor import extract_module_roles
from aria_kb.tools.html_utils import clean_text, tag_text

logger = get_logger(__name__)

MAPPING_CAPTION_PHRASES = ("html element", "role mapping")
DEFAULT_ACCNAME_TITLE = "Accessible Name and Description Computation"


def extract_html_mappings(soup: BeautifulSoup) -> Dict[str, HtmlMapping]:
    """Element -> implicit role pairs from the recognised mapping tables

    Rows are read in document order and a later row for the same element
    replaces the earlier one.
    """
    mappings: Dict[str, HtmlMapping] = {}
    matched_tables = 0

    for table in soup.find_all("table"):
        caption = tag_text(table.find("caption")).lower()
        if not any(phrase in caption for phrase in MAPPING_CAPTION_PHRASES):
            continue
        matched_tables += 1

        # html.parser does not synthesize tbody
        rows = table.select("tbody tr") or [tr for tr in table.find_all("tr") if tr.find("td")]
        for row in rows:
            cells = row.find_all(["td", "th"])
            if len(cells) < 2:
                continue
            element = clean_text(cells[0].get_text())
            implicit_role = clean_text(cells[1].get_text())
            if element and implicit_role:
                mappings[element] = HtmlMapping(element=element, implicit_role=implicit_role)

    if not matched_tables:
        logger.warning("No HTML element mapping tables found in HTML-AAM")
    return mappings


def extract_accname_summary(soup: BeautifulSoup, spec_url: str) -> AccNameSummary:
    return AccNameSummary(
        title=tag_text(soup.find("title")) or DEFAULT_ACCNAME_TITLE,
        abstract=tag_text(soup.find(id="abstract")),
        spec_url=spec_url,
    )


class CrossDocumentMerger:
    """Gathers the contributions of the optional companion documents"""

    def __init__(self, loader: DocumentLoader, settings: PipelineSettings):
        self.loader = loader
        self.settings = settings

    def merge_extensions(self) -> Dict[str, Dict[str, ModuleRole]]:
        """Module key -> that module's roles, one isolated mapping per module"""
        extensions: Dict[str, Dict[str, ModuleRole]] = {}
        for module_key, module in self.settings.extensions.items():
            logger.info(f"Parsing {module.label}...")
            soup = self.loader.load_document(extension_source_id(module_key))
            roles = extract_module_roles(soup, module.label) if soup is not None else {}
            log_stage_count(logger, f"{module.label} roles", len(roles))
            extensions[module_key] = roles
        return extensions

    def merge_html_mappings(self) -> Dict[str, HtmlMapping]:
        logger.info("Parsing HTML-AAM...")
        soup = self.loader.load_document(HTML_AAM_SOURCE)
        mappings = extract_html_mappings(soup) if soup is not None else {}
        log_stage_count(logger, "HTML element mappings", len(mappings))
        return mappings

    def merge_accname(self) -> Optional[AccNameSummary]:
        logger.info("Parsing AccName...")
        soup = self.loader.load_document(ACCNAME_SOURCE)
        if soup is None:
            return None
        return extract_accname_summary(soup, self.settings.metadata.accname_spec_url)
