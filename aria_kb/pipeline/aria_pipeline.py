#!/usr/bin/env python3
"""ARIA Pipeline - Specification HTML -> Records -> Resolved Dataset -> JSON"""

import json
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from aria_kb.core.config_loader import PipelineSettings
from aria_kb.core.data_models import Dataset
from aria_kb.core.logging_config import get_logger, log_stage_count
from aria_kb.pipeline.dataset_assembler import DatasetAssembler
from aria_kb.pipeline.dataset_schema import validate_dataset
from aria_kb.services.cross_document_merger import CrossDocumentMerger
from aria_kb.services.inheritance_resolver import InheritanceResolver
from aria_kb.services.role_categorizer import categorize_roles
from aria_kb.tools.document_loader import ROLE_INFO_SOURCE, DocumentLoader
from aria_kb.tools.entity_extractor import AttributeExtractor, RoleExtractor, split_by_kind
from aria_kb.tools.role_info_parser import load_role_info_table

logger = get_logger(__name__)


class AriaPipeline:
    """Full batch run: load, extract, resolve, categorize, merge, assemble"""

    def __init__(self, settings: PipelineSettings):
        self.settings = settings
        self.loader = DocumentLoader(settings)
        self.assembler = DatasetAssembler(settings)

    def run(self) -> Dataset:
        """Run every stage and return the assembled dataset

        Raises:
            PrimaryDocumentError: when the primary specification is unusable.
                This is the only error that stops a run.
        """
        logger.info("Parsing ARIA Specification...")
        soup = self.loader.load_primary()

        logger.info("Parsing roles...")
        roles = RoleExtractor().extract(soup)
        log_stage_count(logger, "roles", len(roles))

        logger.info("Parsing states and properties...")
        states, properties = split_by_kind(AttributeExtractor().extract(soup))
        log_stage_count(logger, "states", len(states))
        log_stage_count(logger, "properties", len(properties))

        logger.info("Parsing roleInfo.js...")
        role_info = load_role_info_table(
            self.loader.load_text(ROLE_INFO_SOURCE),
            self.settings.parsing.role_info_variable,
        )
        log_stage_count(logger, "role entries", len(role_info))
        resolved = InheritanceResolver(role_info).apply(roles)
        logger.debug(f"Resolved inherited properties for {resolved} roles")

        logger.info("Categorizing roles...")
        role_categories = categorize_roles(roles)

        merger = CrossDocumentMerger(self.loader, self.settings)
        accname = merger.merge_accname()
        html_mappings = merger.merge_html_mappings()
        extensions = merger.merge_extensions()

        return self.assembler.assemble(
            roles=roles,
            role_categories=role_categories,
            states=states,
            properties=properties,
            html_mappings=html_mappings,
            extensions=extensions,
            accname=accname,
            sources=self.loader.loaded_sources,
        )

    def serialize(self, dataset: Dataset) -> str:
        document = dataset.to_dict()
        if self.settings.output.validate_schema:
            validate_dataset(document)
        return json.dumps(document, indent=self.settings.output.indent, ensure_ascii=False)

    def build(self, output_path: Optional[Union[str, Path]] = None) -> Path:
        """Run the pipeline and write the JSON document

        Nothing is written unless the whole run succeeds; an existing
        output file is only replaced by a complete new one.
        """
        start_time = time.time()
        output_path = Path(output_path or self.settings.paths.output_file)

        dataset = self.run()
        write_atomic(output_path, self.serialize(dataset))
        logger.debug(f"Section counts: {summarize(dataset)}")

        logger.info(f"Generated {output_path} in {time.time() - start_time:.2f}s")
        return output_path


def write_atomic(path: Path, content: str) -> None:
    """Write text to ``path`` through a temporary file and a rename"""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def summarize(dataset: Dataset) -> Dict[str, Any]:
    """Counts per section, used for the end-of-run summary"""
    return {
        "roles": len(dataset.roles),
        "states": len(dataset.states),
        "properties": len(dataset.properties),
        "global": len(dataset.global_states_and_properties),
        "html_mappings": len(dataset.html_mappings),
        "extensions": {key: len(roles) for key, roles in dataset.extensions.items()},
    }
