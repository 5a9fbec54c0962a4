"""
Dataset Assembler

Combines the outputs of every stage into the immutable Dataset, computes
the global attribute index and stamps the metadata envelope.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional

from aria_kb.core.config_loader import PipelineSettings
from aria_kb.core.data_models import (
    AccNameSummary,
    Attribute,
    Dataset,
    HtmlMapping,
    ModuleRole,
    Role,
)


def global_attribute_names(*attribute_maps: Mapping[str, Attribute]) -> List[str]:
    """Sorted names of attributes that apply to all elements"""
    names = set()
    for attributes in attribute_maps:
        names.update(name for name, attr in attributes.items() if attr.is_global)
    return sorted(names)


class DatasetAssembler:
    """Builds the final Dataset from stage results"""

    def __init__(self, settings: PipelineSettings):
        self.settings = settings

    def build_metadata(self, sources: Iterable[str],
                       generated_at: Optional[datetime] = None) -> Dict[str, object]:
        generated_at = generated_at or datetime.now(timezone.utc)
        meta = self.settings.metadata
        return {
            "version": meta.version,
            "generatedAt": generated_at.isoformat().replace("+00:00", "Z"),
            "sourceUrl": meta.source_url,
            "specUrl": meta.spec_url,
            "sources": sorted(set(sources)),
        }

    def assemble(
        self,
        roles: Dict[str, Role],
        role_categories: Dict[str, List[str]],
        states: Dict[str, Attribute],
        properties: Dict[str, Attribute],
        html_mappings: Dict[str, HtmlMapping],
        extensions: Dict[str, Dict[str, ModuleRole]],
        accname: Optional[AccNameSummary],
        sources: Iterable[str],
        generated_at: Optional[datetime] = None,
    ) -> Dataset:
        """
        Assemble the dataset.

        Args:
            roles: Primary roles, already resolved and categorized
            role_categories: Category index from the categorizer
            states: State attributes
            properties: Property attributes
            html_mappings: Element -> implicit role mappings
            extensions: Module key -> module roles
            accname: AccName summary, or None when the document was absent
            sources: Identifiers of the sources that were loaded
            generated_at: Assembly timestamp, defaults to now (UTC)
        """
        return Dataset(
            metadata=self.build_metadata(sources, generated_at),
            roles=roles,
            role_categories=role_categories,
            states=states,
            properties=properties,
            global_states_and_properties=global_attribute_names(states, properties),
            html_mappings=html_mappings,
            extensions=extensions,
            accname=accname,
            server_info=self.settings.server_info.model_dump(),
        )
