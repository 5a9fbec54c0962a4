#!/usr/bin/env python3
"""
Inheritance Resolver

Computes each role's full property list from the structured roleInfo table.
The table may give a precomputed ``allprops`` list for a role, which is used
as-is; otherwise the role's ``localprops`` are extended with the resolved
properties of each parent, in declared parent order, skipping names already
present. The first entry seen for a property name wins.

Only roleInfo's ``parentRoles`` are followed. The prose ``superclassRoles``
extracted from the specification text are a separate signal and are never
consulted here.
"""

from typing import AbstractSet, Dict, FrozenSet, List, Mapping, Tuple

import networkx as nx

from aria_kb.core.data_models import PropertyEntry, Role
from aria_kb.core.logging_config import get_logger
from aria_kb.tools.role_info_parser import RoleInfoEntry

logger = get_logger(__name__)


class InheritanceResolver:
    """Resolve transitive role properties over the roleInfo parent graph"""

    def __init__(self, role_info: Mapping[str, RoleInfoEntry]):
        self.role_info = role_info
        self._graph = self.build_parent_graph()
        self._ancestors: Dict[str, FrozenSet[str]] = {}
        self._cache: Dict[Tuple[str, FrozenSet[str]], List[PropertyEntry]] = {}

    def _chain_key(self, role_name: str, visited: AbstractSet[str]) -> Tuple[str, FrozenSet[str]]:
        # Only chain members reachable through parents can change the result
        ancestors = self._ancestors.get(role_name)
        if ancestors is None:
            ancestors = frozenset(nx.descendants(self._graph, role_name))
            self._ancestors[role_name] = ancestors
        return role_name, frozenset(visited) & ancestors

    def resolve(self, role_name: str, visited: AbstractSet[str] = frozenset()) -> List[PropertyEntry]:
        """
        Resolve the full property list of a role.

        Args:
            role_name: Role to resolve
            visited: Roles already on the current resolution chain. Each
                recursive call receives its own extended copy, so sibling
                branches do not see each other's visits.

        Returns:
            Order-preserving list of property entries, unique by name. Empty
            for roles absent from the table or already on the chain.
        """
        if role_name in visited:
            return []

        entry = self.role_info.get(role_name)
        if entry is None:
            return []

        if entry.allprops is not None:
            return [dict(prop) for prop in entry.allprops]

        key = self._chain_key(role_name, visited)
        cached = self._cache.get(key)
        if cached is None:
            cached = self._collect(entry, visited | {role_name})
            self._cache[key] = cached
        return [dict(prop) for prop in cached]

    def _collect(self, entry: RoleInfoEntry, chain: AbstractSet[str]) -> List[PropertyEntry]:
        props: List[PropertyEntry] = []
        seen = set()

        def add(prop: PropertyEntry) -> None:
            if prop["name"] not in seen:
                seen.add(prop["name"])
                props.append(dict(prop))

        for prop in entry.localprops:
            add(prop)
        for parent_name in entry.parent_roles:
            for parent_prop in self.resolve(parent_name, chain):
                add(parent_prop)
        return props

    def apply(self, roles: Dict[str, Role]) -> int:
        """Fill parent_roles, local_props and all_props on known roles

        Roles are immutable, so each known role is replaced in ``roles`` by
        a resolved copy. Roles missing from the table keep their empty
        defaults.

        Returns:
            Number of roles that were found in the table
        """
        self.report_graph_problems()

        resolved = 0
        for role_name, role in list(roles.items()):
            entry = self.role_info.get(role_name)
            if entry is None:
                continue
            roles[role_name] = role.evolve(
                parent_roles=entry.parent_roles,
                local_props=entry.localprops,
                all_props=self.resolve(role_name),
            )
            resolved += 1
        return resolved

    def build_parent_graph(self) -> nx.DiGraph:
        """Directed graph with an edge role -> parent for every declared parent"""
        graph = nx.DiGraph()
        for role_name, entry in self.role_info.items():
            graph.add_node(role_name)
            for parent_name in entry.parent_roles:
                graph.add_edge(role_name, parent_name)
        return graph

    def report_graph_problems(self) -> List[List[str]]:
        """Warn about parent cycles and dangling parent references

        Resolution terminates regardless; this only surfaces bad source data.

        Returns:
            The cycles found, each as a list of role names
        """
        graph = self.build_parent_graph()

        cycles = [list(cycle) for cycle in nx.simple_cycles(graph)]
        for cycle in cycles:
            logger.warning(f"roleInfo parent cycle: {' -> '.join(cycle + cycle[:1])}")

        dangling = sorted(node for node in graph.nodes if node not in self.role_info)
        if dangling:
            logger.warning(f"roleInfo parents without entries: {', '.join(dangling)}")

        return cycles
