# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Import graph construction and ordering.

`ImportGraph.calculate()` traverses the imports of a root shader breadth
first, resolving every request and inserting one node per distinct module
and one edge per "A imports B" relation. The graph is kept acyclic: an edge
that would close a loop is rejected before it is added, and the offending
cycle is reported.

`ImportGraph.modules()` drains the graph into import order: every module
appears after all the modules it imports, and the root is excluded.

Graph storage and path search use networkx.
"""

import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

import networkx as nx

from .detectors.registry import DetectorRegistry, extract_import_requests
from .errors import ImportCycleError, InvariantViolation
from .models import Module
from .naming import reduced_names
from .resolver import ModuleResolver

logger = logging.getLogger(__name__)


def find_any_path(dag: "nx.DiGraph", start: Module, end: Module) -> List[Module]:
    """Find an arbitrary simple path between two nodes.

    Should only be called when such a path exists.
    """
    if start == end:
        return [start]
    try:
        return list(nx.shortest_path(dag, start, end))
    except nx.NetworkXNoPath as e:
        raise InvariantViolation(f"no path from `{start}` to `{end}` in import graph") from e


class ImportGraph:
    """All files required by a root module and the imports between them.

    Edges point from the importing module to the imported one. The graph is
    acyclic at all times.
    """

    def __init__(self, dag: "nx.DiGraph", root: Module):
        self._dag = dag
        self.root = root

    @classmethod
    def calculate(
        cls,
        root_module: Module,
        resolver: ModuleResolver,
        registry: Optional[DetectorRegistry] = None,
    ) -> "ImportGraph":
        """Given a root module, traverse the file system to find all imports.

        Args:
            root_module: Entry module of the pass.
            resolver: Resolver bound to the project root.
            registry: Detector registry used to extract requests. Defaults to
                the built-in detectors.

        Returns:
            The complete, acyclic import graph.

        Raises:
            ImportCycleError: On the first import that would close a cycle.
            UnresolvedImportError: On the first request that cannot be resolved.
        """
        dag = nx.DiGraph()

        search_front: Deque[Tuple[Optional[Module], Module]] = deque([(None, root_module)])
        while search_front:
            importing, imported = search_front.popleft()

            # First sighting allocates the node and schedules its text for scanning
            first_seen = imported not in dag
            if first_seen:
                dag.add_node(imported)

            if importing is not None:
                if importing not in dag:
                    raise InvariantViolation(
                        f"importer `{importing}` should be added before its imports"
                    )
                # The edge closes a cycle iff `imported` already reaches `importing`
                if nx.has_path(dag, imported, importing):
                    cycle_path = find_any_path(dag, imported, importing)
                    logger.debug(f"Rejected import {importing} -> {imported}: closes a cycle")
                    raise ImportCycleError(cycle_path)
                dag.add_edge(importing, imported)

            if not first_seen:
                continue

            source = imported.read_to_string()
            for request in sorted(extract_import_requests(source, registry)):
                import_ = resolver.resolve(imported, request)
                search_front.append((imported, import_))

        logger.debug(
            f"Import graph for {root_module}: {dag.number_of_nodes()} modules, "
            f"{dag.number_of_edges()} imports"
        )
        return cls(dag, root_module)

    def nodes(self) -> List[Module]:
        """All modules in discovery order, root first."""
        return list(self._dag.nodes)

    def edges(self) -> List[Tuple[Module, Module]]:
        """All (importer, imported) pairs."""
        return list(self._dag.edges)

    def imports_of(self, module: Module) -> List[Module]:
        """Modules directly imported by `module`."""
        return list(self._dag.successors(module))

    def __contains__(self, module: object) -> bool:
        return module in self._dag

    def __len__(self) -> int:
        return self._dag.number_of_nodes()

    def modules(self) -> List[Module]:
        """Give every module that needs to be imported, leaves first.

        Drains a copy of the graph, repeatedly removing a module that imports
        nothing still in the graph. The root is excluded from the result.

        Raises:
            InvariantViolation: If no removable module exists while modules remain.
        """
        dag = self._dag.copy()
        res: List[Module] = []

        while dag.number_of_nodes() > 0:
            removable = next((node for node in dag.nodes if dag.out_degree(node) == 0), None)
            if removable is None:
                raise InvariantViolation("DAGs must always have a node with no children")

            dag.remove_node(removable)
            # Don't need to import the root node
            if removable != self.root:
                res.append(removable)

        return res

    def reduced_names(self) -> Dict[Module, str]:
        """Short aliases for every module, unique across this graph."""
        return reduced_names(self.nodes())
