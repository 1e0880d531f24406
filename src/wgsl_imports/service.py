# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Resolution service for WGSL entry points.

This module holds the business logic the CLI and watch mode delegate to:
- Entry point validation with user-facing diagnostics
- One independent resolution pass per entry point
- Import order, aliases and composition units for the downstream composer
- JSON-compatible export of a pass

Each call to `resolve()` builds its own graph and alias index; nothing is
shared between passes, so independent passes may run concurrently.
"""

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from . import __version__
from .config import Config
from .detectors.registry import DetectorRegistry
from .errors import EntryPointError, ImportedDefineError, ImportResolutionError
from .files import WGSL_EXTENSION
from .import_graph import ImportGraph
from .logging_setup import entry_context
from .models import CompositionUnit, Module
from .resolver import ModuleResolver
from .rewriter import contains_define, processed_source

logger = logging.getLogger(__name__)


class ResolvedImports:
    """Result of one resolution pass.

    Gives the import order and the alias of every module. Both are computed
    once, on first access, from the final graph of the pass.
    """

    def __init__(self, entry: str, graph: ImportGraph, resolver: ModuleResolver):
        self.entry = entry
        self.graph = graph
        self.resolver = resolver
        self._order: Optional[List[Module]] = None
        self._names: Optional[Dict[Module, str]] = None

    @property
    def root(self) -> Module:
        return self.graph.root

    @property
    def project_root(self) -> Path:
        return self.resolver.project_root

    def modules(self) -> List[Module]:
        """Modules to register, dependencies first, root excluded."""
        if self._order is None:
            self._order = self.graph.modules()
        return list(self._order)

    def names(self) -> Dict[Module, str]:
        """Alias of every module in the pass, root included."""
        if self._names is None:
            self._names = self.graph.reduced_names()
        return dict(self._names)

    def alias_of(self, module: Module) -> str:
        return self.names()[module]

    def composition_units(self, forbid_imported_defines: bool = True) -> Iterator[CompositionUnit]:
        """Yield every imported module ready for the composer, in import order.

        Args:
            forbid_imported_defines: Reject imported files carrying a `#define`.

        Raises:
            ImportedDefineError: If an imported file contains a `#define`.
        """
        names = self.names()
        for module in self.modules():
            source = processed_source(module, names, self.resolver)
            if forbid_imported_defines and contains_define(source):
                raise ImportedDefineError(module.path)
            yield CompositionUnit(module=module, alias=names[module], source=source)

    def root_source(self) -> str:
        """Source of the root module with its imports rewritten to aliases."""
        return processed_source(self.root, self.names(), self.resolver)

    def relative_dependents(self) -> List[Path]:
        """Project-root-relative paths of every imported module, in import order."""
        return [module.relative_to(self.project_root) for module in self.modules()]

    def dependent_paths(self) -> List[Path]:
        """Canonical paths of the root and every module it imports."""
        return [self.root.path] + [module.path for module in self.modules()]

    def to_dict(self) -> Dict[str, Any]:
        """Export the pass to a JSON-compatible dict."""
        names = self.names()
        project_root = self.project_root

        metadata = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "entry": self.entry,
            "root": str(self.root),
            "project_root": str(project_root),
            "total_modules": len(self.graph),
            "total_imports": len(self.graph.edges()),
        }

        order = [
            {
                "alias": names[module],
                "path": str(module),
                "relative_path": str(module.relative_to(project_root)),
            }
            for module in self.modules()
        ]

        return {
            "metadata": metadata,
            "order": order,
            "aliases": {str(module): alias for module, alias in names.items()},
            "edges": [[str(importer), str(imported)] for importer, imported in self.graph.edges()],
        }


class ImportResolutionService:
    """Resolves entry points of a project into import orders and aliases.

    Usage:
        service = ImportResolutionService(project_root="/path/to/project")
        resolved = service.resolve("shaders/main.wgsl")
        for unit in resolved.composition_units():
            composer.add_module(unit.alias, unit.source)
    """

    def __init__(
        self,
        project_root: Union[str, Path],
        config: Optional[Config] = None,
        registry: Optional[DetectorRegistry] = None,
    ):
        """Initialize service.

        Args:
            project_root: Base directory of the shader project.
            config: Configuration object. If None, loads from the project root.
            registry: Detector registry. If None, uses the built-in detectors.
        """
        self.project_root = Path(project_root).resolve()
        self.config = config if config is not None else Config.for_project(self.project_root)
        self.registry = registry if registry is not None else DetectorRegistry.with_default_detectors()

        logger.info(f"ImportResolutionService initialized for {self.project_root}")

    def entry_module(self, entry: str) -> Module:
        """Validate an entry path and build its module.

        Args:
            entry: Path to the entry file, relative to the project root.

        Raises:
            EntryPointError: If the entry is missing, not a file, or not a `.wgsl` file.
        """
        source_path = self.project_root / entry
        if not source_path.is_file():
            if source_path.exists():
                raise EntryPointError(
                    f"could not find import `{entry}`: `{source_path}` exists but is not a file",
                    entry,
                )
            raise EntryPointError(
                f"could not find import `{entry}`: `{source_path}` does not exist", entry
            )
        if source_path.suffix != WGSL_EXTENSION:
            raise EntryPointError(
                f"file `{entry}` does not have the required `.wgsl` extension", entry
            )

        return Module.from_path(source_path.resolve())

    def resolve(self, entry: str) -> ResolvedImports:
        """Run one resolution pass for an entry point.

        Args:
            entry: Path to the entry file, relative to the project root.

        Returns:
            ResolvedImports with import order and aliases.

        Raises:
            ImportResolutionError: On an invalid entry, an import cycle, or an
                unresolved import. No partial result is returned.
        """
        start_time = time.time()
        try:
            root = self.entry_module(entry)
            resolver = ModuleResolver(self.project_root)
            graph = ImportGraph.calculate(root, resolver, self.registry)
        except ImportResolutionError as e:
            logger.error(
                f"Resolution of {entry} failed: {e}",
                extra=entry_context(entry, error_kind=e.kind),
            )
            raise

        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Resolved {entry}: {len(graph) - 1} import(s) in {elapsed_ms:.1f}ms",
            extra=entry_context(
                entry,
                imports=len(graph) - 1,
                elapsed_ms=round(elapsed_ms, 1),
            ),
        )
        return ResolvedImports(entry, graph, resolver)

    def compose_inputs(self, entry: str) -> List[CompositionUnit]:
        """Resolve an entry and prepare every module for the composer.

        The last unit is the root module itself, under its own alias.

        Raises:
            ImportResolutionError: If resolution fails or an imported file
                carries a `#define`.
        """
        resolved = self.resolve(entry)
        try:
            units = list(
                resolved.composition_units(
                    forbid_imported_defines=self.config.forbid_imported_defines
                )
            )
        except ImportResolutionError as e:
            logger.error(
                f"Composition inputs for {entry} rejected: {e}",
                extra=entry_context(entry, error_kind=e.kind),
            )
            raise

        units.append(
            CompositionUnit(
                module=resolved.root,
                alias=resolved.alias_of(resolved.root),
                source=resolved.root_source(),
            )
        )
        return units
