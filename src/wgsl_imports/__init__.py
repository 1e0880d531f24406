# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""WGSL import graph resolution.

Resolves `#import` directives between WGSL files into a dependency-first
registration order and a unique short alias per file.
"""

__version__ = "0.1.0"

from .config import Config, ConfigurationError  # noqa: E402
from .errors import (  # noqa: E402
    EntryPointError,
    ImportCycleError,
    ImportedDefineError,
    ImportResolutionError,
    InvariantViolation,
    UnresolvedImportError,
)
from .files import WGSLFilePath  # noqa: E402
from .import_graph import ImportGraph  # noqa: E402
from .models import CompositionUnit, ImportDirective, ImportStyle, Module  # noqa: E402
from .naming import reduced_names  # noqa: E402
from .resolver import ModuleResolver  # noqa: E402
from .service import ImportResolutionService, ResolvedImports  # noqa: E402

__all__ = [
    "Config",
    "ConfigurationError",
    "CompositionUnit",
    "EntryPointError",
    "ImportCycleError",
    "ImportDirective",
    "ImportGraph",
    "ImportResolutionError",
    "ImportResolutionService",
    "ImportStyle",
    "ImportedDefineError",
    "InvariantViolation",
    "Module",
    "ModuleResolver",
    "ResolvedImports",
    "UnresolvedImportError",
    "WGSLFilePath",
    "reduced_names",
]
