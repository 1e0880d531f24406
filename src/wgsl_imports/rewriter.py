# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Rewriting of import directives to use resolved aliases.

The composer registers every module under its alias and knows nothing about
file paths, so each `#import <path>.wgsl...` directive has its path token
replaced by the alias of the module it resolves to.

The alias is right-aligned to the width of the original path so that
`#import foo.wgsl::bar` becomes `#import      foo::bar`: the composer does
not accept spaces between the module name and its items, and text after the
token keeps its column.
"""

import logging
import re
from typing import Dict, Optional

from .detectors.import_detector import PathImportDetector
from .errors import ImportResolutionError
from .models import Module
from .resolver import ModuleResolver

logger = logging.getLogger(__name__)

DEFINE_REGEX = re.compile(r"^[ \t]*#[ \t]*define\b", re.MULTILINE)


def replace_imports_in_source(
    source: str,
    importing: Module,
    resolver: ModuleResolver,
    module_names: Dict[Module, str],
) -> str:
    """Replace every resolvable import path in `source` with its alias.

    Directives whose request does not resolve, or resolves to a module
    without an alias, are left untouched.

    Args:
        source: Text of the importing module.
        importing: Module the text belongs to.
        resolver: Resolver bound to the project root of the pass.
        module_names: Aliases produced for the pass.

    Returns:
        The rewritten source.
    """

    def substitute(match: re.Match[str]) -> str:
        full = match.group(0)
        name = match.group("path")

        sub = _alias_for(importing, name, resolver, module_names)
        if sub is None:
            return full

        sub = f"{sub:>{len(name)}}"
        start = match.start("path") - match.start(0)
        return full[:start] + sub + full[start + len(name) :]

    return PathImportDetector.pattern.sub(substitute, source)


def _alias_for(
    importing: Module,
    request: str,
    resolver: ModuleResolver,
    module_names: Dict[Module, str],
) -> Optional[str]:
    try:
        import_ = resolver.resolve(importing, request)
    except ImportResolutionError:
        logger.debug(f"Leaving unresolved import `{request}` in {importing} untouched")
        return None
    return module_names.get(import_)


def processed_source(
    module: Module,
    module_names: Dict[Module, str],
    resolver: ModuleResolver,
) -> str:
    """Read a module and rewrite its imports to use aliases."""
    return replace_imports_in_source(module.read_to_string(), module, resolver, module_names)


def contains_define(source: str) -> bool:
    """Whether a source carries a `#define` preprocessor statement."""
    return DEFINE_REGEX.search(source) is not None
