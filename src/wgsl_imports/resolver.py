# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Module resolution for import requests.

Turns a request string written in a shader file into a concrete `Module`.

Resolution order (first match wins):
1. Relative to the directory of the importing file
2. Relative to the project root
3. Unresolved: raise UnresolvedImportError listing both candidates

No other location is searched. Resolution only checks that a candidate is a
file; it never opens or parses it.
"""

import logging
from pathlib import Path
from typing import List, Set, Union

from .errors import UnresolvedImportError
from .models import Module

logger = logging.getLogger(__name__)


class ModuleResolver:
    """Resolves import requests against an importer and a project root."""

    def __init__(self, project_root: Union[str, Path]):
        """Initialize resolver.

        Args:
            project_root: Base directory for project-root-relative requests.
        """
        self.project_root = Path(project_root).resolve()

    def search_locations(self, importing: Module, request: str) -> List[Path]:
        """Candidate paths for a request, in precedence order."""
        # Every absolute path to a file has a parent
        parent = importing.path.parent
        return [parent / request, self.project_root / request]

    def resolve(self, importing: Module, request: str) -> Module:
        """Resolve a request made by `importing` to a module.

        Args:
            importing: Module whose source contains the request.
            request: Raw request string, e.g. "../util.wgsl".

        Returns:
            The canonical module the request names.

        Raises:
            UnresolvedImportError: If no candidate location holds a file.
        """
        searched: Set[Path] = set()
        for candidate in self.search_locations(importing, request):
            searched.add(candidate)
            if candidate.is_file():
                module = Module.from_path(candidate.resolve())
                logger.debug(f"Resolved `{request}` in {importing} to {module}")
                return module

        raise UnresolvedImportError(requested=request, importer=importing, searched=searched)
