# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Error taxonomy for import resolution.

Recoverable errors derive from `ImportResolutionError` and end the current
resolution pass immediately:
- ImportCycleError: an import edge would close a loop
- UnresolvedImportError: a request matched no search location
- EntryPointError: the user-supplied entry file is unusable
- ImportedDefineError: an imported file carries a `#define`

`InvariantViolation` signals a broken precondition or internal invariant. It
subclasses `AssertionError` (not `ImportResolutionError`) so callers can
report it but never mistake it for a user-facing failure.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Set

if TYPE_CHECKING:
    from .models import Module


class InvariantViolation(AssertionError):
    """Raised when a precondition or internal invariant does not hold."""

    pass


class ImportResolutionError(Exception):
    """Base class for recoverable resolution failures."""

    kind = "error"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {"kind": self.kind, "message": str(self)}


class ImportCycleError(ImportResolutionError):
    """An import would close a cycle.

    Attributes:
        cycle_path: Modules on the cycle in import order. The last module
            imports the first one, closing the loop.
    """

    kind = "cycle"

    def __init__(self, cycle_path: List["Module"]):
        self.cycle_path = list(cycle_path)
        super().__init__(self._render())

    def _render(self) -> str:
        lines = ["found import cycle:"]
        for module in self.cycle_path:
            lines.append(f"`{module}` ->")
        lines.append(f"`{self.cycle_path[0]}`")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["cycle_path"] = [str(module) for module in self.cycle_path]
        return result


class UnresolvedImportError(ImportResolutionError):
    """A requested import could not be found at any search location.

    Attributes:
        requested: The raw request string as written in the importing file.
        importer: The module containing the request.
        searched: Every candidate path that was tried.
    """

    kind = "unresolved"

    def __init__(self, requested: str, importer: "Module", searched: Set[Path]):
        self.requested = requested
        self.importer = importer
        self.searched = set(searched)
        super().__init__(self._render())

    def _render(self) -> str:
        locations = ", ".join(f"`{path}`" for path in sorted(self.searched))
        return (
            f"could not resolve import `{self.requested}` in file `{self.importer}`:\n"
            f"looked in location(s) {locations}"
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["requested"] = self.requested
        result["importer"] = str(self.importer)
        result["searched"] = sorted(str(path) for path in self.searched)
        return result


class EntryPointError(ImportResolutionError):
    """The entry file given by the user cannot start a resolution pass."""

    kind = "entry_point"

    def __init__(self, message: str, entry: str):
        self.entry = entry
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["entry"] = self.entry
        return result


class ImportedDefineError(ImportResolutionError):
    """An imported file contains a preprocessor definition."""

    kind = "imported_define"

    def __init__(self, path: Path):
        self.path = path
        super().__init__(
            f"imported shader file `{path}` contained a `#define` statement "
            "- only top-level files may contain preprocessor definitions"
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["path"] = str(self.path)
        return result
