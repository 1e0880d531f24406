# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Core data models for WGSL import resolution.

This module defines the data structures shared across the resolver:
- ImportStyle: Class constants naming the five directive forms
- ImportDirective: One import directive found in a source file
- Module: A shader file participating in the import graph
- CompositionUnit: A module ready to be registered with the composer

Serializable models use JSON-compatible primitives.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import InvariantViolation
from .files import WGSLFilePath

logger = logging.getLogger(__name__)


class ImportStyle:
    """Forms an import directive can take.

    Design: Using class constants (not Enum) for JSON-compatible strings.
    """

    PATH = "path"  # #import foo.wgsl
    ALIASED = "aliased"  # #import foo.wgsl as bar
    ITEM_LIST = "item_list"  # #import foo.wgsl a, b
    SINGLE_ITEM = "single_item"  # #import foo.wgsl::a
    BRACKETED_ITEMS = "bracketed_items"  # #import foo.wgsl::{a, b}


@dataclass
class ImportDirective:
    """An import directive found in a shader source.

    Only `request` matters to the import graph. Aliases and item lists are
    carried for the composition stage and for diagnostics.
    """

    request: str  # Raw path string, e.g. "../common/util.wgsl"
    style: str  # ImportStyle value
    line_number: int  # 1-based line of the directive
    start: int  # Offset of the request token in the source
    end: int  # Offset one past the request token

    alias: Optional[str] = None  # For ALIASED imports
    items: Optional[List[str]] = None  # For item imports

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        result: Dict[str, Any] = {
            "request": self.request,
            "style": self.style,
            "line_number": self.line_number,
            "start": self.start,
            "end": self.end,
        }
        if self.alias is not None:
            result["alias"] = self.alias
        if self.items is not None:
            result["items"] = self.items
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImportDirective":
        """Deserialize from JSON-compatible dict."""
        return cls(
            request=data["request"],
            style=data["style"],
            line_number=data["line_number"],
            start=data["start"],
            end=data["end"],
            alias=data.get("alias"),
            items=data.get("items"),
        )


class Module:
    """A single shader file in the import graph.

    Identity is the canonical path of the underlying `WGSLFilePath`, so two
    modules built from different spellings of the same file are equal.
    Modules are immutable and hashable.
    """

    __slots__ = ("_file",)

    def __init__(self, file: WGSLFilePath):
        self._file = file

    @classmethod
    def from_path(cls, path: Path) -> "Module":
        """Build a module from an absolute path to an existing `.wgsl` file.

        Raises:
            InvariantViolation: If the path does not satisfy the file identity rules.
        """
        return cls(WGSLFilePath(path))

    @property
    def file(self) -> WGSLFilePath:
        return self._file

    @property
    def path(self) -> Path:
        """Canonical path of the module."""
        return self._file.path

    @property
    def name(self) -> str:
        """File name without the `.wgsl` extension."""
        return self._file.path.stem

    def read_to_string(self) -> str:
        """Read the full source text.

        Raises:
            InvariantViolation: If the file disappeared or became unreadable
                after it was confirmed to exist.
        """
        try:
            return self._file.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise InvariantViolation(f"file `{self}` exists but could not be read: {e}") from e

    def nth_path_component(self, i: int) -> Optional[str]:
        """Get the i-th path component counted from the file upward.

        Index 0 is the file name itself, 1 its directory, and so on. The
        filesystem anchor (e.g. `/`) is not a component.

        Returns:
            The component, or None once the path is exhausted.
        """
        path = self._file.path
        parts = path.parts[1:] if path.anchor else path.parts
        if i < 0 or i >= len(parts):
            return None
        return parts[len(parts) - 1 - i]

    def relative_to(self, project_root: Path) -> Path:
        """Path relative to the project root, or the absolute path if outside it."""
        try:
            return self._file.path.relative_to(project_root)
        except ValueError:
            return self._file.path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Module):
            return NotImplemented
        return self._file == other._file

    def __hash__(self) -> int:
        return hash(self._file)

    def __str__(self) -> str:
        return str(self._file)

    def __repr__(self) -> str:
        return f"Module({str(self._file)!r})"


@dataclass
class CompositionUnit:
    """A module prepared for registration with the downstream composer.

    Units are handed over in import order. `source` has every import
    directive rewritten to use the aliases of the resolution pass, and
    `alias` is the name the module must be registered under.
    """

    module: Module
    alias: str
    source: str

    @property
    def file_path(self) -> str:
        return str(self.module.path)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            "alias": self.alias,
            "file_path": self.file_path,
            "source": self.source,
        }
