# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Canonical file identity for shader sources.

A `WGSLFilePath` is the only way a path enters the import graph. It is
absolute, canonical (symlinks, `.` and `..` resolved), points at an existing
file and carries the `.wgsl` extension. Two values compare equal iff their
canonical paths are equal, so two different request strings naming the same
physical file collapse to one graph node.

Constructing one from a path that breaks these rules is a caller bug, not
bad user input, and raises `InvariantViolation`.
"""

from pathlib import Path
from typing import Union

from .errors import InvariantViolation

WGSL_EXTENSION = ".wgsl"


class WGSLFilePath:
    """An absolute, canonical path to an existing `.wgsl` file."""

    __slots__ = ("_path",)

    def __init__(self, path: Union[str, Path]):
        """Validate and canonicalize a path.

        Args:
            path: Absolute path to an existing `.wgsl` file.

        Raises:
            InvariantViolation: If the path is not absolute, is not an existing
                file, or does not have the `.wgsl` extension.
        """
        path = Path(path)
        if not path.is_file():
            raise InvariantViolation(f"`{path}` is not a file - expected a `wgsl` file")
        if not path.is_absolute():
            raise InvariantViolation(f"`{path}` is not absolute")
        canonical = path.resolve(strict=True)
        if canonical.suffix != WGSL_EXTENSION:
            raise InvariantViolation(f"`{path}` does not have a `.wgsl` extension")

        self._path = canonical

    @property
    def path(self) -> Path:
        """The canonical path."""
        return self._path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WGSLFilePath):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __fspath__(self) -> str:
        return str(self._path)

    def __str__(self) -> str:
        return str(self._path)

    def __repr__(self) -> str:
        return f"WGSLFilePath({str(self._path)!r})"
