# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Detectors for whole-file import directives.

Supports:
- #import foo.wgsl
- #import foo.wgsl as bar
- #import foo.wgsl a, b, c

`PathImportDetector` matches the prefix of every directive form, so running
it alone is enough to collect every requested path.
"""

import re

from ..models import ImportDirective, ImportStyle
from .base import ITEM_LIST, ImportDirectiveDetector, compile_directive, split_items


class PathImportDetector(ImportDirectiveDetector):
    """Detector for the bare `import <path>.wgsl` form.

    Priority: 10 (fallback, claims whatever the specific forms did not)
    """

    pattern = compile_directive(r"(?=\s|::|$)")

    def style(self) -> str:
        return ImportStyle.PATH

    def priority(self) -> int:
        return 10

    def name(self) -> str:
        return "PathImportDetector"


class AliasedImportDetector(ImportDirectiveDetector):
    """Detector for `import <path>.wgsl as <name>`."""

    pattern = compile_directive(r"[ \t]+as[ \t]+(?P<alias>[^\s]+)")

    def populate(self, directive: ImportDirective, match: re.Match[str]) -> None:
        directive.alias = match.group("alias")

    def style(self) -> str:
        return ImportStyle.ALIASED

    def priority(self) -> int:
        return 30

    def name(self) -> str:
        return "AliasedImportDetector"


class ItemListImportDetector(ImportDirectiveDetector):
    """Detector for `import <path>.wgsl <item>[, <item>...]`."""

    pattern = compile_directive(rf"[ \t]+(?!as[ \t])(?P<items>{ITEM_LIST})")

    def populate(self, directive: ImportDirective, match: re.Match[str]) -> None:
        directive.items = split_items(match.group("items"))

    def style(self) -> str:
        return ImportStyle.ITEM_LIST

    def priority(self) -> int:
        return 20

    def name(self) -> str:
        return "ItemListImportDetector"
