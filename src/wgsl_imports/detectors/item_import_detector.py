# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Detectors for path-qualified item imports.

Supports:
- #import foo.wgsl::bar
- #import foo.wgsl::{bar, baz}
"""

import re

from ..models import ImportDirective, ImportStyle
from .base import ITEM_LIST, ImportDirectiveDetector, compile_directive, split_items


class SingleItemImportDetector(ImportDirectiveDetector):
    """Detector for `import <path>.wgsl::<item>`."""

    pattern = compile_directive(r"[ \t]*::[ \t]*(?P<item>[^\s{]+)")

    def populate(self, directive: ImportDirective, match: re.Match[str]) -> None:
        directive.items = [match.group("item")]

    def style(self) -> str:
        return ImportStyle.SINGLE_ITEM

    def priority(self) -> int:
        return 40

    def name(self) -> str:
        return "SingleItemImportDetector"


class BracketedItemsImportDetector(ImportDirectiveDetector):
    """Detector for `import <path>.wgsl::{<item>[, <item>...]}`."""

    pattern = compile_directive(rf"[ \t]*::[ \t]*\{{[ \t]*(?P<items>{ITEM_LIST})[ \t]*\}}")

    def populate(self, directive: ImportDirective, match: re.Match[str]) -> None:
        directive.items = split_items(match.group("items"))

    def style(self) -> str:
        return ImportStyle.BRACKETED_ITEMS

    def priority(self) -> int:
        return 50

    def name(self) -> str:
        return "BracketedItemsImportDetector"
