# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Base interface for import directive detector plugins.

Each detector recognizes one textual form of the import directive and turns
every match into an `ImportDirective`. Detectors are independent and
stateless; a `DetectorRegistry` runs them in priority order so the most
specific form claims a directive first.

All forms share the same prefix: a line that starts with optional
whitespace, an optional `#`, the `import` keyword and a path ending in
`.wgsl`. The path is captured in the `path` group.
"""

import re
from abc import ABC, abstractmethod
from typing import List

from ..models import ImportDirective

# Shared directive prefix, matched line by line (re.MULTILINE)
DIRECTIVE_PREFIX = r"^[ \t]*(?:#[ \t]*)?import[ \t]+(?P<path>[^\s]+?\.wgsl)"

# Items are separated by commas with optional horizontal whitespace
_ITEM = r"[^\s,{}]+"
ITEM_LIST = rf"{_ITEM}(?:[ \t]*,[ \t]*{_ITEM})*"


def compile_directive(suffix: str) -> re.Pattern[str]:
    """Compile a directive pattern made of the shared prefix and a form-specific suffix."""
    return re.compile(DIRECTIVE_PREFIX + suffix, re.MULTILINE)


def split_items(items: str) -> List[str]:
    """Split a comma separated item list, dropping surrounding whitespace."""
    return [item.strip() for item in items.split(",") if item.strip()]


class ImportDirectiveDetector(ABC):
    """Abstract base class for directive detector plugins.

    Subclasses provide a compiled `pattern` with a `path` group and the
    form-specific groups, plus `style()`, `priority()` and `name()`.

    Priority Guidelines:
    - Higher values run first
    - More specific forms (bracketed items) outrank more general ones (bare path)
    """

    pattern: re.Pattern[str]

    def detect(self, source: str) -> List[ImportDirective]:
        """Detect every directive of this form in a source text.

        Args:
            source: Full text of a shader file.

        Returns:
            Directives in source order. Empty list if none match.
        """
        directives: List[ImportDirective] = []
        for match in self.pattern.finditer(source):
            start, end = match.span("path")
            directive = ImportDirective(
                request=match.group("path"),
                style=self.style(),
                line_number=source.count("\n", 0, start) + 1,
                start=start,
                end=end,
            )
            self.populate(directive, match)
            directives.append(directive)
        return directives

    def populate(self, directive: ImportDirective, match: re.Match[str]) -> None:
        """Fill form-specific fields of a directive. Default: nothing to add."""
        pass

    @abstractmethod
    def style(self) -> str:
        """Return the ImportStyle value produced by this detector."""
        pass

    @abstractmethod
    def priority(self) -> int:
        """Return detector priority. Higher priority detectors run first."""
        pass

    @abstractmethod
    def name(self) -> str:
        """Return detector name for logging and debugging."""
        pass
