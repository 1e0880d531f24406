# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Registry for import directive detector plugins.

The registry runs detectors in priority order (highest first). When two
detectors match the same directive, the first one to claim its request
token wins, so a bracketed item import is reported as such rather than as a
bare path import.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple

from ..models import ImportDirective
from .base import ImportDirectiveDetector
from .import_detector import AliasedImportDetector, ItemListImportDetector, PathImportDetector
from .item_import_detector import BracketedItemsImportDetector, SingleItemImportDetector

logger = logging.getLogger(__name__)


class DetectorRegistry:
    """Registry for directive detector plugins with priority-based dispatch.

    Detectors are kept sorted as they are registered, so reading the
    registry never modifies it and a fully built registry can be shared by
    concurrent resolution passes.

    Thread Safety:
    - Registration is NOT thread-safe: register all detectors before processing
    - get_detectors() and extract() only read the registry
    """

    def __init__(self) -> None:
        """Initialize empty detector registry."""
        self._detectors: List[ImportDirectiveDetector] = []

    @classmethod
    def with_default_detectors(cls) -> "DetectorRegistry":
        """Create a registry holding one detector per directive form."""
        registry = cls()
        registry.register(BracketedItemsImportDetector())
        registry.register(SingleItemImportDetector())
        registry.register(AliasedImportDetector())
        registry.register(ItemListImportDetector())
        registry.register(PathImportDetector())
        return registry

    def register(self, detector: ImportDirectiveDetector) -> None:
        """Register a detector plugin.

        Raises:
            TypeError: If detector is not an ImportDirectiveDetector instance.
        """
        if not isinstance(detector, ImportDirectiveDetector):
            raise TypeError(
                f"Detector must be an ImportDirectiveDetector instance, got {type(detector)}"
            )

        # Sort by priority (highest first), then by name for stability
        detectors = self._detectors + [detector]
        detectors.sort(key=lambda d: (-d.priority(), d.name()))
        self._detectors = detectors

        logger.debug(f"Registered detector '{detector.name()}' with priority {detector.priority()}")

    def get_detectors(self) -> List[ImportDirectiveDetector]:
        """Get all registered detectors, highest priority first."""
        return list(self._detectors)

    def clear(self) -> None:
        """Remove all registered detectors."""
        self._detectors = []

    def count(self) -> int:
        """Return number of registered detectors."""
        return len(self._detectors)

    def extract(self, source: str) -> List[ImportDirective]:
        """Extract every import directive from a source text.

        Args:
            source: Full text of a shader file.

        Returns:
            One directive per request token, in source order.
        """
        claimed: Dict[Tuple[int, int], ImportDirective] = {}
        for detector in self.get_detectors():
            for directive in detector.detect(source):
                claimed.setdefault((directive.start, directive.end), directive)

        return [claimed[span] for span in sorted(claimed)]


# Built once at import time and only read afterwards
_default_registry = DetectorRegistry.with_default_detectors()


def default_registry() -> DetectorRegistry:
    """Get the shared registry of built-in detectors."""
    return _default_registry


def extract_import_requests(
    source: str, registry: Optional[DetectorRegistry] = None
) -> Set[str]:
    """Find all import directives in a source file, returning the distinct paths requested."""
    registry = registry if registry is not None else default_registry()
    return {directive.request for directive in registry.extract(source)}
