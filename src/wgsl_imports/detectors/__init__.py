# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Detector plugins for import directive extraction.

Components:
- ImportDirectiveDetector: Abstract base class for detector plugins
- DetectorRegistry: Priority-based registry for detector plugins
- PathImportDetector: `#import foo.wgsl`
- AliasedImportDetector: `#import foo.wgsl as bar`
- ItemListImportDetector: `#import foo.wgsl a, b`
- SingleItemImportDetector: `#import foo.wgsl::a`
- BracketedItemsImportDetector: `#import foo.wgsl::{a, b}`
"""

from wgsl_imports.detectors.base import ImportDirectiveDetector
from wgsl_imports.detectors.import_detector import (
    AliasedImportDetector,
    ItemListImportDetector,
    PathImportDetector,
)
from wgsl_imports.detectors.item_import_detector import (
    BracketedItemsImportDetector,
    SingleItemImportDetector,
)
from wgsl_imports.detectors.registry import (
    DetectorRegistry,
    default_registry,
    extract_import_requests,
)

__all__ = [
    # Base classes
    "ImportDirectiveDetector",
    "DetectorRegistry",
    # Directive detectors
    "PathImportDetector",
    "AliasedImportDetector",
    "ItemListImportDetector",
    "SingleItemImportDetector",
    "BracketedItemsImportDetector",
    # Extraction
    "default_registry",
    "extract_import_requests",
]
