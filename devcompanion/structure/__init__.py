"""
Structure System - Locate source modules by feature intent.

Provides:
- StructureIndex: Read-only view of STRUCTURE.json
- ModuleSearchEngine: Exact, partial and free-text matching
- ConfigLoadError / NoIndexError: Fatal map problems
"""

from .index import (
    ConfigLoadError,
    ModuleDescriptor,
    ModuleReference,
    NoIndexError,
    StructureError,
    StructureIndex,
    load_structure,
)
from .search import FeatureListing, MatchGroup, MatchType, ModuleSearchEngine

__all__ = [
    "StructureIndex",
    "ModuleDescriptor",
    "ModuleReference",
    "load_structure",
    "StructureError",
    "ConfigLoadError",
    "NoIndexError",
    "ModuleSearchEngine",
    "MatchGroup",
    "MatchType",
    "FeatureListing",
]
