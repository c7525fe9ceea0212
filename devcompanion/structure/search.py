"""
Module Search Engine - Find source modules by feature keyword.

Matching runs in three tiers and the first tier that produces any hit wins:

1. exact   - keyword equals an intentIndex feature (case-insensitive)
2. partial - keyword and feature contain one another
3. deep    - keyword appears in a module's key, description, exports or
             IPC channel names; all hits collapse into one group

The engine never mutates the index, so one instance can serve repeated and
concurrent queries.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

from ..logger import get_logger
from .index import ModuleReference, StructureIndex


class MatchType(Enum):
    """Tier that produced a match group."""
    EXACT = "exact"
    PARTIAL = "partial"
    DEEP = "deep"


@dataclass(frozen=True)
class MatchGroup:
    """Modules grouped under a matched feature or free-text query.

    Attributes:
        feature: Matched feature name, or ``search: "<keyword>"`` for deep hits
        match_type: Tier that produced this group
        modules: Matched module references
        channels: Union of IPC channels across the matched modules (display only)
    """
    feature: str
    match_type: MatchType
    modules: Tuple[ModuleReference, ...]
    channels: Tuple[str, ...] = ()

    @property
    def files(self) -> List[str]:
        return [m.file for m in self.modules]


@dataclass(frozen=True)
class FeatureListing:
    """Every intentIndex feature with its files, plus aggregate counts."""
    features: Tuple[Tuple[str, Tuple[str, ...]], ...] = field(default_factory=tuple)

    @property
    def feature_count(self) -> int:
        return len(self.features)

    @property
    def module_count(self) -> int:
        """Total module references; duplicates across features count separately."""
        return sum(len(files) for _, files in self.features)


class ModuleSearchEngine:
    """Three-tier keyword search over a StructureIndex.

    Example:
        engine = ModuleSearchEngine(load_structure("STRUCTURE.json"))
        for group in engine.search("terminal"):
            print(group.feature, group.files)
    """

    def __init__(self, index: StructureIndex):
        self.index = index
        self._logger = get_logger()

    def search(self, keyword: str) -> List[MatchGroup]:
        """Search the structural map for a keyword.

        Args:
            keyword: Feature name or free text

        Returns:
            Match groups from the first tier with any hit, or [] if nothing
            matched

        Raises:
            NoIndexError: If the map has no intentIndex
        """
        intent_index = self.index.require_intent_index()
        kw = keyword.lower()

        groups = self._exact(intent_index, kw)
        if not groups:
            groups = self._partial(intent_index, kw)
        if not groups:
            groups = self._deep(keyword, kw)

        self._logger.debug("search", "query", {
            "keyword": keyword,
            "match_type": groups[0].match_type.value if groups else None,
            "groups": len(groups),
        })
        return groups

    def list_features(self) -> FeatureListing:
        """List every intentIndex feature with its file list.

        Raises:
            NoIndexError: If the map has no intentIndex
        """
        intent_index = self.index.require_intent_index()
        return FeatureListing(features=tuple(
            (feature, tuple(ref.file for ref in refs))
            for feature, refs in intent_index.items()
        ))

    def _exact(
        self,
        intent_index: Dict[str, Tuple[ModuleReference, ...]],
        kw: str,
    ) -> List[MatchGroup]:
        # At most one exact group; a key already in lower case wins over
        # keys that only match after folding
        if kw in intent_index:
            return [self._group(kw, MatchType.EXACT, intent_index[kw])]
        for feature, refs in intent_index.items():
            if feature.lower() == kw:
                return [self._group(feature, MatchType.EXACT, refs)]
        return []

    def _partial(
        self,
        intent_index: Dict[str, Tuple[ModuleReference, ...]],
        kw: str,
    ) -> List[MatchGroup]:
        groups = []
        for feature, refs in intent_index.items():
            name = feature.lower()
            if kw in name or name in kw:
                groups.append(self._group(feature, MatchType.PARTIAL, refs))
        return groups

    def _deep(self, keyword: str, kw: str) -> List[MatchGroup]:
        hits = tuple(
            ModuleReference.from_descriptor(mod)
            for mod in self.index.modules.values()
            if kw in mod.searchable_text()
        )
        if not hits:
            return []
        return [self._group(f'search: "{keyword}"', MatchType.DEEP, hits)]

    def _group(
        self,
        feature: str,
        match_type: MatchType,
        refs: Tuple[ModuleReference, ...],
    ) -> MatchGroup:
        return MatchGroup(
            feature=feature,
            match_type=match_type,
            modules=tuple(refs),
            channels=self._channels(refs),
        )

    def _channels(self, refs: Tuple[ModuleReference, ...]) -> Tuple[str, ...]:
        seen: Dict[str, None] = {}
        for ref in refs:
            mod = self.index.get_module(ref.module)
            if mod is None:
                continue
            for channel in mod.channels:
                seen.setdefault(channel, None)
        return tuple(seen)
