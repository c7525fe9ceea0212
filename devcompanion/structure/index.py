"""
Structure Index - In-memory view of the STRUCTURE.json structural map.

The structural map is produced by an external generator (``npm run
structure``) and describes:
- modules: module key -> file, description, exports and IPC channels
- intentIndex: feature name -> ordered list of module references

This module only reads the document. The index is immutable once loaded,
so a single instance can be searched any number of times.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..logger import get_logger

REGENERATE_HINT = "Run: npm run structure"


class StructureError(Exception):
    """Base class for structural map errors. Always fatal to a search."""


class ConfigLoadError(StructureError):
    """The structural map is missing or cannot be parsed."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = str(path)
        self.reason = reason
        message = f"Could not read {Path(path).name}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class NoIndexError(StructureError):
    """The structural map was loaded but has no intentIndex section."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = str(path) if path else None
        name = Path(path).name if path else "structural map"
        super().__init__(f"No intentIndex found in {name}. {REGENERATE_HINT}")


def _unique(values: Optional[Iterable[Any]]) -> Tuple[str, ...]:
    """De-duplicate while keeping first-seen order."""
    seen: Dict[str, None] = {}
    for value in values or ():
        seen.setdefault(str(value), None)
    return tuple(seen)


@dataclass(frozen=True)
class ModuleDescriptor:
    """One entry of the ``modules`` section.

    Attributes:
        key: Module key (e.g., "renderer/aiToolSelector")
        file: Source file path relative to the project root
        description: Optional one-line description
        exports: Exported symbol names
        listens: IPC channels the module listens on
        emits: IPC channels the module emits
    """
    key: str
    file: str
    description: str = ""
    exports: Tuple[str, ...] = ()
    listens: Tuple[str, ...] = ()
    emits: Tuple[str, ...] = ()

    @property
    def channels(self) -> Tuple[str, ...]:
        """Listen then emit channels, de-duplicated."""
        return _unique(self.listens + self.emits)

    def searchable_text(self) -> str:
        """Lower-cased text used by free-text matching."""
        parts = [self.key, self.description, *self.exports, *self.listens, *self.emits]
        return " ".join(parts).lower()

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> "ModuleDescriptor":
        ipc = data.get("ipc") or {}
        return cls(
            key=key,
            file=str(data.get("file", "")),
            description=str(data.get("description") or ""),
            exports=_unique(data.get("exports")),
            listens=_unique(ipc.get("listens")),
            emits=_unique(ipc.get("emits")),
        )


@dataclass(frozen=True)
class ModuleReference:
    """Display-oriented reference to a module.

    Attributes:
        file: Source file path
        module: Module key, when the reference names one
        description: Optional description shown next to the file
    """
    file: str
    module: Optional[str] = None
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModuleReference":
        return cls(
            file=str(data.get("file", "")),
            module=data.get("module"),
            description=str(data.get("description") or ""),
        )

    @classmethod
    def from_descriptor(cls, descriptor: ModuleDescriptor) -> "ModuleReference":
        return cls(
            file=descriptor.file,
            module=descriptor.key,
            description=descriptor.description,
        )


@dataclass(frozen=True)
class StructureIndex:
    """Loaded structural map.

    Attributes:
        modules: Module key -> descriptor, in document order
        intent_index: Feature name -> module references, or None when the
            document has no intentIndex section
        source: Path the map was loaded from, if any
    """
    modules: Dict[str, ModuleDescriptor] = field(default_factory=dict)
    intent_index: Optional[Dict[str, Tuple[ModuleReference, ...]]] = None
    source: Optional[str] = None

    @property
    def has_intent_index(self) -> bool:
        return self.intent_index is not None

    def require_intent_index(self) -> Dict[str, Tuple[ModuleReference, ...]]:
        """Return the intent index or raise NoIndexError."""
        if self.intent_index is None:
            raise NoIndexError(self.source)
        return self.intent_index

    def features(self) -> List[str]:
        """Feature names in document order."""
        return list(self.require_intent_index().keys())

    def lookup(self, feature: str) -> Tuple[ModuleReference, ...]:
        """Module references for a feature name, empty if unknown."""
        return self.require_intent_index().get(feature, ())

    def get_module(self, key: Optional[str]) -> Optional[ModuleDescriptor]:
        if key is None:
            return None
        return self.modules.get(key)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "StructureIndex":
        """Build an index from a parsed STRUCTURE.json document."""
        if not isinstance(data, dict):
            raise ConfigLoadError(source or "STRUCTURE.json", "top level is not an object")

        raw_modules = data.get("modules") or {}
        raw_index = data.get("intentIndex")
        if not isinstance(raw_modules, dict):
            raise ConfigLoadError(source or "STRUCTURE.json", "'modules' is not an object")
        if raw_index is not None and not isinstance(raw_index, dict):
            raise ConfigLoadError(source or "STRUCTURE.json", "'intentIndex' is not an object")

        name = source or "STRUCTURE.json"

        modules = {}
        for key, mod in raw_modules.items():
            mod = mod or {}
            if not isinstance(mod, dict):
                raise ConfigLoadError(name, f"module '{key}' is not an object")
            ipc = mod.get("ipc") or {}
            if not isinstance(ipc, dict):
                raise ConfigLoadError(name, f"module '{key}' has a malformed 'ipc' section")
            lists = {"exports": mod.get("exports"), "listens": ipc.get("listens"), "emits": ipc.get("emits")}
            for list_name, value in lists.items():
                if not isinstance(value or [], list):
                    raise ConfigLoadError(name, f"module '{key}' has a malformed '{list_name}' list")
            modules[key] = ModuleDescriptor.from_dict(key, mod)

        intent_index = None
        if raw_index is not None:
            intent_index = {}
            for feature, refs in raw_index.items():
                refs = refs or []
                if not isinstance(refs, list):
                    raise ConfigLoadError(name, f"feature '{feature}' is not a list")
                if not all(isinstance(ref, dict) for ref in refs):
                    raise ConfigLoadError(name, f"feature '{feature}' has a malformed reference")
                intent_index[feature] = tuple(ModuleReference.from_dict(ref) for ref in refs)

        return cls(modules=modules, intent_index=intent_index, source=source)


def load_structure(path: Union[str, Path]) -> StructureIndex:
    """Load a structural map from disk.

    Args:
        path: Path to STRUCTURE.json

    Returns:
        Loaded StructureIndex

    Raises:
        ConfigLoadError: If the file is missing or not valid JSON
    """
    path = Path(path)
    logger = get_logger()

    with logger.span("structure", "load", {"path": str(path)}) as span:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigLoadError(path, "file not found")
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigLoadError(path, str(e))

        index = StructureIndex.from_dict(data, source=str(path))
        span.set_data({
            "modules": len(index.modules),
            "features": len(index.intent_index) if index.intent_index is not None else None,
        })

    return index
