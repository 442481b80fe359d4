"""Core SeqHub primitives.

This package provides random access to genome subsequences and the
extrinsic evidence (hints) attached to them, served from in-memory
sequence files or a chunked DuckDB database.
"""

from .config import BackendType, CoverageMode, StoreSettings
from .errors import (
    BackendConnectionError,
    ChunkAmbiguityError,
    ChunkGapError,
    ConfigFormatError,
    DuplicateGroupAssignmentError,
    DuplicateSpeciesError,
    HintsFormatError,
    InconsistentLengthError,
    ManifestFormatError,
    PartialCoverageError,
    QueryError,
    SeqHubError,
    UnsupportedBackendError,
)
from .evidence import EvidenceIndex, FeatureRecord, FeatureType, FeatureWindow
from .models import AssemblyMapping, Chunk, SequenceResult, SequenceWindow, Strand
from .profiles import StoreProfile, StoreProfileLoader
from .registry import BackendPluginSpec, BackendRegistry, build_default_backend_registry, build_store
from .species import SpeciesRegistry
from .storage import DuckDBChunkLoader, InMemoryStore, RelationalStore, SequenceStore

__all__ = [
    "AssemblyMapping",
    "BackendConnectionError",
    "BackendPluginSpec",
    "BackendRegistry",
    "BackendType",
    "Chunk",
    "ChunkAmbiguityError",
    "ChunkGapError",
    "ConfigFormatError",
    "CoverageMode",
    "DuckDBChunkLoader",
    "DuplicateGroupAssignmentError",
    "DuplicateSpeciesError",
    "EvidenceIndex",
    "FeatureRecord",
    "FeatureType",
    "FeatureWindow",
    "HintsFormatError",
    "InMemoryStore",
    "InconsistentLengthError",
    "ManifestFormatError",
    "PartialCoverageError",
    "QueryError",
    "RelationalStore",
    "SeqHubError",
    "SequenceResult",
    "SequenceStore",
    "SequenceWindow",
    "SpeciesRegistry",
    "StoreProfile",
    "StoreProfileLoader",
    "StoreSettings",
    "Strand",
    "UnsupportedBackendError",
    "build_default_backend_registry",
    "build_store",
]
