"""Species manifests and sequence file loaders."""

from .loaders import SequenceLoader, load_sequence_records, sniff_format
from .manifest import ManifestEntry, SpeciesManifest, SpeciesManifestLoader

__all__ = [
    "ManifestEntry",
    "SequenceLoader",
    "SpeciesManifest",
    "SpeciesManifestLoader",
    "load_sequence_records",
    "sniff_format",
]
