"""Base class for random-access sequence stores."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TextIO

from seqhub.evidence import EvidenceIndex, FeatureWindow
from seqhub.models import SequenceResult, SequenceWindow
from seqhub.species import SpeciesRegistry


class SequenceStore(ABC):
    """Serves subsequences and hint windows of registered species."""

    name: str

    def __init__(self, evidence: EvidenceIndex | None = None) -> None:
        self.species = SpeciesRegistry()
        self.evidence = evidence or EvidenceIndex()

    def register_species(self, names: Iterable[str]) -> None:
        self.species.register_species(names)

    def resolve_species_index(self, name: str) -> int:
        """Return the species index, ``-1`` when unknown."""

        return self.species.index_of(name)

    def record_length(self, species_index: int, chromosome: str, length: int) -> None:
        self.species.record_length(species_index, chromosome, length)

    def chromosome_length(self, species_index: int, chromosome: str) -> int:
        return self.species.length_of(species_index, chromosome)

    @abstractmethod
    def fetch_sequence(self, window: SequenceWindow) -> SequenceResult | None:
        """Return the window's bases, or ``None`` when the sequence is unknown."""

    @abstractmethod
    def fetch_features(self, window: SequenceWindow) -> FeatureWindow:
        """Return the hints overlapping the window (possibly none)."""

    def format_diagnostics(self) -> str:
        return self.species.format_stats()

    def print_diagnostics(self, stream: TextIO | None = None) -> None:
        """Write the species and chromosome length tables to ``stream``."""

        print(self.format_diagnostics(), file=stream or sys.stdout)

    def close(self) -> None:
        """Release backend resources; a no-op for stores without any."""

    def __enter__(self) -> "SequenceStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
