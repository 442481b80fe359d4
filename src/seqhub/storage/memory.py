"""Store that preloads every genome of a species manifest into memory."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from seqhub.evidence import EvidenceIndex, FeatureWindow
from seqhub.models import SequenceResult, SequenceWindow
from seqhub.sequence import reverse_complement, to_bytes
from seqhub.sources import SequenceLoader, SpeciesManifest, load_sequence_records
from seqhub.storage.base import SequenceStore

logger = logging.getLogger(__name__)


class InMemoryStore(SequenceStore):
    """Answer window queries by slicing preloaded sequences.

    Sequences are keyed by ``species.chromosome``. Every loaded record also
    fixes the chromosome length of its species.
    """

    name = "memory"

    def __init__(
        self,
        manifest: SpeciesManifest,
        *,
        species_names: Iterable[str] | None = None,
        loader: SequenceLoader | None = None,
        evidence: EvidenceIndex | None = None,
    ) -> None:
        super().__init__(evidence)
        self.manifest = manifest
        self.loader = loader or load_sequence_records
        self._sequences: dict[str, bytes] = {}
        self._species_of: dict[str, str] = {}

        self.register_species(manifest.species_names if species_names is None else species_names)
        self._load()
        self._report_hints()

    def _load(self) -> None:
        for entry in self.manifest:
            index = self.resolve_species_index(entry.species)
            for chromosome, bases in self.loader(entry.path):
                key = f"{entry.species}.{chromosome}"
                logger.info("reading in %s", key)
                buffer = to_bytes(bases)
                self._sequences[key] = buffer
                self._species_of[key] = entry.species
                if index >= 0:
                    self.record_length(index, chromosome, len(buffer))

    def _report_hints(self) -> None:
        if not self.evidence.hints_loaded:
            return

        hinted = self.hinted_keys()
        for key in hinted:
            logger.info("hints available for %s", key)
        if not hinted:
            logger.warning(
                "extrinsic information given but not on any of the sequences in the input set! "
                "The first column in the hints file must contain the speciesID and seqID "
                "separated by '.' (for example 'hg19.chr21')"
            )

    def hinted_keys(self) -> list[str]:
        """Composite keys of loaded sequences that carry at least one hint."""

        hinted: list[str] = []
        for key in sorted(self._sequences):
            if self.evidence.has_hints(key, self._species_of[key]):
                hinted.append(key)
        return hinted

    @property
    def keys(self) -> list[str]:
        return sorted(self._sequences)

    def fetch_sequence(self, window: SequenceWindow) -> SequenceResult | None:
        stored = self._sequences.get(window.composite_key)
        if stored is None:
            logger.debug("no sequence stored for %s", window.composite_key)
            return None

        # bytes slicing copies, so the result never aliases the store
        bases = stored[window.start:window.end + 1]
        if window.is_reverse:
            bases = reverse_complement(bases)
        return SequenceResult(
            name=window.chromosome,
            sequence=bases,
            length=len(bases),
            offset=window.start,
        )

    def fetch_features(self, window: SequenceWindow) -> FeatureWindow:
        return self.evidence.feature_window(window)
