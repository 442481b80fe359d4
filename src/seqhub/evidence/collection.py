"""Evidence index bundling species groups and their hints."""

from __future__ import annotations

import logging
from pathlib import Path

from seqhub.evidence.config import ExtrinsicConfigParser
from seqhub.evidence.groups import EvidenceGroup, SpeciesGroupRegistry
from seqhub.evidence.hints import HintsReader
from seqhub.evidence.index import FeatureWindow
from seqhub.models import SequenceWindow

logger = logging.getLogger(__name__)


class EvidenceIndex:
    """Grouped extrinsic configuration plus the hints loaded for it.

    Built once by whoever loads the configuration and handed to the stores
    that serve features.
    """

    def __init__(self, groups: SpeciesGroupRegistry | None = None) -> None:
        self.groups = groups or SpeciesGroupRegistry()
        self.hints_loaded = False

    @classmethod
    def from_files(
        cls,
        extrinsic_cfg: str | Path | None = None,
        hints_file: str | Path | None = None,
    ) -> "EvidenceIndex":
        """Parse the extrinsic config, then load the hints file if given."""

        if extrinsic_cfg is not None:
            groups = ExtrinsicConfigParser(extrinsic_cfg).parse()
        else:
            groups = SpeciesGroupRegistry()
        index = cls(groups)
        if hints_file is not None:
            index.load_hints(hints_file)
        return index

    def load_hints(self, hints_file: str | Path) -> int:
        logger.info("reading in the file %s ...", hints_file)
        kept = HintsReader(hints_file).read(self.groups)
        self.mark_hints_loaded()
        return kept

    def mark_hints_loaded(self) -> None:
        """Record that hints were supplied, whether or not any species kept them."""

        self.hints_loaded = True
        for group in self.groups.groups:
            group.has_hints_file = True

    def group_for(self, species: str) -> EvidenceGroup:
        return self.groups.group_for(species)

    def has_evidence(self, species: str) -> bool:
        return self.groups.has_evidence(species)

    def has_hints(self, composite_key: str, species: str) -> bool:
        return self.group_for(species).has_sequence(composite_key)

    def feature_window(self, window: SequenceWindow) -> FeatureWindow:
        """Hints overlapping ``window``, shifted into window coordinates."""

        features = self.group_for(window.species).features_for(window.composite_key)
        if features is None:
            return FeatureWindow.empty(window)
        return FeatureWindow.from_features(window, features.overlapping(window.start, window.end))
