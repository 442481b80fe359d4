"""Per-sequence hint collections and window-relative feature views."""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from seqhub.evidence.models import FeatureRecord
from seqhub.models import SequenceWindow, Strand


class SequenceFeatures:
    """Hints of one physical sequence, kept sorted by ``(start, end)``."""

    def __init__(self, features: Iterable[FeatureRecord] = ()) -> None:
        self._features: list[FeatureRecord] = []
        self._keys: list[tuple[int, int]] = []
        self._max_length = 0
        for feature in features:
            self.add(feature)

    def add(self, feature: FeatureRecord) -> None:
        key = (feature.start, feature.end)
        index = bisect.bisect_right(self._keys, key)
        self._keys.insert(index, key)
        self._features.insert(index, feature)
        self._max_length = max(self._max_length, feature.length)

    def overlapping(self, start: int, end: int) -> list[FeatureRecord]:
        """All features intersecting ``[start, end]`` in sorted order."""

        # no feature starting before this can reach ``start``
        lower = bisect.bisect_left(self._keys, (start - self._max_length + 1,))
        upper = bisect.bisect_left(self._keys, (end + 1,))
        return [feature for feature in self._features[lower:upper] if feature.end >= start]

    def __iter__(self) -> Iterator[FeatureRecord]:
        return iter(self._features)

    def __len__(self) -> int:
        return len(self._features)


@dataclass
class FeatureWindow:
    """Hints of one request window, in window-relative coordinates."""

    species: str
    chromosome: str
    start: int
    end: int
    strand: Strand = Strand.PLUS
    features: list[FeatureRecord] = field(default_factory=list)

    @classmethod
    def empty(cls, window: SequenceWindow) -> "FeatureWindow":
        return cls(
            species=window.species,
            chromosome=window.chromosome,
            start=window.start,
            end=window.end,
            strand=window.strand,
        )

    @classmethod
    def from_features(
        cls,
        window: SequenceWindow,
        features: Iterable[FeatureRecord],
    ) -> "FeatureWindow":
        """Shift absolute features into the window; reversed on the minus strand."""

        result = cls.empty(window)
        for feature in features:
            result.features.append(feature.shifted(window.start, window.end, window.is_reverse))
        return result

    def __iter__(self) -> Iterator[FeatureRecord]:
        return iter(self.features)

    def __len__(self) -> int:
        return len(self.features)

    def __bool__(self) -> bool:
        return True

    @property
    def is_empty(self) -> bool:
        return not self.features
