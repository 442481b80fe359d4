"""Hint records and the bonus/malus scoring tables applied to them."""

from __future__ import annotations

import bisect
import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from seqhub.models import Strand


class FeatureType(str, Enum):
    """Hint feature types understood by the scoring tables."""

    START = "start"
    STOP = "stop"
    TSS = "tss"
    TTS = "tts"
    ASS = "ass"
    DSS = "dss"
    EXONPART = "exonpart"
    EXON = "exon"
    INTRONPART = "intronpart"
    INTRON = "intron"
    CDSPART = "CDSpart"
    CDS = "CDS"
    UTRPART = "UTRpart"
    UTR = "UTR"
    IRPART = "irpart"
    NONEXONPART = "nonexonpart"
    GENICPART = "genicpart"

    @classmethod
    def lookup(cls, name: str) -> "FeatureType | None":
        """Resolve a type name, case-insensitively; ``None`` if unknown."""

        cleaned = name.strip()
        for member in cls:
            if member.value == cleaned:
                return member
        lowered = cleaned.lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return None


@dataclass(frozen=True)
class FeatureRecord:
    """One hint. Coordinates are 0-based and inclusive.

    Records are immutable; shifting and scoring produce new records.
    """

    seqname: str
    source: str
    type: FeatureType
    start: int
    end: int
    score: float = 0.0
    strand: Strand = Strand.UNKNOWN
    frame: int | None = None
    group: str | None = None
    priority: int = -1
    mult: int = 1
    esource: str = ""
    bonus: float = 1.0
    malus: float = 1.0
    local_malus: float = 1.0

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def overlaps(self, start: int, end: int) -> bool:
        return self.start <= end and self.end >= start

    def shifted(self, start: int, end: int, reverse: bool = False) -> "FeatureRecord":
        """Move into coordinates relative to the window ``[start, end]``.

        On the reverse strand position ``p`` maps to ``end - p`` and the
        hint strand is flipped.
        """

        if not reverse:
            return dataclasses.replace(self, start=self.start - start, end=self.end - start)
        return dataclasses.replace(
            self,
            start=end - self.end,
            end=end - self.start,
            strand=self.strand.flipped(),
        )


@dataclass(frozen=True)
class SourceGrades:
    """Score grades of one hint source for one feature type.

    ``boundaries`` has one entry fewer than ``factors``; a score at or above
    ``boundaries[i]`` falls into grade ``i + 1``.
    """

    source: str
    boundaries: tuple[float, ...] = ()
    factors: tuple[float, ...] = (1.0,)

    def __post_init__(self) -> None:
        if len(self.factors) != len(self.boundaries) + 1:
            raise ValueError(
                f"Source {self.source} needs {len(self.boundaries) + 1} factors, "
                f"got {len(self.factors)}"
            )

    def grade(self, score: float) -> int:
        return bisect.bisect_right(self.boundaries, score)

    def factor(self, score: float) -> float:
        return self.factors[self.grade(score)]


@dataclass(frozen=True)
class TypeWeights:
    """Bonus/malus row of one feature type."""

    feature_type: FeatureType
    bonus: float = 1.0
    malus: float = 1.0
    local_malus: float = 1.0
    sources: Mapping[str, SourceGrades] = field(default_factory=dict)


@dataclass(frozen=True)
class BonusMalusTable:
    """Scoring table of one extrinsic configuration group."""

    sources: tuple[str, ...] = ()
    source_parameters: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    rows: Mapping[FeatureType, TypeWeights] = field(default_factory=dict)

    @property
    def is_populated(self) -> bool:
        return bool(self.rows)

    def annotate(self, feature: FeatureRecord) -> FeatureRecord:
        """Return ``feature`` with bonus, malus and local malus filled in.

        Types or sources missing from the table score neutrally.
        """

        weights = self.rows.get(feature.type)
        if weights is None:
            return dataclasses.replace(feature, bonus=1.0, malus=1.0, local_malus=1.0)

        grades = weights.sources.get(feature.esource)
        factor = grades.factor(feature.score) if grades is not None else 1.0
        return dataclasses.replace(
            feature,
            bonus=weights.bonus * factor,
            malus=weights.malus,
            local_malus=weights.local_malus,
        )


EMPTY_TABLE = BonusMalusTable()
