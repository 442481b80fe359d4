"""Canonical value types shared by all SeqHub stores."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Strand(str, Enum):
    """Orientation of a requested window or a hint."""

    PLUS = "+"
    MINUS = "-"
    UNKNOWN = "."

    @classmethod
    def parse(cls, value: object) -> "Strand":
        """Parse ``+``/``-``/``plus``/``minus``; anything else is unknown."""

        text = str(value).strip().lower() if value is not None else ""
        if text in {"+", "plus"}:
            return cls.PLUS
        if text in {"-", "minus"}:
            return cls.MINUS
        return cls.UNKNOWN

    def flipped(self) -> "Strand":
        if self is Strand.PLUS:
            return Strand.MINUS
        if self is Strand.MINUS:
            return Strand.PLUS
        return self


@dataclass(frozen=True)
class SequenceWindow:
    """A request for ``chromosome[start..end]`` of one species.

    Coordinates are 0-based and end-inclusive.
    """

    species: str
    chromosome: str
    start: int
    end: int
    strand: Strand = Strand.PLUS

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Window start must be >= 0, got {self.start}")
        if self.end < self.start:
            raise ValueError(f"Window end {self.end} lies before start {self.start}")
        if self.strand is Strand.UNKNOWN:
            raise ValueError("Window strand must be plus or minus")

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def composite_key(self) -> str:
        return f"{self.species}.{self.chromosome}"

    @property
    def is_reverse(self) -> bool:
        return self.strand is Strand.MINUS


@dataclass(frozen=True)
class SequenceResult:
    """Owned subsequence returned by a store.

    ``sequence`` never aliases backend storage; on the minus strand it holds
    the reverse complement.
    """

    name: str
    sequence: bytes
    length: int
    offset: int

    def text(self) -> str:
        return self.sequence.decode("ascii")


@dataclass(frozen=True)
class Chunk:
    """Contiguous stored fragment of a chromosome (0-based, end-inclusive)."""

    region_id: int
    start: int
    end: int
    sequence: str

    @property
    def length(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class AssemblyMapping:
    """Maps ``asm_start..asm_end`` of a chromosome onto a stored component.

    Coordinates are 1-based and inclusive, as in Ensembl-style schemas.
    """

    source_region_id: int
    component_region_id: int
    asm_start: int
    asm_end: int
    cmp_start: int
    cmp_end: int
