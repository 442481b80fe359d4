"""Species name/index registry with per-chromosome length bookkeeping."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from seqhub.errors import DuplicateSpeciesError, InconsistentLengthError

logger = logging.getLogger(__name__)

NOT_FOUND = -1


class SpeciesRegistry:
    """Bijective mapping between species names and dense 0-based indices.

    Every registered species owns a chromosome length table. A length, once
    recorded, may only be observed again with the same value.
    """

    def __init__(self) -> None:
        self._names: list[str] = []
        self._index: dict[str, int] = {}
        self._lengths: list[dict[str, int]] = []

    def register_species(self, names: Iterable[str]) -> None:
        """Assign the next free indices to ``names`` in order."""

        for name in names:
            if name in self._index:
                raise DuplicateSpeciesError(
                    f"List of species names contains multiple entries: {name}"
                )
            self._index[name] = len(self._names)
            self._names.append(name)
            self._lengths.append({})

    def index_of(self, name: str) -> int:
        """Return the species index, or ``-1`` if the name is unknown."""

        return self._index.get(name, NOT_FOUND)

    def record_length(self, index: int, chromosome: str, length: int) -> None:
        lengths = self._lengths[index]
        known = lengths.get(chromosome)
        if known is None:
            lengths[chromosome] = int(length)
        elif known != int(length):
            raise InconsistentLengthError(
                f"Lengths of {chromosome} inconsistent for species "
                f"{self._names[index]}: {known} != {length}"
            )

    def length_of(self, index: int, chromosome: str) -> int:
        """Return the recorded length, or ``-1`` after logging the miss."""

        length = self._lengths[index].get(chromosome)
        if length is None:
            logger.warning(
                "Chromosome length lookup failed on sequence %s from species %s",
                chromosome,
                self._names[index],
            )
            return NOT_FOUND
        return length

    def lengths(self, index: int) -> dict[str, int]:
        return dict(self._lengths[index])

    @property
    def species_names(self) -> tuple[str, ...]:
        return tuple(self._names)

    @property
    def num_species(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def max_name_length(self) -> int:
        return max((len(name) for name in self._names), default=0)

    def format_stats(self) -> str:
        """Human-readable dump of the species and length tables."""

        lines = [f"number of species: {self.num_species}"]
        width = self.max_name_length()
        for index, name in enumerate(self._names):
            lines.append(f"species {index:2d}: {name:<{width}}\tspeciesIndex= {self.index_of(name)}")
            lines.append(f"sequence lengths for species {name}:")
            for chromosome in sorted(self._lengths[index]):
                lines.append(f"{chromosome} => {self._lengths[index][chromosome]}")
        return "\n".join(lines)
