"""Assignment of species to extrinsic configuration groups."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from seqhub.errors import DuplicateGroupAssignmentError
from seqhub.evidence.index import SequenceFeatures
from seqhub.evidence.models import EMPTY_TABLE, BonusMalusTable, FeatureRecord

DEFAULT_GROUP_ID = 0


@dataclass
class EvidenceGroup:
    """One bonus/malus table, its member species and their hints."""

    group_id: int
    table: BonusMalusTable = EMPTY_TABLE
    member_species: frozenset[str] = frozenset()
    sequences: dict[str, SequenceFeatures] = field(default_factory=dict)
    has_hints_file: bool = False

    @property
    def is_default(self) -> bool:
        return self.group_id == DEFAULT_GROUP_ID

    def add_feature(self, composite_key: str, feature: FeatureRecord) -> FeatureRecord:
        """Score ``feature`` with this group's table and store it."""

        scored = self.table.annotate(feature)
        self.sequences.setdefault(composite_key, SequenceFeatures()).add(scored)
        return scored

    def features_for(self, composite_key: str) -> SequenceFeatures | None:
        return self.sequences.get(composite_key)

    def has_sequence(self, composite_key: str) -> bool:
        return composite_key in self.sequences


class SpeciesGroupRegistry:
    """Maps each species to at most one ``EvidenceGroup``.

    Unassigned species resolve to a shared default group with an empty
    table, so callers never special-case a missing configuration.
    """

    def __init__(self, source: str | Path | None = None) -> None:
        self.source = source
        self.default_group = EvidenceGroup(group_id=DEFAULT_GROUP_ID)
        self._groups: list[EvidenceGroup] = []
        self._assignment: dict[str, EvidenceGroup] = {}

    def add_group(self, table: BonusMalusTable, species: Iterable[str]) -> EvidenceGroup:
        """Register a table for ``species``; group ids count up from 1."""

        members = list(species)
        for name in members:
            if name in self._assignment:
                raise DuplicateGroupAssignmentError(
                    f"species {name} is assigned to more than one extrinsic config table"
                    + (f" in {self.source}" if self.source else "")
                )
        if len(set(members)) != len(members):
            repeated = next(name for name in members if members.count(name) > 1)
            raise DuplicateGroupAssignmentError(
                f"species {repeated} is listed twice for extrinsic config table "
                f"{len(self._groups) + 1}" + (f" in {self.source}" if self.source else "")
            )

        group = EvidenceGroup(
            group_id=len(self._groups) + 1,
            table=table,
            member_species=frozenset(members),
        )
        self._groups.append(group)
        for name in members:
            self._assignment[name] = group
        return group

    def group_for(self, species: str) -> EvidenceGroup:
        return self._assignment.get(species, self.default_group)

    def group_id(self, species: str) -> int:
        return self.group_for(species).group_id

    def is_assigned(self, species: str) -> bool:
        return species in self._assignment

    def has_evidence(self, species: str) -> bool:
        group = self._assignment.get(species)
        return group is not None and group.table.is_populated

    @property
    def groups(self) -> tuple[EvidenceGroup, ...]:
        return tuple(self._groups)

    @property
    def species(self) -> list[str]:
        return sorted(self._assignment)
