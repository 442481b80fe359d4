"""Parser for grouped extrinsic configuration files.

Layout::

    [SOURCES]
    M E W

    [SOURCE-PARAMETERS]
    E individual_liability

    [GENERAL]
    # type   bonus malus [local_malus]  src n b2..bn f1..fn ...
    start        1   0.8                M 1 1e+100   E 1 1e3   W 1 1
    exonpart     1   .99   .98          M 1 1e+100   E 2 5 1 1e2  W 1 1

    [GROUP]
    hg19 mm9

    [GENERAL]
    ...
    [GROUP]
    rn4

Every bonus/malus table must be followed by a ``[GROUP]`` marker and the
list of species it applies to.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from seqhub.errors import ConfigFormatError
from seqhub.evidence.groups import SpeciesGroupRegistry
from seqhub.evidence.models import BonusMalusTable, FeatureType, SourceGrades, TypeWeights

logger = logging.getLogger(__name__)

SOURCES_MARKER = "[SOURCES]"
SOURCE_PARAMETERS_MARKER = "[SOURCE-PARAMETERS]"
TABLE_MARKER = "[GENERAL]"
GROUP_MARKER = "[GROUP]"


class ParserState(str, Enum):
    START = "start"
    READ_SOURCES_HEADER = "read_sources_header"
    READ_BONUS_MALUS_TABLE = "read_bonus_malus_table"
    READ_GROUP_LABEL = "read_group_label"
    READ_GROUP_MEMBERS = "read_group_members"
    END = "end"


class ExtrinsicConfigParser:
    """Read an extrinsic config file into a ``SpeciesGroupRegistry``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def parse(self) -> SpeciesGroupRegistry:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigFormatError(f"Could not find extrinsic config file {self.path}.") from exc
        return self.parse_text(text)

    def parse_text(self, text: str) -> SpeciesGroupRegistry:
        registry = SpeciesGroupRegistry(source=self.path)
        state = ParserState.START
        sources: tuple[str, ...] = ()
        parameters: dict[str, tuple[str, ...]] = {}
        rows: dict[FeatureType, TypeWeights] = {}
        table_open = False

        for line_number, tokens in self._lines(text):
            head = tokens[0]

            if state is ParserState.START:
                if head != SOURCES_MARKER:
                    raise self._error(line_number, f"expected {SOURCES_MARKER}, found {head!r}")
                state = ParserState.READ_SOURCES_HEADER
                continue

            if state is ParserState.READ_SOURCES_HEADER:
                if head == SOURCE_PARAMETERS_MARKER:
                    continue
                if head == TABLE_MARKER:
                    if not sources:
                        raise self._error(line_number, "no sources listed under [SOURCES]")
                    state = ParserState.READ_BONUS_MALUS_TABLE
                    rows, table_open = {}, True
                    continue
                if head.startswith("["):
                    raise self._error(line_number, f"unexpected section {head}")
                if not sources:
                    sources = tuple(tokens)
                else:
                    parameters[head] = tuple(tokens[1:])
                continue

            if state is ParserState.READ_BONUS_MALUS_TABLE:
                if head == GROUP_MARKER:
                    state = ParserState.READ_GROUP_LABEL
                elif head.startswith("["):
                    raise self._missing_group(registry)
                else:
                    weights = self._parse_row(line_number, tokens, sources, len(registry.groups) + 1)
                    rows[weights.feature_type] = weights
                    continue

            if state is ParserState.READ_GROUP_LABEL:
                members = tokens[1:]
                state = ParserState.READ_GROUP_MEMBERS
                if not members:
                    continue
            elif state is ParserState.READ_GROUP_MEMBERS:
                if head.startswith("["):
                    raise self._missing_group(registry)
                members = tokens
            elif state is ParserState.END:
                if head != TABLE_MARKER:
                    raise self._error(line_number, f"expected {TABLE_MARKER} or end of file, found {head!r}")
                state = ParserState.READ_BONUS_MALUS_TABLE
                rows, table_open = {}, True
                continue

            table = BonusMalusTable(sources=sources, source_parameters=dict(parameters), rows=dict(rows))
            group = registry.add_group(table, members)
            logger.info("extrinsic group %d: %s", group.group_id, " ".join(members))
            table_open = False
            state = ParserState.END

        if state is ParserState.START:
            raise ConfigFormatError(f"{self.path} contains no {SOURCES_MARKER} section")
        if table_open or state is ParserState.READ_SOURCES_HEADER:
            raise self._missing_group(registry)
        return registry

    @staticmethod
    def _lines(text: str):
        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.split("#", 1)[0].strip()
            if line:
                yield line_number, line.split()

    def _parse_row(
        self,
        line_number: int,
        tokens: list[str],
        sources: tuple[str, ...],
        table_number: int,
    ) -> TypeWeights:
        feature_type = FeatureType.lookup(tokens[0])
        if feature_type is None:
            raise self._error(
                line_number,
                f"unknown feature type {tokens[0]!r} in config table {table_number}",
            )

        numbers: list[float] = []
        position = 1
        while position < len(tokens) and tokens[position] not in sources:
            numbers.append(self._number(line_number, tokens[position]))
            position += 1
        if len(numbers) not in (2, 3):
            raise self._error(
                line_number,
                f"{feature_type.value} needs bonus, malus and an optional local malus",
            )

        grades: dict[str, SourceGrades] = {}
        while position < len(tokens):
            source = tokens[position]
            if source not in sources:
                raise self._error(line_number, f"source {source!r} is not listed under [SOURCES]")
            if position + 1 >= len(tokens):
                raise self._error(line_number, f"missing grade count for source {source}")
            count = int(self._number(line_number, tokens[position + 1]))
            if count < 1:
                raise self._error(line_number, f"source {source} needs at least one grade")
            values_start = position + 2
            values_end = values_start + 2 * count - 1
            if values_end > len(tokens):
                raise self._error(line_number, f"too few grade values for source {source}")
            values = [self._number(line_number, token) for token in tokens[values_start:values_end]]
            grades[source] = SourceGrades(
                source=source,
                boundaries=tuple(values[: count - 1]),
                factors=tuple(values[count - 1:]),
            )
            position = values_end

        return TypeWeights(
            feature_type=feature_type,
            bonus=numbers[0],
            malus=numbers[1],
            local_malus=numbers[2] if len(numbers) == 3 else 1.0,
            sources=grades,
        )

    def _number(self, line_number: int, token: str) -> float:
        try:
            return float(token)
        except ValueError as exc:
            raise self._error(line_number, f"expected a number, found {token!r}") from exc

    def _error(self, line_number: int, message: str) -> ConfigFormatError:
        return ConfigFormatError(f"{self.path}, line {line_number}: {message}")

    def _missing_group(self, registry: SpeciesGroupRegistry) -> ConfigFormatError:
        return ConfigFormatError(
            "Please specify a set of species for which config table "
            f"{len(registry.groups) + 1} in {self.path} is valid"
        )
