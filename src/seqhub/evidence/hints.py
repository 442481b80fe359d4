"""Reader for GFF-style hints files keyed by ``species.chromosome``."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pandas as pd

from seqhub.errors import HintsFormatError
from seqhub.evidence.groups import SpeciesGroupRegistry
from seqhub.evidence.models import FeatureRecord, FeatureType
from seqhub.models import Strand

logger = logging.getLogger(__name__)

GFF_COLUMNS: tuple[str, ...] = (
    "seqname",
    "source",
    "feature",
    "start",
    "end",
    "score",
    "strand",
    "frame",
    "attributes",
)

KEY_SEPARATORS = frozenset(".-")


def split_composite_key(composite_key: str) -> tuple[str, str]:
    """Split ``hg19.chr21`` (or ``hg19-chr21``) at the first separator."""

    for position, char in enumerate(composite_key):
        if char in KEY_SEPARATORS:
            species = composite_key[:position]
            chromosome = composite_key[position + 1:]
            if not species or not chromosome:
                break
            return species, chromosome
    raise HintsFormatError(
        f"first column in hintfile must be the speciesname and seqname delimited by '.', "
        f"for example 'hg19.chr21'; got {composite_key!r}"
    )


def parse_attributes(value: str | None) -> dict[str, str]:
    """Parse ``src=E;grp=g1;pri=4;mult=3`` into a dict."""

    attributes: dict[str, str] = {}
    if not value:
        return attributes
    for item in value.split(";"):
        key, sep, payload = item.strip().partition("=")
        if sep and key:
            attributes[key.strip().lower()] = payload.strip()
    return attributes


class HintsReader:
    """Load hints into the per-group feature collections of a registry.

    GFF coordinates (1-based) are stored 0-based. Records of species without
    an extrinsic configuration group are dropped with a warning.
    """

    def __init__(self, path: str | Path, *, chunksize: int = 100_000) -> None:
        self.path = Path(path)
        self.chunksize = chunksize

    def read(self, groups: SpeciesGroupRegistry) -> int:
        """Insert all usable records into ``groups``; return how many were kept."""

        kept = 0
        ignored_species: set[str] = set()
        for record_number, row in self._rows():
            parsed = self._to_record(row, record_number)
            if parsed is None:
                continue

            species, feature = parsed
            if not groups.is_assigned(species):
                if species not in ignored_species:
                    ignored_species.add(species)
                    logger.warning(
                        "hints are given for species %s but no extrinsic configuration "
                        "in the extrinsicCfgFile. Ignoring all hints for that species.",
                        species,
                    )
                continue

            group = groups.group_for(species)
            group.add_feature(feature.seqname, feature)
            group.has_hints_file = True
            kept += 1

        logger.info("read %d hints from %s", kept, self.path)
        return kept

    def _rows(self) -> Iterator[tuple[int, dict[str, Any]]]:
        if not self.path.exists():
            raise HintsFormatError(f"Could not open hints file {self.path}")

        try:
            frame_iter = pd.read_csv(
                self.path,
                sep="\t",
                header=None,
                names=list(GFF_COLUMNS),
                dtype=str,
                keep_default_na=False,
                quoting=csv.QUOTE_NONE,
                skip_blank_lines=True,
                chunksize=self.chunksize,
            )
            record_number = 0
            for frame in frame_iter:
                for row in frame.to_dict(orient="records"):
                    # only whole-line comments; attributes may contain "#"
                    if str(row.get("seqname") or "").lstrip().startswith("#"):
                        continue
                    record_number += 1
                    yield record_number, row
        except pd.errors.EmptyDataError:
            return
        except pd.errors.ParserError as exc:
            raise HintsFormatError(f"{self.path}: {exc}") from exc

    def _to_record(
        self, row: dict[str, Any], record_number: int
    ) -> tuple[str, FeatureRecord] | None:
        """Return ``(species, record)`` with the seqname normalized to ``species.chromosome``."""

        seqname = self._to_string(row.get("seqname"))
        feature_name = self._to_string(row.get("feature"))
        if seqname is None or feature_name is None:
            raise HintsFormatError(f"{self.path}: record {record_number} has too few columns")

        species, chromosome = split_composite_key(seqname)
        feature_type = FeatureType.lookup(feature_name)
        if feature_type is None:
            logger.debug("skipping hint of unknown type %s in %s", feature_name, self.path)
            return None

        try:
            start = int(self._to_string(row.get("start")) or "")
            end = int(self._to_string(row.get("end")) or "")
        except ValueError as exc:
            raise HintsFormatError(
                f"{self.path}: record {record_number} ({seqname}) has invalid coordinates"
            ) from exc
        if end < start:
            raise HintsFormatError(
                f"{self.path}: record {record_number} ({seqname}) ends before it starts"
            )

        attributes = parse_attributes(self._to_string(row.get("attributes")))
        return species, FeatureRecord(
            seqname=f"{species}.{chromosome}",
            source=self._to_string(row.get("source")) or "",
            type=feature_type,
            start=start - 1,
            end=end - 1,
            score=self._to_float(row.get("score")),
            strand=Strand.parse(row.get("strand")),
            frame=self._to_frame(row.get("frame")),
            group=attributes.get("grp") or attributes.get("group"),
            priority=self._to_int(attributes.get("pri"), default=-1),
            mult=self._to_int(attributes.get("mult"), default=1),
            esource=attributes.get("src", ""),
        )

    @staticmethod
    def _to_string(value: Any) -> str | None:
        if value is None or pd.isna(value):
            return None
        cleaned = str(value).strip()
        return cleaned or None

    @classmethod
    def _to_float(cls, value: Any) -> float:
        cleaned = cls._to_string(value)
        if cleaned is None or cleaned == ".":
            return 0.0
        try:
            return float(cleaned)
        except ValueError:
            return 0.0

    @classmethod
    def _to_frame(cls, value: Any) -> int | None:
        cleaned = cls._to_string(value)
        if cleaned in {"0", "1", "2"}:
            return int(cleaned)
        return None

    @staticmethod
    def _to_int(value: str | None, *, default: int) -> int:
        if value is None:
            return default
        try:
            return int(float(value))
        except ValueError:
            return default
