"""DuckDB-backed store reading chunked genomes and hints."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Any

from seqhub.errors import BackendConnectionError, QueryError, UnsupportedBackendError
from seqhub.evidence import EvidenceIndex, FeatureRecord, FeatureType, FeatureWindow
from seqhub.models import AssemblyMapping, Chunk, SequenceResult, SequenceWindow, Strand
from seqhub.sequence import reverse_complement
from seqhub.storage.base import SequenceStore
from seqhub.storage.stitching import assemble_mapped, stitch_chunks

try:
    import duckdb
except ImportError:  # pragma: no cover - exercised only when dependency missing
    duckdb = None

logger = logging.getLogger(__name__)


class ChunkLayout(str, Enum):
    """Physical layout of the genome tables."""

    FLAT = "flat"
    ASSEMBLY = "assembly"


FLAT_TABLES = frozenset({"genomes"})
ASSEMBLY_TABLES = frozenset({"seq_region", "dna", "assembly"})
HINT_TABLES = frozenset({"hints", "speciesnames", "seqnames"})

_CHUNK_QUERY = (
    'SELECT seq_id, dna_sequence, start, "end" FROM genomes '
    'WHERE species = ? AND seqname = ? AND start <= ? AND "end" >= ? '
    "ORDER BY start ASC"
)
_CHUNK_LENGTHS_QUERY = (
    'SELECT seqname, max("end") + 1 FROM genomes WHERE species = ? GROUP BY seqname'
)
_REGION_QUERY = "SELECT id, coord_system_id, length FROM seq_region WHERE name = ?"
_HAS_DNA_QUERY = "SELECT count(*) FROM dna WHERE seq_region_id = ?"
_ASSEMBLY_QUERY = (
    "SELECT asm_seq_region_id, cmp_seq_region_id, asm_start, asm_end, cmp_start, cmp_end "
    "FROM assembly WHERE asm_seq_region_id = ? AND asm_start <= ? AND asm_end >= ? "
    "ORDER BY asm_start ASC"
)
_COMPONENT_QUERY = "SELECT substring(sequence, ?, ?) FROM dna WHERE seq_region_id = ?"
_HINTS_QUERY = (
    'SELECT H.source, H.start, H."end", H.score, H.type, H.strand, H.frame, '
    'H.priority, H."group", H.mult, H.esource '
    "FROM hints AS H, speciesnames AS S, seqnames AS N "
    "WHERE S.speciesname = ? AND N.seqname = ? "
    "AND H.species_id = S.species_id AND S.species_id = N.species_id AND H.seq_nr = N.seq_nr "
    'AND H.start <= ? AND H."end" >= ? '
    "ORDER BY H.start ASC"
)


class RelationalStore(SequenceStore):
    """Answer window queries from a DuckDB database.

    The chunk layout is detected from the tables present. ``strict`` turns
    partially covered windows into ``PartialCoverageError``; otherwise they
    are clamped to the stored range. With ``db_hints`` features come from the
    database hints tables, otherwise from the in-memory evidence index.
    """

    name = "relational"

    def __init__(
        self,
        db_path: str | Path,
        *,
        strict: bool = True,
        evidence: EvidenceIndex | None = None,
        read_only: bool = True,
        db_hints: bool = False,
    ) -> None:
        if duckdb is None:
            raise UnsupportedBackendError(
                "duckdb is not installed. Add it to requirements before using the relational store."
            )
        super().__init__(evidence)
        self.db_path = Path(db_path)
        self.strict = strict
        self._lock = threading.Lock()

        try:
            self._connection = duckdb.connect(str(self.db_path), read_only=read_only)
        except duckdb.Error as exc:
            raise BackendConnectionError(f"Could not open database {self.db_path}: {exc}") from exc
        logger.info("DB connection to %s OK", self.db_path)

        tables = self._tables()
        if FLAT_TABLES <= tables:
            self.layout = ChunkLayout.FLAT
        elif ASSEMBLY_TABLES <= tables:
            self.layout = ChunkLayout.ASSEMBLY
        else:
            self.close()
            raise QueryError(
                f"{self.db_path} has neither a 'genomes' table nor "
                "'seq_region', 'dna' and 'assembly' tables"
            )
        self.hints_in_db = db_hints and HINT_TABLES <= tables
        if db_hints and not self.hints_in_db:
            logger.warning("db_hints requested but %s has no hints tables", self.db_path)
        if self.hints_in_db:
            self.evidence.mark_hints_loaded()

    def close(self) -> None:
        connection = getattr(self, "_connection", None)
        if connection is not None:
            connection.close()
            self._connection = None

    def _query(self, sql: str, params: list[Any] | None = None) -> list[tuple[Any, ...]]:
        if self._connection is None:
            raise BackendConnectionError(f"Connection to {self.db_path} is closed")
        with self._lock:
            try:
                return self._connection.execute(sql, params or []).fetchall()
            except duckdb.Error as exc:
                raise QueryError(f"Query failed: {sql} with {params}: {exc}") from exc

    def _tables(self) -> set[str]:
        rows = self._query("SELECT table_name FROM information_schema.tables")
        return {str(row[0]).lower() for row in rows}

    def register_species(self, names) -> None:
        names = list(names)
        super().register_species(names)
        if self.layout is not ChunkLayout.FLAT:
            return
        for name in names:
            index = self.resolve_species_index(name)
            for seqname, length in self._query(_CHUNK_LENGTHS_QUERY, [name]):
                self.record_length(index, seqname, int(length))

    def fetch_sequence(self, window: SequenceWindow) -> SequenceResult | None:
        if self.layout is ChunkLayout.FLAT:
            fetched = self._fetch_flat(window)
        else:
            fetched = self._fetch_assembled(window)
        if fetched is None:
            return None

        bases, start = fetched
        if window.is_reverse:
            bases = reverse_complement(bases)
        return SequenceResult(
            name=window.chromosome,
            sequence=bases,
            length=len(bases),
            offset=start,
        )

    def _fetch_flat(self, window: SequenceWindow) -> tuple[bytes, int] | None:
        rows = self._query(
            _CHUNK_QUERY,
            [window.species, window.chromosome, window.end, window.start],
        )
        if not rows:
            logger.warning(
                "Could not retrieve sequence %s:%d-%d from database",
                window.composite_key,
                window.start,
                window.end,
            )
            return None

        chunks = [
            Chunk(region_id=int(seq_id), start=int(start), end=int(end), sequence=dna or "")
            for seq_id, dna, start, end in rows
        ]
        bases, start, _ = stitch_chunks(
            chunks,
            window.start,
            window.end,
            strict=self.strict,
            label=window.composite_key,
        )
        return bases, start

    def _fetch_assembled(self, window: SequenceWindow) -> tuple[bytes, int] | None:
        regions = self._query(_REGION_QUERY, [window.chromosome])
        if not regions:
            logger.warning(
                "chrName %s does not exist in database, retrieval of sequence failed",
                window.chromosome,
            )
            return None

        region_id, _, region_length = regions[0]
        region_id = int(region_id)
        index = self.resolve_species_index(window.species)
        if region_length is not None and index >= 0:
            self.record_length(index, window.chromosome, int(region_length))

        # schema coordinates are 1-based
        start = window.start + 1
        end = window.end + 1
        if region_length is not None and start > int(region_length):
            logger.warning(
                "window %s:%d-%d starts beyond region length %s",
                window.chromosome,
                window.start,
                window.end,
                region_length,
            )
            return None
        if region_length is not None and end > int(region_length):
            logger.warning(
                "window %s:%d-%d exceeds region length %s; clamping",
                window.chromosome,
                window.start,
                window.end,
                region_length,
            )
            end = int(region_length)

        if self._query(_HAS_DNA_QUERY, [region_id])[0][0] > 0:
            mappings = [AssemblyMapping(region_id, region_id, start, end, start, end)]
        else:
            mappings = [
                AssemblyMapping(*(int(value) for value in row))
                for row in self._query(_ASSEMBLY_QUERY, [region_id, end, start])
            ]

        bases = assemble_mapped(
            mappings,
            start,
            end,
            self._fetch_component,
            strict=self.strict,
            label=window.chromosome,
        )
        return bases, window.start

    def _fetch_component(self, region_id: int, cmp_start: int, length: int) -> str | None:
        rows = self._query(_COMPONENT_QUERY, [cmp_start, length, region_id])
        if not rows or rows[0][0] is None:
            return None
        return rows[0][0]

    def fetch_features(self, window: SequenceWindow) -> FeatureWindow:
        if not self.hints_in_db:
            return self.evidence.feature_window(window)

        result = FeatureWindow.empty(window)
        group = self.evidence.group_for(window.species)
        # only species named in the extrinsic config get hints
        if not self.evidence.has_evidence(window.species):
            return result

        rows = self._query(
            _HINTS_QUERY,
            [window.species, window.chromosome, window.end, window.start],
        )
        if not rows:
            logger.warning("no hints retrieved for %s:%d-%d", window.composite_key, window.start, window.end)
        for row in rows:
            feature = self._to_feature(window, row)
            if feature is None:
                continue
            shifted = feature.shifted(window.start, window.end, window.is_reverse)
            result.features.append(group.table.annotate(shifted))
        return result

    @staticmethod
    def _to_feature(window: SequenceWindow, row: tuple[Any, ...]) -> FeatureRecord | None:
        source, start, end, score, type_name, strand, frame, priority, group, mult, esource = row
        feature_type = FeatureType.lookup(str(type_name or ""))
        if feature_type is None:
            logger.debug("skipping hint of unknown type %s", type_name)
            return None
        return FeatureRecord(
            seqname=window.composite_key,
            source=str(source or ""),
            type=feature_type,
            start=int(start),
            end=int(end),
            score=float(score) if score is not None else 0.0,
            strand=Strand.parse(strand),
            frame=int(frame) if frame is not None and str(frame) in {"0", "1", "2"} else None,
            group=str(group) if group is not None else None,
            priority=int(priority) if priority is not None else -1,
            mult=int(mult) if mult is not None else 1,
            esource=str(esource or ""),
        )
