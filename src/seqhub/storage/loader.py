"""Write genomes and hints into the flat-chunk DuckDB schema."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

import pandas as pd

from seqhub.errors import UnsupportedBackendError
from seqhub.evidence import FeatureRecord, split_composite_key
from seqhub.models import Chunk

try:
    import duckdb
except ImportError:  # pragma: no cover - exercised only when dependency missing
    duckdb = None


_TABLE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

GENOMES_DDL = (
    "CREATE OR REPLACE TABLE genomes ("
    "seq_id BIGINT, dna_sequence VARCHAR, seqname VARCHAR, "
    'start BIGINT, "end" BIGINT, species VARCHAR)'
)
SPECIESNAMES_DDL = "CREATE OR REPLACE TABLE speciesnames (species_id BIGINT, speciesname VARCHAR)"
SEQNAMES_DDL = "CREATE OR REPLACE TABLE seqnames (species_id BIGINT, seq_nr BIGINT, seqname VARCHAR)"
HINTS_DDL = (
    "CREATE OR REPLACE TABLE hints ("
    'source VARCHAR, start BIGINT, "end" BIGINT, score DOUBLE, type VARCHAR, '
    'strand VARCHAR, frame INTEGER, priority INTEGER, "group" VARCHAR, mult INTEGER, '
    "esource VARCHAR, species_id BIGINT, seq_nr BIGINT)"
)

GENOME_COLUMNS = ("seq_id", "dna_sequence", "seqname", "start", "end", "species")
HINT_COLUMNS = (
    "source",
    "start",
    "end",
    "score",
    "type",
    "strand",
    "frame",
    "priority",
    "group",
    "mult",
    "esource",
    "species_id",
    "seq_nr",
)
# nullable dtypes so missing frames arrive as NULL rather than NaN
HINT_DTYPES = {
    "start": "Int64",
    "end": "Int64",
    "score": "float64",
    "frame": "Int64",
    "priority": "Int64",
    "mult": "Int64",
    "species_id": "Int64",
    "seq_nr": "Int64",
}


def split_into_chunks(bases: str, chunk_size: int, *, first_id: int = 0) -> list[Chunk]:
    """Cut ``bases`` into adjacent chunks of at most ``chunk_size`` bases."""

    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    return [
        Chunk(
            region_id=first_id + number,
            start=offset,
            end=min(offset + chunk_size, len(bases)) - 1,
            sequence=bases[offset:offset + chunk_size],
        )
        for number, offset in enumerate(range(0, len(bases), chunk_size))
    ]


class DuckDBChunkLoader:
    """Persist chunked genomes and hint records in a DuckDB file.

    Each ``persist_*`` call replaces the tables it writes.
    """

    def __init__(self, *, db_path: str | Path, chunk_size: int = 50_000) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.db_path = Path(db_path)
        self.chunk_size = chunk_size

    def persist_sequences(self, sequences: Mapping[str, Iterable[tuple[str, str]]]) -> int:
        """Chunk and store ``{species: [(seqname, bases), ...]}``; return the chunk count."""

        rows: list[tuple[str, str, Chunk]] = []
        for species, records in sequences.items():
            for seqname, bases in records:
                for chunk in split_into_chunks(bases, self.chunk_size, first_id=len(rows)):
                    rows.append((species, seqname, chunk))
        self.persist_chunks(rows)
        return len(rows)

    def persist_chunks(self, rows: Sequence[tuple[str, str, Chunk]]) -> None:
        """Store explicit ``(species, seqname, chunk)`` rows as given."""

        frame = pd.DataFrame(
            [
                (chunk.region_id, chunk.sequence, seqname, chunk.start, chunk.end, species)
                for species, seqname, chunk in rows
            ],
            columns=list(GENOME_COLUMNS),
        )
        self._write("genomes", GENOMES_DDL, frame)

    def persist_hints(self, features: Iterable[FeatureRecord]) -> int:
        """Store hints keyed by their composite ``species.seqname``; return the count."""

        species_ids: dict[str, int] = {}
        seq_numbers: dict[tuple[int, str], int] = {}
        hint_rows: list[tuple[object, ...]] = []

        for feature in features:
            species, seqname = split_composite_key(feature.seqname)
            species_id = species_ids.setdefault(species, len(species_ids) + 1)
            seq_nr = seq_numbers.setdefault((species_id, seqname), len(seq_numbers) + 1)
            hint_rows.append(
                (
                    feature.source,
                    feature.start,
                    feature.end,
                    feature.score,
                    feature.type.value,
                    feature.strand.value,
                    feature.frame,
                    feature.priority,
                    feature.group,
                    feature.mult,
                    feature.esource,
                    species_id,
                    seq_nr,
                )
            )

        self._write(
            "speciesnames",
            SPECIESNAMES_DDL,
            pd.DataFrame(
                [(species_id, name) for name, species_id in species_ids.items()],
                columns=["species_id", "speciesname"],
            ),
        )
        self._write(
            "seqnames",
            SEQNAMES_DDL,
            pd.DataFrame(
                [(species_id, seq_nr, seqname) for (species_id, seqname), seq_nr in seq_numbers.items()],
                columns=["species_id", "seq_nr", "seqname"],
            ),
        )
        self._write(
            "hints",
            HINTS_DDL,
            pd.DataFrame(hint_rows, columns=list(HINT_COLUMNS)).astype(HINT_DTYPES),
        )
        return len(hint_rows)

    def _write(self, table_name: str, ddl: str, frame: pd.DataFrame) -> None:
        if not _TABLE_RE.match(table_name):
            raise ValueError(f"Unsafe table name: {table_name}")
        if duckdb is None:
            raise UnsupportedBackendError(
                "duckdb is not installed. Add it to requirements before loading genomes."
            )

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        connection = duckdb.connect(str(self.db_path))
        try:
            connection.execute(ddl)
            if frame.empty:
                return
            columns = ", ".join(f'"{column}"' for column in frame.columns)
            connection.register("chunk_frame", frame)
            connection.execute(
                f"INSERT INTO {table_name} ({columns}) SELECT {columns} FROM chunk_frame"
            )
        finally:
            connection.close()
