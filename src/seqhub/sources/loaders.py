"""Sequence file loaders producing ``(name, bases)`` records."""

from __future__ import annotations

import gzip
from collections.abc import Callable, Iterator
from pathlib import Path

from Bio import SeqIO

SequenceLoader = Callable[[Path], Iterator[tuple[str, str]]]


def _open_text(path: Path):
    if path.name.lower().endswith(".gz"):
        return gzip.open(path, "rt", encoding="utf-8")
    return path.open("r", encoding="utf-8")


def sniff_format(path: str | Path) -> str:
    """Guess the Biopython format name of a sequence file (FASTA or GenBank)."""

    with _open_text(Path(path)) as handle:
        for line in handle:
            stripped = line.strip()
            if not stripped:
                continue
            if stripped.startswith(">"):
                return "fasta"
            if stripped.startswith("LOCUS"):
                return "genbank"
            break
    return "fasta"


def load_sequence_records(path: str | Path) -> Iterator[tuple[str, str]]:
    """Yield ``(name, sequence)`` pairs from a FASTA or GenBank file.

    FASTA records are named by their identifier, GenBank records by their
    LOCUS name.
    """

    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Sequence file not found: {source}")

    file_format = sniff_format(source)
    with _open_text(source) as handle:
        for record in SeqIO.parse(handle, file_format):
            name = record.name if file_format == "genbank" else record.id
            yield name, str(record.seq)
