import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

duckdb = pytest.importorskip("duckdb")

from seqhub.errors import ChunkAmbiguityError, PartialCoverageError, QueryError  # noqa: E402
from seqhub.evidence import EvidenceIndex, FeatureRecord, FeatureType  # noqa: E402
from seqhub.models import Chunk, SequenceWindow, Strand  # noqa: E402
from seqhub.storage import ChunkLayout, DuckDBChunkLoader, RelationalStore, split_into_chunks  # noqa: E402

HUMAN = "ACGTACGTACGGGGCCCCAATTTTAAAACC"
CONFIG = "[SOURCES]\nE\n[GENERAL]\nexonpart 1 .9 E 2 5 1 10\n[GROUP]\nhg19\n"


@pytest.fixture
def flat_db(tmp_path: Path) -> Path:
    db_path = tmp_path / "genomes.duckdb"
    loader = DuckDBChunkLoader(db_path=db_path, chunk_size=10)
    assert loader.persist_sequences({"hg19": [("chr21", HUMAN)]}) == 3
    return db_path


@pytest.fixture
def assembly_db(tmp_path: Path) -> Path:
    db_path = tmp_path / "core.duckdb"
    connection = duckdb.connect(str(db_path))
    try:
        connection.execute(
            "CREATE TABLE seq_region (id INTEGER, name VARCHAR, coord_system_id INTEGER, length INTEGER)"
        )
        connection.execute("CREATE TABLE dna (seq_region_id INTEGER, sequence VARCHAR)")
        connection.execute(
            "CREATE TABLE assembly (asm_seq_region_id INTEGER, cmp_seq_region_id INTEGER, "
            "asm_start INTEGER, asm_end INTEGER, cmp_start INTEGER, cmp_end INTEGER, ori INTEGER)"
        )
        connection.execute(
            "INSERT INTO seq_region VALUES (1, 'chr1', 1, 15), (2, 'ctgA', 2, 5), (3, 'ctgB', 2, 5)"
        )
        connection.execute("INSERT INTO dna VALUES (2, 'ACGTA'), (3, 'GGCCT')")
        connection.execute(
            "INSERT INTO assembly VALUES (1, 2, 1, 5, 1, 5, 1), (1, 3, 11, 15, 1, 5, 1)"
        )
    finally:
        connection.close()
    return db_path


def test_split_into_chunks_is_adjacent() -> None:
    chunks = split_into_chunks(HUMAN, 10)

    assert [(chunk.start, chunk.end) for chunk in chunks] == [(0, 9), (10, 19), (20, 29)]
    assert "".join(chunk.sequence for chunk in chunks) == HUMAN


def test_flat_layout_stitches_window(flat_db: Path) -> None:
    with RelationalStore(flat_db) as store:
        store.register_species(["hg19"])

        assert store.layout is ChunkLayout.FLAT
        assert store.chromosome_length(0, "chr21") == len(HUMAN)

        result = store.fetch_sequence(SequenceWindow("hg19", "chr21", 5, 24))
        assert result.sequence == HUMAN[5:25].encode()
        assert result.length == 20
        assert result.offset == 5

        reverse = store.fetch_sequence(SequenceWindow("hg19", "chr21", 0, 3, Strand.MINUS))
        assert reverse.text() == "ACGT"


def test_flat_layout_unknown_sequence_returns_none(flat_db: Path) -> None:
    with RelationalStore(flat_db) as store:
        assert store.fetch_sequence(SequenceWindow("hg19", "chr1", 0, 10)) is None


def test_partial_window_strict_and_lenient(flat_db: Path) -> None:
    window = SequenceWindow("hg19", "chr21", 25, 40)

    with RelationalStore(flat_db, strict=True) as store:
        with pytest.raises(PartialCoverageError):
            store.fetch_sequence(window)

    with RelationalStore(flat_db, strict=False) as store:
        result = store.fetch_sequence(window)
        assert result.sequence == HUMAN[25:].encode()
        assert result.offset == 25


def test_sequence_loaded_twice_is_ambiguous(tmp_path: Path) -> None:
    db_path = tmp_path / "twice.duckdb"
    rows = [("hg19", "chr21", chunk) for chunk in split_into_chunks(HUMAN, 10)]
    rows.append(("hg19", "chr21", Chunk(region_id=9, start=0, end=19, sequence=HUMAN[:20])))
    DuckDBChunkLoader(db_path=db_path).persist_chunks(rows)

    with RelationalStore(db_path) as store:
        with pytest.raises(ChunkAmbiguityError):
            store.fetch_sequence(SequenceWindow("hg19", "chr21", 5, 15))


def test_assembly_layout_fills_gaps(assembly_db: Path) -> None:
    with RelationalStore(assembly_db) as store:
        store.register_species(["hg19"])
        assert store.layout is ChunkLayout.ASSEMBLY

        result = store.fetch_sequence(SequenceWindow("hg19", "chr1", 0, 14))
        assert result.sequence == b"acgtannnnnggcct"
        assert result.offset == 0
        assert store.chromosome_length(0, "chr1") == 15

        reverse = store.fetch_sequence(SequenceWindow("hg19", "chr1", 0, 4, Strand.MINUS))
        assert reverse.sequence == b"tacgt"


def test_assembly_layout_reads_contig_dna_directly(assembly_db: Path) -> None:
    with RelationalStore(assembly_db) as store:
        store.register_species(["hg19"])

        assert store.fetch_sequence(SequenceWindow("hg19", "ctgB", 1, 3)).sequence == b"gcc"
        assert store.fetch_sequence(SequenceWindow("hg19", "chr1", 20, 25)) is None
        assert store.fetch_sequence(SequenceWindow("hg19", "chrX", 0, 5)) is None


def test_database_without_genome_tables_is_rejected(tmp_path: Path) -> None:
    db_path = tmp_path / "empty.duckdb"
    connection = duckdb.connect(str(db_path))
    connection.execute("CREATE TABLE other (id INTEGER)")
    connection.close()

    with pytest.raises(QueryError):
        RelationalStore(db_path)


def test_hints_from_database(tmp_path: Path, flat_db: Path) -> None:
    cfg = tmp_path / "extrinsic.cfg"
    cfg.write_text(CONFIG)
    DuckDBChunkLoader(db_path=flat_db).persist_hints(
        [
            FeatureRecord(
                seqname="hg19.chr21",
                source="b2h",
                type=FeatureType.EXONPART,
                start=6,
                end=9,
                score=7.0,
                strand=Strand.PLUS,
                esource="E",
            ),
            FeatureRecord(
                seqname="hg19.chr21", source="b2h", type=FeatureType.EXONPART, start=27, end=29
            ),
        ]
    )
    evidence = EvidenceIndex.from_files(cfg)

    with RelationalStore(flat_db, evidence=evidence, db_hints=True) as store:
        assert store.hints_in_db
        assert evidence.hints_loaded
        group = evidence.group_for("hg19")
        assert group.has_hints_file

        window = store.fetch_features(SequenceWindow("hg19", "chr21", 5, 24))
        features = list(window)
        assert [(feature.start, feature.end) for feature in features] == [(1, 4)]
        assert features[0].bonus == pytest.approx(10.0)
        assert features[0].malus == pytest.approx(0.9)
        assert features[0].frame is None

        reverse = store.fetch_features(SequenceWindow("hg19", "chr21", 5, 24, Strand.MINUS))
        assert [(feature.start, feature.end) for feature in reverse] == [(15, 18)]
        assert reverse.features[0].strand is Strand.MINUS

        assert store.fetch_features(SequenceWindow("mm9", "chr21", 5, 24)).is_empty
