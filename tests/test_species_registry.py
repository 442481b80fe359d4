import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from seqhub.errors import DuplicateSpeciesError, InconsistentLengthError  # noqa: E402
from seqhub.species import NOT_FOUND, SpeciesRegistry  # noqa: E402


def test_register_species_assigns_dense_indices() -> None:
    registry = SpeciesRegistry()
    registry.register_species(["hg19", "mm9", "rn4"])

    assert registry.index_of("hg19") == 0
    assert registry.index_of("rn4") == 2
    assert registry.index_of("panTro") == NOT_FOUND
    assert registry.num_species == 3
    assert "mm9" in registry


def test_duplicate_species_is_rejected() -> None:
    registry = SpeciesRegistry()

    with pytest.raises(DuplicateSpeciesError, match="multiple entries: hg19"):
        registry.register_species(["hg19", "mm9", "hg19"])


def test_length_is_recorded_once_and_must_agree() -> None:
    registry = SpeciesRegistry()
    registry.register_species(["hg19"])

    registry.record_length(0, "chr21", 48_129_895)
    registry.record_length(0, "chr21", 48_129_895)
    assert registry.length_of(0, "chr21") == 48_129_895

    with pytest.raises(InconsistentLengthError, match="chr21"):
        registry.record_length(0, "chr21", 10)


def test_unknown_length_returns_not_found_and_warns(caplog: pytest.LogCaptureFixture) -> None:
    registry = SpeciesRegistry()
    registry.register_species(["hg19"])

    with caplog.at_level("WARNING"):
        assert registry.length_of(0, "chrUn") == NOT_FOUND

    assert "chrUn" in caplog.text


def test_format_stats_lists_species_and_lengths() -> None:
    registry = SpeciesRegistry()
    registry.register_species(["hg19", "mm9"])
    registry.record_length(1, "chr2", 100)

    stats = registry.format_stats()

    assert stats.startswith("number of species: 2")
    assert "sequence lengths for species mm9:" in stats
    assert "chr2 => 100" in stats
