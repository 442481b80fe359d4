import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from seqhub.errors import ManifestFormatError  # noqa: E402
from seqhub.sources import SpeciesManifestLoader  # noqa: E402


def test_manifest_resolves_relative_paths_and_skips_comments(tmp_path: Path) -> None:
    manifest_path = tmp_path / "genomes.tbl"
    manifest_path.write_text(
        "# species\tfile\n"
        "\n"
        "hg19\tgenomes/human.fa\n"
        "mm9\t/data/mouse.fa\n"
    )

    manifest = SpeciesManifestLoader().load(manifest_path)

    assert manifest.species_names == ["hg19", "mm9"]
    assert manifest.path_for("hg19") == tmp_path / "genomes" / "human.fa"
    assert manifest.path_for("mm9") == Path("/data/mouse.fa")
    assert manifest.path_for("rn4") is None
    assert len(manifest) == 2


def test_line_without_tab_names_line_number(tmp_path: Path) -> None:
    manifest_path = tmp_path / "genomes.tbl"
    manifest_path.write_text("hg19\thuman.fa\nmm9 mouse.fa\n")

    with pytest.raises(ManifestFormatError, match="line 2"):
        SpeciesManifestLoader().load(manifest_path)


def test_missing_manifest_raises(tmp_path: Path) -> None:
    with pytest.raises(ManifestFormatError, match="Could not open"):
        SpeciesManifestLoader().load(tmp_path / "absent.tbl")
