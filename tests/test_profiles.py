import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from seqhub.config import BackendType, CoverageMode  # noqa: E402
from seqhub.profiles import StoreProfileLoader  # noqa: E402


def test_bundled_profiles_are_listed_and_valid() -> None:
    loader = StoreProfileLoader()

    assert loader.list_profiles() == ["comparative_memory", "single_genome_db"]

    profile = loader.load("single_genome_db")
    assert profile.settings.backend is BackendType.RELATIONAL
    assert profile.settings.coverage_mode is CoverageMode.LENIENT
    assert profile.settings.db_hints
    assert profile.settings.extrinsic_cfg == (
        ROOT / "config" / "stores" / ".." / "extrinsic" / "extrinsic.cgp.cfg"
    )


def test_relative_paths_resolve_against_profile_dir(tmp_path: Path) -> None:
    profile_path = tmp_path / "local.json"
    profile_path.write_text(
        json.dumps(
            {
                "name": "local",
                "backend": "memory",
                "species_manifest": "genomes.tbl",
                "species_names": ["hg19", "mm9"],
            }
        )
    )

    profile = StoreProfileLoader(tmp_path).load("local")

    assert profile.name == "local"
    assert profile.settings.species_manifest == tmp_path / "genomes.tbl"
    assert profile.settings.species_names == ("hg19", "mm9")
    assert profile.settings.strict


def test_schema_violations_are_reported(tmp_path: Path) -> None:
    loader = StoreProfileLoader(tmp_path)

    with pytest.raises(ValueError, match="Invalid store profile"):
        loader.parse({"name": "broken", "backend": "redis"})
    with pytest.raises(ValueError, match="Invalid store profile"):
        loader.parse({"name": "no_db", "backend": "relational"})


def test_unknown_profile_lists_available(tmp_path: Path) -> None:
    (tmp_path / "one.json").write_text("{}")

    with pytest.raises(FileNotFoundError, match="Available: one"):
        StoreProfileLoader(tmp_path).load("two")
