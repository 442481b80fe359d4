import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from seqhub.errors import HintsFormatError  # noqa: E402
from seqhub.evidence import (  # noqa: E402
    EvidenceIndex,
    FeatureType,
    HintsReader,
    parse_attributes,
    split_composite_key,
)
from seqhub.models import SequenceWindow, Strand  # noqa: E402

CONFIG = """\
[SOURCES]
M E
[GENERAL]
exonpart  1  .99  .98  M 1 1e+100  E 1 1e2
intron    1  .5        M 1 1e+100  E 1 1e3
[GROUP]
hg19
"""

HINTS = (
    "hg19.chr21\tb2h\texonpart\t101\t151\t3.0\t+\t.\tsrc=E;grp=est42;pri=4;mult=2\n"
    "hg19.chr21\tb2h\tintron\t200\t260\t0\t-\t.\tsrc=E\n"
    "hg19.chr21\tb2h\tpromoter\t300\t310\t0\t+\t.\tsrc=E\n"
    "mm9.chr2\tb2h\texonpart\t5\t20\t0\t+\t.\tsrc=E\n"
    "mm9.chr7\tb2h\texonpart\t5\t20\t0\t+\t.\tsrc=E\n"
)


@pytest.fixture
def evidence(tmp_path: Path) -> EvidenceIndex:
    cfg = tmp_path / "extrinsic.cfg"
    cfg.write_text(CONFIG)
    return EvidenceIndex.from_files(cfg)


def test_split_composite_key_uses_first_separator() -> None:
    assert split_composite_key("hg19.chr21") == ("hg19", "chr21")
    assert split_composite_key("hg19-chr21") == ("hg19", "chr21")
    assert split_composite_key("hg19.chr21.random") == ("hg19", "chr21.random")


@pytest.mark.parametrize("key", ["hg19.", ".chr21", "hg19chr21"])
def test_malformed_composite_key_is_rejected(key: str) -> None:
    with pytest.raises(HintsFormatError):
        split_composite_key(key)


def test_parse_attributes_lowercases_keys() -> None:
    assert parse_attributes("src=E; grp=g1;PRI=4") == {"src": "E", "grp": "g1", "pri": "4"}
    assert parse_attributes(None) == {}


def test_hints_are_loaded_zero_based_and_scored(tmp_path: Path, evidence: EvidenceIndex) -> None:
    hints = tmp_path / "hints.gff"
    hints.write_text(HINTS)

    kept = evidence.load_hints(hints)

    assert kept == 2
    features = list(evidence.group_for("hg19").features_for("hg19.chr21"))
    exonpart = features[0]
    assert (exonpart.start, exonpart.end) == (100, 150)
    assert exonpart.type is FeatureType.EXONPART
    assert exonpart.strand is Strand.PLUS
    assert exonpart.group == "est42"
    assert exonpart.priority == 4
    assert exonpart.mult == 2
    assert exonpart.malus == pytest.approx(0.99)
    assert features[1].type is FeatureType.INTRON
    assert evidence.has_hints("hg19.chr21", "hg19")


def test_unconfigured_species_is_dropped_with_one_warning(
    tmp_path: Path, evidence: EvidenceIndex, caplog: pytest.LogCaptureFixture
) -> None:
    hints = tmp_path / "hints.gff"
    hints.write_text(HINTS)

    with caplog.at_level("WARNING"):
        evidence.load_hints(hints)

    assert not evidence.has_hints("mm9.chr2", "mm9")
    messages = [record.getMessage() for record in caplog.records if "mm9" in record.getMessage()]
    assert len(messages) == 1


def test_malformed_key_in_file_is_rejected(tmp_path: Path, evidence: EvidenceIndex) -> None:
    hints = tmp_path / "hints.gff"
    hints.write_text("hg19.\tb2h\texonpart\t1\t10\t0\t+\t.\tsrc=E\n")

    with pytest.raises(HintsFormatError):
        evidence.load_hints(hints)


def test_missing_hints_file_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(HintsFormatError):
        HintsReader(tmp_path / "absent.gff").read(EvidenceIndex().groups)


def test_dash_separated_key_is_served_under_dotted_key(
    tmp_path: Path, evidence: EvidenceIndex
) -> None:
    hints = tmp_path / "hints.gff"
    hints.write_text("hg19-chr21\tb2h\texonpart\t7\t10\t0\t+\t.\tsrc=E\n")

    evidence.load_hints(hints)
    window = evidence.feature_window(SequenceWindow("hg19", "chr21", 5, 24))

    assert evidence.has_hints("hg19.chr21", "hg19")
    assert [(feature.start, feature.end) for feature in window] == [(1, 4)]
    assert window.features[0].seqname == "hg19.chr21"


def test_hash_inside_attributes_is_kept(tmp_path: Path, evidence: EvidenceIndex) -> None:
    hints = tmp_path / "hints.gff"
    hints.write_text(
        "# hints for hg19\n"
        "hg19.chr21\tb2h\texonpart\t7\t10\t0\t+\t.\tsrc=E;grp=NM_1#2;pri=4\n"
    )

    assert evidence.load_hints(hints) == 1
    feature = next(iter(evidence.group_for("hg19").features_for("hg19.chr21")))
    assert feature.group == "NM_1#2"
    assert feature.priority == 4
