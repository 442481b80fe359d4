import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from seqhub.evidence import FeatureRecord, FeatureType, FeatureWindow, SequenceFeatures  # noqa: E402
from seqhub.models import SequenceWindow, Strand  # noqa: E402


def _hint(start: int, end: int, strand: Strand = Strand.PLUS) -> FeatureRecord:
    return FeatureRecord(
        seqname="hg19.chr21",
        source="b2h",
        type=FeatureType.EXONPART,
        start=start,
        end=end,
        strand=strand,
    )


def test_plus_strand_window_shifts_to_window_start() -> None:
    window = SequenceWindow("hg19", "chr21", 100, 200, Strand.PLUS)

    result = FeatureWindow.from_features(window, [_hint(100, 150)])

    assert [(feature.start, feature.end) for feature in result] == [(0, 50)]
    assert result.features[0].strand is Strand.PLUS


def test_minus_strand_window_mirrors_and_flips() -> None:
    window = SequenceWindow("hg19", "chr21", 100, 200, Strand.MINUS)

    result = FeatureWindow.from_features(window, [_hint(100, 150)])

    assert [(feature.start, feature.end) for feature in result] == [(50, 100)]
    assert result.features[0].strand is Strand.MINUS


def test_empty_window_is_still_truthy() -> None:
    window = SequenceWindow("hg19", "chr21", 0, 10)

    result = FeatureWindow.empty(window)

    assert result
    assert result.is_empty
    assert len(result) == 0


def test_overlapping_query_uses_longest_feature() -> None:
    features = SequenceFeatures([_hint(0, 500), _hint(120, 130), _hint(300, 310), _hint(90, 99)])

    found = features.overlapping(100, 200)

    assert [(feature.start, feature.end) for feature in found] == [(0, 500), (120, 130)]
    assert len(features) == 4
    assert [feature.start for feature in features] == [0, 90, 120, 300]
