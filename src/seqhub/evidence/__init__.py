"""Extrinsic evidence (hints): configuration groups, scoring and windows."""

from .collection import EvidenceIndex
from .config import ExtrinsicConfigParser, ParserState
from .groups import DEFAULT_GROUP_ID, EvidenceGroup, SpeciesGroupRegistry
from .hints import HintsReader, parse_attributes, split_composite_key
from .index import FeatureWindow, SequenceFeatures
from .models import (
    EMPTY_TABLE,
    BonusMalusTable,
    FeatureRecord,
    FeatureType,
    SourceGrades,
    TypeWeights,
)

__all__ = [
    "BonusMalusTable",
    "DEFAULT_GROUP_ID",
    "EMPTY_TABLE",
    "EvidenceGroup",
    "EvidenceIndex",
    "ExtrinsicConfigParser",
    "FeatureRecord",
    "FeatureType",
    "FeatureWindow",
    "HintsReader",
    "ParserState",
    "SequenceFeatures",
    "SourceGrades",
    "SpeciesGroupRegistry",
    "TypeWeights",
    "parse_attributes",
    "split_composite_key",
]
