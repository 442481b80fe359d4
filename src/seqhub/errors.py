"""Error taxonomy for SeqHub stores and evidence loading."""

from __future__ import annotations


class SeqHubError(Exception):
    """Base class for all errors raised by SeqHub."""


class DuplicateSpeciesError(SeqHubError):
    """A species name was registered more than once."""


class InconsistentLengthError(SeqHubError):
    """Two observations of one chromosome length disagree."""


class ManifestFormatError(SeqHubError):
    """The species manifest cannot be read or has a malformed line."""


class HintsFormatError(SeqHubError):
    """A hints file record is malformed."""


class ConfigFormatError(SeqHubError):
    """The extrinsic configuration file is malformed."""


class DuplicateGroupAssignmentError(ConfigFormatError):
    """A species is listed in more than one extrinsic config group."""


class ChunkGapError(SeqHubError):
    """Stored chunks of a chromosome are not adjacent."""


class ChunkAmbiguityError(SeqHubError):
    """Overlapping chunks make the requested segment ambiguous."""


class PartialCoverageError(SeqHubError):
    """The requested window is only partially covered by stored chunks."""


class BackendConnectionError(SeqHubError, ConnectionError):
    """The database backend could not be reached."""


class QueryError(SeqHubError):
    """A backend query was malformed or failed."""


class UnsupportedBackendError(SeqHubError):
    """The requested backend is unknown or its driver is not installed."""
