"""Configuration contracts for SeqHub stores."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class BackendType(str, Enum):
    """Storage backend serving sequence windows."""

    MEMORY = "memory"
    RELATIONAL = "relational"


class CoverageMode(str, Enum):
    """How partially stored windows are handled.

    ``strict`` is meant for comparative multi-species use, where a truncated
    window is an error; ``lenient`` clamps to the stored range.
    """

    STRICT = "strict"
    LENIENT = "lenient"


@dataclass(frozen=True)
class StoreSettings:
    """Everything needed to build one sequence store."""

    backend: BackendType = BackendType.MEMORY
    species_manifest: Path | None = None
    db_path: Path | None = None
    hints_file: Path | None = None
    extrinsic_cfg: Path | None = None
    species_names: tuple[str, ...] = ()
    coverage_mode: CoverageMode = CoverageMode.STRICT
    db_hints: bool = False

    @property
    def strict(self) -> bool:
        return self.coverage_mode is CoverageMode.STRICT

    def validate(self) -> None:
        """Raise ``ValueError`` if a backend-specific setting is missing."""

        if self.backend is BackendType.MEMORY and self.species_manifest is None:
            raise ValueError("The memory backend needs a species_manifest")
        if self.backend is BackendType.RELATIONAL and self.db_path is None:
            raise ValueError("The relational backend needs a db_path")
        if self.db_hints and self.backend is not BackendType.RELATIONAL:
            raise ValueError("db_hints is only available for the relational backend")
