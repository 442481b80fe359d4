"""Named store profiles loaded from JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jsonschema import exceptions as jsex
from jsonschema.validators import validator_for

from seqhub.config import BackendType, CoverageMode, StoreSettings

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "store_profile.schema.json"
PATH_FIELDS = ("species_manifest", "db_path", "hints_file", "extrinsic_cfg")


@dataclass(frozen=True)
class StoreProfile:
    """Serializable profile describing how to build a store."""

    name: str
    description: str
    settings: StoreSettings


class StoreProfileLoader:
    """Load store profiles from ``config/stores`` or a custom path.

    Relative paths inside a profile resolve against the profile's directory.
    """

    def __init__(self, profiles_dir: str | Path | None = None) -> None:
        if profiles_dir is None:
            profiles_dir = Path(__file__).resolve().parents[2] / "config" / "stores"
        self.profiles_dir = Path(profiles_dir)
        schema = json.loads(SCHEMA_PATH.read_text())
        validator_cls = validator_for(schema)
        validator_cls.check_schema(schema)
        self._validator = validator_cls(schema)

    def list_profiles(self) -> list[str]:
        """Return available profile names from the configured directory."""

        return sorted(path.stem for path in self.profiles_dir.glob("*.json"))

    def load(self, name_or_path: str | Path) -> StoreProfile:
        """Load a profile by name (for example, ``comparative_memory``) or path."""

        path = self._resolve_path(name_or_path)
        payload = json.loads(path.read_text())
        return self.parse(payload, base_dir=path.parent)

    def parse(self, payload: dict[str, Any], *, base_dir: Path | None = None) -> StoreProfile:
        errors = sorted(self._validator.iter_errors(payload), key=jsex.relevance)
        if errors:
            details = "; ".join(
                f"{'/'.join(str(part) for part in error.absolute_path) or '<root>'}: {error.message}"
                for error in errors
            )
            raise ValueError(f"Invalid store profile: {details}")

        paths = {
            field_name: self._resolve_optional(payload.get(field_name), base_dir)
            for field_name in PATH_FIELDS
        }
        settings = StoreSettings(
            backend=BackendType(payload["backend"]),
            species_names=tuple(payload.get("species_names", ())),
            coverage_mode=CoverageMode(payload.get("coverage_mode", CoverageMode.STRICT.value)),
            db_hints=bool(payload.get("db_hints", False)),
            **paths,
        )
        settings.validate()
        return StoreProfile(
            name=str(payload["name"]),
            description=str(payload.get("description", "")),
            settings=settings,
        )

    def _resolve_path(self, name_or_path: str | Path) -> Path:
        requested = Path(name_or_path)

        if requested.exists():
            return requested

        candidate = self.profiles_dir / f"{requested}.json"
        if candidate.exists():
            return candidate

        raise FileNotFoundError(
            f"Store profile not found: {name_or_path}. Available: {', '.join(self.list_profiles())}"
        )

    @staticmethod
    def _resolve_optional(value: Any, base_dir: Path | None) -> Path | None:
        if value is None:
            return None
        resolved = Path(str(value)).expanduser()
        if not resolved.is_absolute() and base_dir is not None:
            resolved = base_dir / resolved
        return resolved
