"""Species manifest: which sequence file holds the genome of which species."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from seqhub.errors import ManifestFormatError

MANIFEST_EXAMPLE = (
    "Homo sapiens <TAB> /dir/to/genome/human.fa\n"
    "Mus musculus <TAB> /dir/to/genome/mouse.fa\n"
    "..."
)


@dataclass(frozen=True)
class ManifestEntry:
    """One ``species -> sequence file`` assignment."""

    species: str
    path: Path


@dataclass(frozen=True)
class SpeciesManifest:
    """Immutable, ordered list of manifest entries."""

    source_path: Path | None
    entries: tuple[ManifestEntry, ...]

    @property
    def species_names(self) -> list[str]:
        return [entry.species for entry in self.entries]

    def path_for(self, species: str) -> Path | None:
        for entry in self.entries:
            if entry.species == species:
                return entry.path
        return None

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


class SpeciesManifestLoader:
    """Parse ``Species<TAB>/path/to/sequence-file`` manifests.

    Blank lines and ``#`` comments are ignored. A later line for a species
    that already appeared replaces the earlier path. Relative paths resolve
    against the directory that holds the manifest.
    """

    def load(self, path: str | Path) -> SpeciesManifest:
        manifest_path = Path(path)
        try:
            text = manifest_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ManifestFormatError(f"Could not open input file {manifest_path}") from exc

        entries: dict[str, ManifestEntry] = {}
        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.rstrip("\r\n")
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            if "\t" not in line:
                raise ManifestFormatError(
                    f"{manifest_path} has wrong format in line {line_number}: {line!r}. "
                    f"correct format:\n\n{MANIFEST_EXAMPLE}\n"
                )

            species, _, location = line.partition("\t")
            species = species.strip()
            location = location.strip()
            if not species or not location:
                raise ManifestFormatError(
                    f"{manifest_path} has an empty species or file name in line {line_number}: {line!r}"
                )

            entries[species] = ManifestEntry(
                species=species,
                path=self._resolve(location, manifest_path.parent),
            )

        return SpeciesManifest(source_path=manifest_path, entries=tuple(entries.values()))

    @staticmethod
    def _resolve(location: str, base_dir: Path) -> Path:
        resolved = Path(os.path.expandvars(os.path.expanduser(location)))
        if not resolved.is_absolute():
            resolved = base_dir / resolved
        return resolved
