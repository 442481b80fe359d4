"""Backend registry mapping stable names to store constructors."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from dataclasses import dataclass

from seqhub.config import BackendType, StoreSettings
from seqhub.errors import UnsupportedBackendError
from seqhub.evidence import EvidenceIndex
from seqhub.sources import SpeciesManifestLoader
from seqhub.storage import InMemoryStore, RelationalStore, SequenceStore

logger = logging.getLogger(__name__)

StoreFactory = Callable[[StoreSettings, EvidenceIndex], SequenceStore]


@dataclass(frozen=True)
class BackendPluginSpec:
    """Module path and attribute name of a store factory imported at runtime."""

    name: str
    module: str
    factory_name: str


class BackendRegistry:
    """Registry that maps backend names to store factories."""

    def __init__(self) -> None:
        self._factories: dict[str, StoreFactory] = {}

    def register(self, name: str, factory: StoreFactory) -> None:
        """Register a store factory under a unique name."""

        key = name.strip().lower()
        if not key:
            raise ValueError("Backend name cannot be empty")
        if key in self._factories:
            raise ValueError(f"Backend already registered: {name}")
        self._factories[key] = factory

    def register_plugin(self, plugin: BackendPluginSpec) -> None:
        """Register a factory by importing a module attribute at runtime."""

        module = importlib.import_module(plugin.module)
        self.register(plugin.name, getattr(module, plugin.factory_name))

    def create(self, settings: StoreSettings, evidence: EvidenceIndex | None = None) -> SequenceStore:
        """Build the store named by ``settings.backend``."""

        key = str(getattr(settings.backend, "value", settings.backend)).strip().lower()
        if key not in self._factories:
            raise UnsupportedBackendError(
                f"Unknown backend '{key}'. Available: {', '.join(self.available())}"
            )
        return self._factories[key](settings, evidence or EvidenceIndex())

    def available(self) -> list[str]:
        """Return sorted list of known backend names."""

        return sorted(self._factories.keys())


def _create_memory_store(settings: StoreSettings, evidence: EvidenceIndex) -> SequenceStore:
    manifest = SpeciesManifestLoader().load(settings.species_manifest)
    logger.info("reading in file names for species from %s", settings.species_manifest)
    return InMemoryStore(
        manifest,
        species_names=settings.species_names or None,
        evidence=evidence,
    )


def _create_relational_store(settings: StoreSettings, evidence: EvidenceIndex) -> SequenceStore:
    store = RelationalStore(
        settings.db_path,
        strict=settings.strict,
        evidence=evidence,
        db_hints=settings.db_hints,
    )
    if settings.species_names:
        store.register_species(settings.species_names)
    return store


def build_default_backend_registry() -> BackendRegistry:
    """Create a registry preloaded with the built-in backends."""

    registry = BackendRegistry()
    registry.register(BackendType.MEMORY.value, _create_memory_store)
    registry.register(BackendType.RELATIONAL.value, _create_relational_store)
    return registry


def build_evidence(settings: StoreSettings) -> EvidenceIndex:
    """Parse the extrinsic config and, unless hints come from the database, the hints file."""

    if settings.extrinsic_cfg is None:
        if settings.hints_file is not None:
            logger.warning("hints file given without extrinsicCfgFile; all hints will be ignored")
        elif settings.db_hints:
            logger.warning("db_hints set without extrinsicCfgFile; no species will receive hints")
        else:
            logger.info("No extrinsic information given.")
    hints_file = None if settings.db_hints else settings.hints_file
    return EvidenceIndex.from_files(settings.extrinsic_cfg, hints_file)


def build_store(
    settings: StoreSettings,
    registry: BackendRegistry | None = None,
) -> SequenceStore:
    """Validate ``settings``, load the evidence layer and construct the store."""

    settings.validate()
    evidence = build_evidence(settings)
    return (registry or build_default_backend_registry()).create(settings, evidence)
