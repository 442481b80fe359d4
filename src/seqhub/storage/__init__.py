"""Sequence store backends for SeqHub."""

from .base import SequenceStore
from .loader import DuckDBChunkLoader, split_into_chunks
from .memory import InMemoryStore
from .relational import ChunkLayout, RelationalStore
from .stitching import GAP_FILLER, assemble_mapped, clip_mapping, stitch_chunks

__all__ = [
    "ChunkLayout",
    "DuckDBChunkLoader",
    "GAP_FILLER",
    "InMemoryStore",
    "RelationalStore",
    "SequenceStore",
    "assemble_mapped",
    "clip_mapping",
    "split_into_chunks",
    "stitch_chunks",
]
