"""Byte-level helpers for nucleotide buffers."""

from __future__ import annotations

_COMPLEMENT = bytes.maketrans(b"ACGTacgt", b"TGCAtgca")
_NON_ALPHA = bytes(
    value for value in range(256) if not chr(value).isascii() or not chr(value).isalpha()
)


def to_bytes(sequence: str | bytes) -> bytes:
    if isinstance(sequence, bytes):
        return sequence
    return sequence.encode("ascii")


def reverse_complement(sequence: str | bytes) -> bytes:
    """Return the reverse complement; bases other than ACGT pass through."""

    return to_bytes(sequence).translate(_COMPLEMENT)[::-1]


def strip_non_alpha(sequence: str | bytes) -> bytes:
    """Drop every byte that is not an ASCII letter."""

    return to_bytes(sequence).translate(None, _NON_ALPHA)
