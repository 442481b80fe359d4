"""Assembly of logical sequence windows from stored fragments.

Flat-chunk layout (0-based, end-inclusive)::

    chunks:   |-------------||-------------||-------------||-------------|
    request:          |--------------------------|
                    start                       end

Assembly-mapped layout (1-based, inclusive): mapping rows place component
sequence onto the chromosome; positions no row covers are assembly gaps.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from seqhub.errors import ChunkAmbiguityError, ChunkGapError, PartialCoverageError
from seqhub.models import AssemblyMapping, Chunk
from seqhub.sequence import strip_non_alpha

logger = logging.getLogger(__name__)

GAP_FILLER = b"n"

ComponentFetcher = Callable[[int, int, int], "str | bytes | None"]


def stitch_chunks(
    chunks: Sequence[Chunk],
    start: int,
    end: int,
    *,
    strict: bool = True,
    label: str = "",
) -> tuple[bytes, int, int]:
    """Concatenate ``chunks`` (sorted by start) into ``[start, end]``.

    Returns the bases and the effective bounds, which differ from the request
    only in lenient mode, where partial coverage is clamped instead of raised.
    """

    if not chunks:
        raise ValueError("stitch_chunks needs at least one chunk")

    requested = f"{label}:{start}-{end}"
    first, last = chunks[0], chunks[-1]

    if len(chunks) == 1:
        if not (first.start <= start and first.end >= end):
            if strict:
                raise PartialCoverageError(
                    f"Tried to retrieve a sequence that is only partially contained in database: {requested}"
                )
            start, end = max(start, first.start), min(end, first.end)
            logger.warning("clamped %s to stored chunk %d-%d", requested, start, end)
        bases = strip_non_alpha(first.sequence)
        return bases[start - first.start:end - first.start + 1], start, end

    if first.end >= end:
        raise ChunkAmbiguityError(
            f"Segment {requested} not uniquely represented in database. "
            "Have you loaded sequences more than once?"
        )
    for previous, following in zip(chunks, chunks[1:]):
        if previous.end + 1 == following.start:
            continue
        if following.start <= previous.end:
            raise ChunkAmbiguityError(
                f"Segment {requested} not uniquely represented in database: chunks "
                f"{previous.start}-{previous.end} and {following.start}-{following.end} overlap. "
                "Have you loaded sequences more than once?"
            )
        raise ChunkGapError(
            f"Genome sequence not sliced seamlessly into chunks: gap between "
            f"{previous.end} and {following.start} while retrieving {requested}"
        )
    for chunk in chunks[1:-1]:
        if chunk.end >= end:
            raise ChunkAmbiguityError(
                f"Segment {requested} not uniquely represented in database. "
                "Have you loaded sequences more than once?"
            )

    if start < first.start or last.end < end:
        if strict:
            raise PartialCoverageError(
                f"Tried to retrieve a sequence that is only partially contained in database: {requested}"
            )
        start, end = max(start, first.start), min(end, last.end)
        logger.warning("clamped %s to stored chunks %d-%d", requested, start, end)

    parts = [strip_non_alpha(first.sequence)[start - first.start:]]
    parts.extend(strip_non_alpha(chunk.sequence) for chunk in chunks[1:-1])
    parts.append(strip_non_alpha(last.sequence)[:end - last.start + 1])
    return b"".join(parts), start, end


def clip_mapping(mapping: AssemblyMapping, start: int, end: int) -> AssemblyMapping | None:
    """Trim a mapping row to ``[start, end]``; ``None`` if it lies outside."""

    asm_start = max(mapping.asm_start, start)
    asm_end = min(mapping.asm_end, end)
    if asm_start > asm_end:
        return None
    return AssemblyMapping(
        source_region_id=mapping.source_region_id,
        component_region_id=mapping.component_region_id,
        asm_start=asm_start,
        asm_end=asm_end,
        cmp_start=mapping.cmp_start + (asm_start - mapping.asm_start),
        cmp_end=mapping.cmp_end - (mapping.asm_end - asm_end),
    )


def assemble_mapped(
    mappings: Sequence[AssemblyMapping],
    start: int,
    end: int,
    fetch_component: ComponentFetcher,
    *,
    strict: bool = True,
    label: str = "",
) -> bytes:
    """Build ``[start, end]`` (1-based) from component mappings.

    ``fetch_component(region_id, cmp_start, length)`` returns component bases
    or ``None``. Positions between rows are filled with ``n``; the result is
    lower case and exactly ``end - start + 1`` bases long.
    """

    requested = f"{label}:{start}-{end}"
    parts: list[bytes] = []
    tail = start - 1

    for mapping in sorted(mappings, key=lambda row: (row.asm_start, row.asm_end)):
        clipped = clip_mapping(mapping, start, end)
        if clipped is None:
            continue
        if clipped.asm_start <= tail:
            raise ChunkAmbiguityError(
                f"Assembly rows overlap at {clipped.asm_start} while retrieving {requested}"
            )

        parts.append(GAP_FILLER * (clipped.asm_start - tail - 1))

        expected = clipped.asm_end - clipped.asm_start + 1
        fetched = fetch_component(clipped.component_region_id, clipped.cmp_start, expected)
        piece = strip_non_alpha(fetched) if fetched is not None else b""
        if len(piece) != expected:
            if strict:
                raise PartialCoverageError(
                    f"No complete 'dna' for component {clipped.component_region_id} "
                    f"({clipped.cmp_start}-{clipped.cmp_end}) while retrieving {requested}"
                )
            logger.warning(
                "component %d lacks bases %d-%d; filling with n",
                clipped.component_region_id,
                clipped.cmp_start,
                clipped.cmp_end,
            )
            piece = piece[:expected] + GAP_FILLER * (expected - len(piece[:expected]))
        parts.append(piece)
        tail = clipped.asm_end

    if tail == start - 1:
        logger.warning("no assembly rows cover %s; returning a gap", requested)
    parts.append(GAP_FILLER * (end - tail))
    return b"".join(parts).lower()
