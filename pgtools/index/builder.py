"""
Build segment, path and position indexes from a GFA graph.
"""

import logging
import time

from pgtools.models.graph import GfaGraph
from pgtools.models.index import (
    GfaIndex, IndexType, PathIndex, PathIndexEntry, PositionIndex,
    PositionIndexEntry, SegmentIndex, SegmentIndexEntry,
)


def build_segment_index(graph: GfaGraph) -> SegmentIndex:
    """Index every segment by name. Offsets are ordinal positions."""
    entries = {}
    for i, (name, segment) in enumerate(graph.segments.items()):
        entries[name] = SegmentIndexEntry(name=name, sequence_length=segment.length, file_offset=i)
    return SegmentIndex(entries=entries)


def build_path_index(graph: GfaGraph) -> PathIndex:
    """
    Index every path by name.

    When several paths share a name the last one wins; the name is listed
    once in path_names, at its first position.
    """
    entries = {}
    path_names = []
    for i, path in enumerate(graph.paths):
        if path.name in entries:
            logging.warning(f"Duplicate path name {path.name}, keeping the last occurrence")
        else:
            path_names.append(path.name)

        total_length = sum(graph.segment_length(step.segment) for step in path.steps)
        entries[path.name] = PathIndexEntry(
            name=path.name,
            step_count=len(path.steps),
            total_length=total_length,
            file_offset=i,
        )

    return PathIndex(entries=entries, path_names=path_names)


def build_position_index(graph: GfaGraph) -> PositionIndex:
    """
    Map each path to the [start, end) coordinate range covered by each step.

    Steps on undefined segments get a zero-length range at the current position.
    """
    entries = {}
    for path in graph.paths:
        position = 0
        path_entries = []
        for step_index, step in enumerate(path.steps):
            length = graph.segment_length(step.segment)
            path_entries.append(PositionIndexEntry(
                path_name=path.name,
                start=position,
                end=position + length,
                segment_name=step.segment,
                step_index=step_index,
            ))
            position += length
        entries[path.name] = path_entries

    return PositionIndex(entries=entries)


def build_index(graph: GfaGraph, source_file, index_type: IndexType) -> GfaIndex:
    """
    Build an index of the requested type.

    Args:
        graph: Parsed GFA graph
        source_file: Path of the GFA file, recorded for provenance
        index_type: IndexType to build

    Returns:
        GfaIndex with the requested sub-indexes populated
    """
    start_time = time.time()
    index = GfaIndex(source_file=str(source_file))

    if index_type in (IndexType.SEGMENT, IndexType.FULL):
        index.segment_index = build_segment_index(graph)
    if index_type in (IndexType.PATH, IndexType.FULL):
        index.path_index = build_path_index(graph)
    if index_type in (IndexType.POSITION, IndexType.FULL):
        index.position_index = build_position_index(graph)

    elapsed = time.time() - start_time
    logging.info(f"Built {index_type} index in {elapsed:.2f}s")
    return index
