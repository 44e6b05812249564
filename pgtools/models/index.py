"""
Data models for GFA indexes.
"""

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum

from pgtools.errors import InvalidInputError

INDEX_VERSION = 1


class IndexType(Enum):
    """Which sub-indexes to build."""
    SEGMENT = "segment"
    PATH = "path"
    POSITION = "position"
    FULL = "full"

    @classmethod
    def parse(cls, name: str) -> "IndexType":
        """Parse an index type name, accepting the usual short aliases."""
        aliases = {
            "segment": cls.SEGMENT, "seg": cls.SEGMENT, "s": cls.SEGMENT,
            "path": cls.PATH, "p": cls.PATH,
            "position": cls.POSITION, "pos": cls.POSITION,
            "full": cls.FULL, "all": cls.FULL, "f": cls.FULL,
        }
        try:
            return aliases[name.lower()]
        except KeyError:
            raise InvalidInputError(
                f"Unknown index type: {name}. Valid types: segment, path, position, full"
            ) from None

    def __str__(self):
        return self.value


@dataclass
class SegmentIndexEntry:
    """Index entry for a single segment."""
    name: str
    sequence_length: int
    file_offset: int  # ordinal position, not a byte offset


@dataclass
class PathIndexEntry:
    """Index entry for a single path."""
    name: str
    step_count: int
    total_length: int
    file_offset: int  # ordinal position, not a byte offset


@dataclass
class PositionIndexEntry:
    """Half-open range [start, end) covered by one step of a path."""
    path_name: str
    start: int
    end: int
    segment_name: str
    step_index: int


@dataclass
class SegmentIndex:
    entries: Dict[str, SegmentIndexEntry] = field(default_factory=dict)


@dataclass
class PathIndex:
    entries: Dict[str, PathIndexEntry] = field(default_factory=dict)
    path_names: List[str] = field(default_factory=list)


@dataclass
class PositionIndex:
    entries: Dict[str, List[PositionIndexEntry]] = field(default_factory=dict)
    _starts: Dict[str, List[int]] = field(default_factory=dict, init=False, repr=False, compare=False)

    def starts(self, path_name: str) -> List[int]:
        """Sorted start coordinates of a path's entries, built on first use."""
        starts = self._starts.get(path_name)
        if starts is None:
            starts = [entry.start for entry in self.entries.get(path_name, [])]
            self._starts[path_name] = starts
        return starts


@dataclass
class GfaIndex:
    """
    Index over a GFA graph.

    Any of the three sub-indexes may be absent; lookups against an absent
    sub-index behave as "not found".
    """
    source_file: str
    version: int = INDEX_VERSION
    segment_index: Optional[SegmentIndex] = None
    path_index: Optional[PathIndex] = None
    position_index: Optional[PositionIndex] = None

    def get_segment_info(self, name: str) -> Optional[SegmentIndexEntry]:
        if self.segment_index is None:
            return None
        return self.segment_index.entries.get(name)

    def get_path_info(self, name: str) -> Optional[PathIndexEntry]:
        if self.path_index is None:
            return None
        return self.path_index.entries.get(name)

    def query_position(self, path_name: str, position: int) -> Optional[PositionIndexEntry]:
        """Find the step of a path whose range contains the given coordinate."""
        if self.position_index is None or position < 0:
            return None
        path_entries = self.position_index.entries.get(path_name)
        if not path_entries:
            return None

        # Entries are contiguous and sorted by start; zero-length entries
        # share their start with the following entry, so the last entry with
        # start <= position is the only candidate.
        i = bisect_right(self.position_index.starts(path_name), position) - 1
        if i < 0:
            return None
        entry = path_entries[i]
        if entry.start <= position < entry.end:
            return entry
        return None

    def list_segments(self) -> List[str]:
        if self.segment_index is None:
            return []
        return list(self.segment_index.entries.keys())

    def list_paths(self) -> List[str]:
        if self.path_index is None:
            return []
        return list(self.path_index.path_names)

    def summary(self) -> Dict:
        """Sizes of each sub-index, None for sub-indexes that were not built."""
        position_entries = None
        position_paths = None
        if self.position_index is not None:
            position_paths = len(self.position_index.entries)
            position_entries = sum(len(v) for v in self.position_index.entries.values())
        return {
            'source_file': self.source_file,
            'version': self.version,
            'segment_entries': len(self.segment_index.entries) if self.segment_index is not None else None,
            'path_entries': len(self.path_index.entries) if self.path_index is not None else None,
            'position_entries': position_entries,
            'position_paths': position_paths,
        }
