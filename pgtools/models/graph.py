"""
Data models for GFA pangenome graphs.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum

from pgtools.errors import InvalidInputError


class Orientation(Enum):
    """Traversal direction of a segment in a link or path step."""
    FORWARD = "+"
    REVERSE = "-"

    @classmethod
    def from_char(cls, char: str) -> "Orientation":
        """Parse '+' or '-' into an Orientation."""
        if char == "+":
            return cls.FORWARD
        if char == "-":
            return cls.REVERSE
        raise InvalidInputError(f"Invalid orientation: {char}")

    def __str__(self):
        return self.value


@dataclass
class Segment:
    """Represents a segment (node) in a GFA file."""
    name: str
    sequence: str
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def length(self) -> int:
        # '*' means the sequence was omitted from the file
        if self.sequence == "*":
            return 0
        return len(self.sequence)


@dataclass
class Link:
    """Represents a link (edge) between two segments."""
    from_segment: str
    from_orient: Orientation
    to_segment: str
    to_orient: Orientation
    overlap: str


@dataclass
class PathStep:
    """One oriented segment visited by a path."""
    segment: str
    orientation: Orientation


@dataclass
class GfaPath:
    """Represents a path (P line) or walk (W line) through the graph."""
    name: str
    steps: List[PathStep] = field(default_factory=list)
    overlaps: Optional[List[str]] = None


@dataclass
class Header:
    """Header (H line) information."""
    version: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class GfaGraph:
    """
    A complete GFA graph.

    Segments are keyed by name, links and paths keep the order in which
    they appear in the source file.
    """
    header: Header = field(default_factory=Header)
    segments: Dict[str, Segment] = field(default_factory=dict)
    links: List[Link] = field(default_factory=list)
    paths: List[GfaPath] = field(default_factory=list)

    def get_segment(self, name: str) -> Optional[Segment]:
        return self.segments.get(name)

    def segment_length(self, name: str) -> int:
        """Length of a segment, 0 if the segment is not defined."""
        segment = self.segments.get(name)
        return segment.length if segment is not None else 0

    def total_sequence_length(self) -> int:
        return sum(segment.length for segment in self.segments.values())

    def segment_count(self) -> int:
        return len(self.segments)

    def link_count(self) -> int:
        return len(self.links)

    def path_count(self) -> int:
        return len(self.paths)
