"""
Read-only lookups against a saved index.
"""

import os
from typing import List, Optional

from pgtools.errors import InputFileNotFoundError
from pgtools.index.storage import load_index
from pgtools.models.index import PathIndexEntry, PositionIndexEntry, SegmentIndexEntry


class IndexedReader:
    """Answers segment, path and position queries without re-parsing the GFA."""

    def __init__(self, gfa_file, index_file):
        self.index = load_index(index_file)
        if not os.path.exists(gfa_file):
            raise InputFileNotFoundError(gfa_file)
        # Kept for provenance only, the GFA itself is never opened
        self.source_path = str(gfa_file)

    def get_segment(self, name: str) -> Optional[SegmentIndexEntry]:
        return self.index.get_segment_info(name)

    def get_path(self, name: str) -> Optional[PathIndexEntry]:
        return self.index.get_path_info(name)

    def query_position(self, path_name: str, position: int) -> Optional[PositionIndexEntry]:
        return self.index.query_position(path_name, position)

    def list_segments(self) -> List[str]:
        return self.index.list_segments()

    def list_paths(self) -> List[str]:
        return self.index.list_paths()
