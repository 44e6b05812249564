"""
pgtools - PanGenome Tools

Read, analyze and index GFA (Graphical Fragment Assembly) pangenome graphs.
"""

__version__ = "0.1.0"

from pgtools.errors import (
    PgToolsError,
    GfaParseError,
    IndexFormatError,
    InvalidInputError,
    InputFileNotFoundError,
    ExternalToolError,
)
from pgtools.models.graph import GfaGraph, Orientation
from pgtools.models.index import GfaIndex, IndexType
from pgtools.parsers.gfa_parser import parse_gfa
from pgtools.analysis.graph_stats import compute_stats, compute_topology_stats
from pgtools.index.builder import build_index
from pgtools.index.storage import save_index, load_index
from pgtools.index.reader import IndexedReader
