"""
Streaming statistics for GFA files too large to load as a graph.

Only counters, segment lengths and per-name degrees are kept in memory;
sequences are discarded as soon as they have been counted.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable

from pgtools.analysis.graph_stats import BaseCounter, compute_n50_l50, total_degree_stats
from pgtools.errors import GfaParseError
from pgtools.parsers.gfa_parser import numbered_lines, open_gfa


@dataclass
class BasicStats:
    """Record counts and base composition of a GFA file."""
    total_lines: int = 0
    node_count: int = 0
    edge_count: int = 0
    path_count: int = 0
    other_records: int = 0
    comment_lines: int = 0
    total_bp: int = 0
    min_node_len: int = 0
    max_node_len: int = 0
    gc_bases: int = 0
    n_bases: int = 0

    @property
    def mean_node_len(self) -> float:
        if self.node_count == 0:
            return 0.0
        return self.total_bp / self.node_count


@dataclass
class GraphStats:
    """Streaming topology statistics."""
    basic: BasicStats
    n50: int = 0
    l50: int = 0
    degree_histogram: Dict[int, int] = field(default_factory=dict)
    branching_nodes: int = 0


class StreamingStatsCollector:
    """Accumulates statistics one GFA line at a time."""

    def __init__(self, track_topology=False):
        self.stats = BasicStats()
        self.track_topology = track_topology
        self.lengths: Dict[str, int] = {}
        self.degree: Dict[str, int] = {}
        self._min_len = None
        self._bases = BaseCounter()

    def process_line(self, line: str, line_num: int) -> None:
        line = line.strip()
        if not line:
            return

        self.stats.total_lines += 1
        if line.startswith('#'):
            self.stats.comment_lines += 1
            return

        fields = line.split('\t')
        record_type = fields[0]
        if record_type == 'S':
            self._segment(fields, line_num)
        elif record_type == 'L':
            self._link(fields, line_num)
        elif record_type in ('P', 'W'):
            self.stats.path_count += 1
        else:
            self.stats.other_records += 1

    def _segment(self, fields, line_num):
        if len(fields) < 3:
            raise GfaParseError(line_num, "Segment record requires at least 3 fields")
        stats = self.stats
        stats.node_count += 1
        name, sequence = fields[1], fields[2]

        length = 0
        if sequence != '*':
            length = len(sequence)
            stats.total_bp += length
            self._min_len = length if self._min_len is None else min(self._min_len, length)
            stats.max_node_len = max(stats.max_node_len, length)
            self._bases.add(sequence)

        if self.track_topology:
            # a redefined segment replaces the earlier one, as in the parser
            self.lengths[name] = length
            self.degree.setdefault(name, 0)

    def _link(self, fields, line_num):
        if len(fields) < 6:
            raise GfaParseError(line_num, "Link record requires at least 6 fields")
        self.stats.edge_count += 1
        if self.track_topology:
            for name in (fields[1], fields[3]):
                self.degree[name] = self.degree.get(name, 0) + 1

    def basic_stats(self) -> BasicStats:
        self.stats.min_node_len = self._min_len or 0
        bases = self._bases.counts()
        self.stats.gc_bases = bases['G'] + bases['C']
        self.stats.n_bases = bases['N']
        return self.stats

    def graph_stats(self) -> GraphStats:
        n50, l50 = compute_n50_l50(self.lengths.values())
        histogram, branching = total_degree_stats(self.degree)
        return GraphStats(basic=self.basic_stats(), n50=n50, l50=l50,
                          degree_histogram=histogram, branching_nodes=branching)


def _collect(lines: Iterable[str], track_topology: bool) -> StreamingStatsCollector:
    collector = StreamingStatsCollector(track_topology=track_topology)
    for line_num, line in numbered_lines(lines):
        collector.process_line(line, line_num)
    return collector


def compute_basic_stats(lines: Iterable[str]) -> BasicStats:
    return _collect(lines, track_topology=False).basic_stats()


def compute_graph_stats(lines: Iterable[str]) -> GraphStats:
    return _collect(lines, track_topology=True).graph_stats()


def compute_basic_stats_from_path(gfa_file) -> BasicStats:
    """Stream a GFA (or GFA.GZ) file and compute basic statistics."""
    start_time = time.time()
    logging.info(f"Streaming basic statistics from {gfa_file}")
    with open_gfa(gfa_file) as f:
        stats = compute_basic_stats(f)
    logging.info(f"Finished in {time.time() - start_time:.2f}s: {stats.total_lines} lines")
    return stats


def compute_graph_stats_from_path(gfa_file) -> GraphStats:
    """Stream a GFA (or GFA.GZ) file and compute topology statistics."""
    start_time = time.time()
    logging.info(f"Streaming graph statistics from {gfa_file}")
    with open_gfa(gfa_file) as f:
        stats = compute_graph_stats(f)
    logging.info(f"Finished in {time.time() - start_time:.2f}s: {stats.basic.node_count} segments")
    return stats
