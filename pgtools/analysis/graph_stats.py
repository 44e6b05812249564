"""
Topology and sequence statistics for GFA graphs.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

import numpy as np

from pgtools.models.graph import GfaGraph

# Half-open [lower, upper) bins, the last one is unbounded
LENGTH_BINS = [
    (0, 100, "0-100"),
    (100, 500, "100-500"),
    (500, 1000, "500-1K"),
    (1000, 5000, "1K-5K"),
    (5000, 10000, "5K-10K"),
    (10000, 50000, "10K-50K"),
    (50000, 100000, "50K-100K"),
    (100000, 500000, "100K-500K"),
    (500000, 1000000, "500K-1M"),
    (1000000, None, ">1M"),
]

_BIN_EDGES = np.array([lower for lower, _, _ in LENGTH_BINS[1:]], dtype=np.int64)

# Sequences are joined into batches of roughly this many bytes for counting
_BATCH_BYTES = 1 << 24


@dataclass
class GfaStats:
    """Statistics about a fully parsed GFA graph."""
    segment_count: int
    link_count: int
    path_count: int
    total_sequence_length: int
    average_segment_length: float
    min_segment_length: int
    max_segment_length: int
    n50: int
    l50: int
    gc_content: float
    connected_components: int
    average_path_length: float
    total_path_sequence_length: int
    segment_length_histogram: List[Tuple[str, int]] = field(default_factory=list)
    in_degree_distribution: Dict[int, int] = field(default_factory=dict)
    out_degree_distribution: Dict[int, int] = field(default_factory=dict)


@dataclass
class TopologyStats:
    """N50/L50 and total-degree statistics."""
    n50: int
    l50: int
    degree_histogram: Dict[int, int] = field(default_factory=dict)
    branching_nodes: int = 0


def compute_n50_l50(lengths: Iterable[int]) -> Tuple[int, int]:
    """
    Compute N50 and L50 of a collection of lengths.

    Lengths are sorted in descending order and accumulated until the running
    sum reaches at least half of the total. N50 is the length at that point
    and L50 its 1-based rank. Returns (0, 0) for no lengths or a zero total.
    """
    arr = np.fromiter(lengths, dtype=np.int64)
    if arr.size == 0:
        return 0, 0
    total = int(arr.sum())
    if total == 0:
        return 0, 0

    descending = np.sort(arr)[::-1]
    cumulative = np.cumsum(descending)
    # First rank where cumsum >= total / 2, kept in integers
    rank = int(np.searchsorted(2 * cumulative, total, side='left'))
    return int(descending[rank]), rank + 1


def compute_n50(lengths: Iterable[int]) -> int:
    return compute_n50_l50(lengths)[0]


def compute_length_histogram(lengths: Iterable[int]) -> List[Tuple[str, int]]:
    """Bucket lengths into LENGTH_BINS; every bin is present in the result."""
    arr = np.fromiter(lengths, dtype=np.int64)
    bins = np.searchsorted(_BIN_EDGES, arr, side='right')
    counts = np.bincount(bins, minlength=len(LENGTH_BINS))
    return [(label, int(count)) for (_, _, label), count in zip(LENGTH_BINS, counts)]


class BaseCounter:
    """Case-insensitive A, C, G, T and N counts accumulated over many sequences."""

    def __init__(self):
        self._counts = np.zeros(256, dtype=np.int64)
        self._batch: List[str] = []
        self._size = 0

    def add(self, sequence: str) -> None:
        self._batch.append(sequence)
        self._size += len(sequence)
        if self._size >= _BATCH_BYTES:
            self._flush()

    def _flush(self) -> None:
        if self._batch:
            self._counts += _byte_counts(''.join(self._batch))
            self._batch = []
            self._size = 0

    def counts(self) -> Dict[str, int]:
        self._flush()
        counts = self._counts
        return {base: int(counts[ord(base)] + counts[ord(base.lower())]) for base in 'ACGTN'}


def count_bases(sequences: Iterable[str]) -> Dict[str, int]:
    """Case-insensitive counts of A, C, G, T and N over all sequences."""
    counter = BaseCounter()
    for sequence in sequences:
        counter.add(sequence)
    return counter.counts()


def _byte_counts(text: str) -> np.ndarray:
    data = np.frombuffer(text.encode('ascii', 'replace'), dtype=np.uint8)
    return np.bincount(data, minlength=256)


def gc_percentage(base_counts: Dict[str, int]) -> float:
    """Percentage of G+C among A/C/G/T bases, 0.0 when there are none."""
    gc = base_counts['G'] + base_counts['C']
    total = gc + base_counts['A'] + base_counts['T']
    if total == 0:
        return 0.0
    return gc / total * 100.0


def compute_gc_content(graph: GfaGraph) -> float:
    return gc_percentage(count_bases(s.sequence for s in graph.segments.values()))


def compute_connected_components(graph: GfaGraph) -> int:
    """
    Count connected components, ignoring link direction and orientation.

    Isolated segments are components of their own. Links touching an
    undefined segment do not connect anything.
    """
    adjacency = {name: [] for name in graph.segments}
    for link in graph.links:
        if link.from_segment in adjacency and link.to_segment in adjacency:
            adjacency[link.from_segment].append(link.to_segment)
            adjacency[link.to_segment].append(link.from_segment)

    visited = set()
    components = 0
    for start in adjacency:
        if start in visited:
            continue
        components += 1
        visited.add(start)
        stack = [start]
        while stack:
            node = stack.pop()
            for neighbor in adjacency[node]:
                if neighbor not in visited:
                    visited.add(neighbor)
                    stack.append(neighbor)

    return components


def degree_counts(graph: GfaGraph) -> Tuple[Dict[str, int], Dict[str, int]]:
    """
    Per-name in- and out-degree.

    Every defined segment starts at zero; link endpoints naming undefined
    segments get an entry in the direction they appear in.
    """
    in_degree = dict.fromkeys(graph.segments, 0)
    out_degree = dict.fromkeys(graph.segments, 0)
    for link in graph.links:
        out_degree[link.from_segment] = out_degree.get(link.from_segment, 0) + 1
        in_degree[link.to_segment] = in_degree.get(link.to_segment, 0) + 1
    return in_degree, out_degree


def degree_distribution(degrees: Iterable[int]) -> Dict[int, int]:
    """Frequency table degree -> number of nodes, sorted by degree."""
    arr = np.fromiter(degrees, dtype=np.int64)
    if arr.size == 0:
        return {}
    counts = np.bincount(arr)
    return {degree: int(count) for degree, count in enumerate(counts) if count}


def compute_degree_distributions(graph: GfaGraph) -> Tuple[Dict[int, int], Dict[int, int]]:
    in_degree, out_degree = degree_counts(graph)
    return degree_distribution(in_degree.values()), degree_distribution(out_degree.values())


def total_degree_stats(total_degree: Dict[str, int]) -> Tuple[Dict[int, int], int]:
    """Total-degree histogram and the number of branching nodes (degree > 2)."""
    histogram = degree_distribution(total_degree.values())
    branching = sum(count for degree, count in histogram.items() if degree > 2)
    return histogram, branching


def compute_path_stats(graph: GfaGraph) -> Tuple[float, int]:
    """Average number of steps per path and total traversed sequence length."""
    if not graph.paths:
        return 0.0, 0

    step_counts = np.array([len(path.steps) for path in graph.paths], dtype=np.int64)
    total_length = 0
    for path in graph.paths:
        for step in path.steps:
            total_length += graph.segment_length(step.segment)

    return float(step_counts.mean()), total_length


def compute_topology_stats(graph: GfaGraph) -> TopologyStats:
    """N50/L50 plus the total-degree histogram and branching node count."""
    n50, l50 = compute_n50_l50(s.length for s in graph.segments.values())

    in_degree, out_degree = degree_counts(graph)
    total_degree = dict(in_degree)
    for name, degree in out_degree.items():
        total_degree[name] = total_degree.get(name, 0) + degree
    histogram, branching = total_degree_stats(total_degree)

    return TopologyStats(n50=n50, l50=l50, degree_histogram=histogram, branching_nodes=branching)


def compute_stats(graph: GfaGraph) -> GfaStats:
    """Compute the full statistics report for a graph."""
    start_time = time.time()

    lengths = np.array([s.length for s in graph.segments.values()], dtype=np.int64)
    if lengths.size:
        min_length = int(lengths.min())
        max_length = int(lengths.max())
        average_length = float(lengths.mean())
    else:
        min_length, max_length, average_length = 0, 0, 0.0

    n50, l50 = compute_n50_l50(lengths)
    average_path_length, total_path_length = compute_path_stats(graph)
    in_distribution, out_distribution = compute_degree_distributions(graph)

    stats = GfaStats(
        segment_count=graph.segment_count(),
        link_count=graph.link_count(),
        path_count=graph.path_count(),
        total_sequence_length=int(lengths.sum()),
        average_segment_length=average_length,
        min_segment_length=min_length,
        max_segment_length=max_length,
        n50=n50,
        l50=l50,
        gc_content=compute_gc_content(graph),
        connected_components=compute_connected_components(graph),
        average_path_length=average_path_length,
        total_path_sequence_length=total_path_length,
        segment_length_histogram=compute_length_histogram(lengths),
        in_degree_distribution=in_distribution,
        out_degree_distribution=out_distribution,
    )

    elapsed = time.time() - start_time
    logging.info(f"Computed statistics in {elapsed:.2f}s")
    return stats
