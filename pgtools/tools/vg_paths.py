"""
Per-sample path counts from a vg XG index.

Path names follow the SAMPLE#HAPLOTYPE#CONTIG convention; the sample is
the text before the first '#'.
"""

import logging
import os
import subprocess
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List

from pgtools.errors import ExternalToolError, InputFileNotFoundError


@dataclass
class SampleSummary:
    sample: str
    path_count: int


@dataclass
class PathsStats:
    total_paths: int = 0
    samples: List[SampleSummary] = field(default_factory=list)


def summarize_path_names(names: Iterable[str]) -> PathsStats:
    """Count path names per sample, samples sorted by name."""
    counts = Counter()
    total = 0
    for name in names:
        name = name.strip()
        if not name:
            continue
        total += 1
        counts[name.split('#', 1)[0]] += 1

    samples = [SampleSummary(sample, count) for sample, count in sorted(counts.items())]
    return PathsStats(total_paths=total, samples=samples)


def list_vg_paths(xg_file, vg_binary='vg') -> List[str]:
    """Run `vg paths -L -x` and return its output lines."""
    if not os.path.exists(xg_file):
        raise InputFileNotFoundError(xg_file)

    cmd = [vg_binary, 'paths', '-L', '-x', str(xg_file)]
    logging.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise ExternalToolError(f"failed to invoke {vg_binary}: {e}") from e

    if result.returncode != 0:
        raise ExternalToolError(
            f"vg paths failed with status {result.returncode}: {result.stderr.strip()}")
    return result.stdout.splitlines()


def compute_paths_stats(xg_file, vg_binary='vg') -> PathsStats:
    stats = summarize_path_names(list_vg_paths(xg_file, vg_binary))
    logging.info(f"Found {stats.total_paths} paths from {len(stats.samples)} samples")
    return stats
