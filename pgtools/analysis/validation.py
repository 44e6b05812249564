"""
Consistency checks for parsed GFA graphs.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from pgtools.models.graph import GfaGraph


@dataclass
class ValidationReport:
    """Problems found in a graph. Errors are dangling references, warnings are empty sequences."""
    segment_count: int
    link_count: int
    path_count: int
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_graph(graph: GfaGraph) -> ValidationReport:
    """
    Check a graph for references to undefined segments and for empty sequences.

    Never raises; every problem is collected in the returned report.
    """
    report = ValidationReport(
        segment_count=graph.segment_count(),
        link_count=graph.link_count(),
        path_count=graph.path_count(),
    )

    for link in graph.links:
        if link.from_segment not in graph.segments:
            report.errors.append(f"Link references undefined segment: {link.from_segment}")
        if link.to_segment not in graph.segments:
            report.errors.append(f"Link references undefined segment: {link.to_segment}")

    for path in graph.paths:
        for step in path.steps:
            if step.segment not in graph.segments:
                report.errors.append(
                    f"Path '{path.name}' references undefined segment: {step.segment}")

    for name, segment in graph.segments.items():
        if not segment.sequence or segment.sequence == '*':
            report.warnings.append(f"Segment '{name}' has empty/placeholder sequence")

    logging.info(f"Validation found {len(report.errors)} errors and {len(report.warnings)} warnings")
    return report
