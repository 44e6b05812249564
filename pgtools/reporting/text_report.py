"""
Human-readable reports for statistics, indexes and validation results.
"""


def format_stats_summary(stats):
    """Format a GfaStats report."""
    lines = ["=== GFA Graph Statistics ===", ""]
    lines.append(f"Segments (nodes):        {stats.segment_count:>12}")
    lines.append(f"Links (edges):           {stats.link_count:>12}")
    lines.append(f"Paths:                   {stats.path_count:>12}")
    lines.append(f"Connected components:    {stats.connected_components:>12}")
    lines.append("")

    lines.append("--- Sequence Statistics ---")
    lines.append(f"Total sequence length:   {stats.total_sequence_length:>12} bp")
    lines.append(f"Average segment length:  {stats.average_segment_length:>12.2f} bp")
    lines.append(f"Min segment length:      {stats.min_segment_length:>12} bp")
    lines.append(f"Max segment length:      {stats.max_segment_length:>12} bp")
    lines.append(f"N50:                     {stats.n50:>12} bp")
    lines.append(f"L50:                     {stats.l50:>12}")
    lines.append(f"GC content:              {stats.gc_content:>12.2f}%")
    lines.append("")

    if stats.path_count > 0:
        lines.append("--- Path Statistics ---")
        lines.append(f"Average path length:     {stats.average_path_length:>12.2f} segments")
        lines.append(f"Total path seq length:   {stats.total_path_sequence_length:>12} bp")
        lines.append("")

    lines.append("--- Segment Length Distribution ---")
    for label, count in stats.segment_length_histogram:
        if count > 0:
            lines.append(f"{label:>15}: {count:>8}")
    lines.append("")

    lines.append("--- Degree Distribution (degree: in / out) ---")
    degrees = sorted(set(stats.in_degree_distribution) | set(stats.out_degree_distribution))
    for degree in degrees:
        in_count = stats.in_degree_distribution.get(degree, 0)
        out_count = stats.out_degree_distribution.get(degree, 0)
        lines.append(f"{degree:>15}: {in_count:>8} / {out_count:<8}")

    return "\n".join(lines) + "\n"


def format_basic_stats(stats, source):
    lines = [f"Basic stats for {source}", "-" * 41]
    lines.append(f"Total lines        : {stats.total_lines}")
    lines.append(f"Nodes (S)          : {stats.node_count}")
    lines.append(f"Edges (L)          : {stats.edge_count}")
    lines.append(f"Paths (P/W)        : {stats.path_count}")
    lines.append(f"Other records      : {stats.other_records}")
    lines.append(f"Comment lines (#)  : {stats.comment_lines}")
    lines.append("")
    lines.append(f"Total bp           : {stats.total_bp}")
    lines.append(f"Min node length    : {stats.min_node_len}")
    lines.append(f"Max node length    : {stats.max_node_len}")
    lines.append(f"Mean node length   : {stats.mean_node_len:.2f}")
    lines.append("")
    lines.append(f"GC bases           : {stats.gc_bases}")
    lines.append(f"N bases            : {stats.n_bases}")
    return "\n".join(lines) + "\n"


def format_graph_stats(stats, source):
    """Format streaming topology statistics (GraphStats)."""
    basic = stats.basic
    lines = [f"Graph stats for {source}", "-" * 41]
    lines.append(f"Segments (S)        : {basic.node_count}")
    lines.append(f"Edges (L)           : {basic.edge_count}")
    lines.append(f"Other records       : {basic.other_records}")
    lines.append("")
    lines.append(f"Total bp            : {basic.total_bp}")
    lines.append(f"Segment N50         : {stats.n50}")
    lines.append(f"Segment L50         : {stats.l50}")
    lines.append(f"Mean segment length : {basic.mean_node_len:.2f}")
    lines.append("")
    lines.append(f"Branching nodes (deg>2): {stats.branching_nodes}")
    lines.append("Degree histogram (deg -> count):")
    for degree, count in stats.degree_histogram.items():
        lines.append(f"  {degree} -> {count}")
    return "\n".join(lines) + "\n"


def format_paths_stats(stats, source):
    lines = [f"Path stats for {source}", "-" * 41]
    lines.append(f"Total paths (haplotypes): {stats.total_paths}")
    lines.append("Samples:")
    for summary in stats.samples:
        lines.append(f"  {summary.sample} -> {summary.path_count} paths")
    return "\n".join(lines) + "\n"


def format_index_summary(index):
    """Format the sizes of each sub-index of a GfaIndex."""
    summary = index.summary()
    lines = ["=== Index Summary ===", ""]
    lines.append(f"Source file: {summary['source_file']}")
    lines.append(f"Version: {summary['version']}")
    lines.append("")

    if summary['segment_entries'] is None:
        lines.append("Segment index: not built")
    else:
        lines.append(f"Segment index: {summary['segment_entries']} entries")

    if summary['path_entries'] is None:
        lines.append("Path index: not built")
    else:
        lines.append(f"Path index: {summary['path_entries']} entries")

    if summary['position_entries'] is None:
        lines.append("Position index: not built")
    else:
        lines.append(f"Position index: {summary['position_entries']} entries "
                     f"across {summary['position_paths']} paths")

    return "\n".join(lines) + "\n"


def format_validation_report(report, verbose=False, limit=5):
    """Format a ValidationReport; without verbose only the first few messages are shown."""
    lines = ["=== Validation Results ===", ""]
    lines.append(f"Segments: {report.segment_count}")
    lines.append(f"Links: {report.link_count}")
    lines.append(f"Paths: {report.path_count}")
    lines.append("")

    if not report.errors and not report.warnings:
        lines.append("No issues found")

    for title, messages, marker in (("Errors", report.errors, "x"),
                                    ("Warnings", report.warnings, "!")):
        if not messages:
            continue
        lines.append(f"{title} ({len(messages)}):")
        shown = messages if verbose else messages[:limit]
        for message in shown:
            lines.append(f"  {marker} {message}")
        if len(messages) > len(shown):
            lines.append(f"  ... and {len(messages) - len(shown)} more {title.lower()}")
        lines.append("")

    if report.is_valid:
        lines.append("Validation passed")
    else:
        lines.append(f"Validation failed with {len(report.errors)} errors")
    return "\n".join(lines) + "\n"


def format_segment_entry(entry, name):
    if entry is None:
        return f"Segment '{name}' not found in index\n"
    return (f"Segment: {entry.name}\n"
            f"  Sequence length: {entry.sequence_length} bp\n"
            f"  File offset: {entry.file_offset}\n")


def format_path_entry(entry, name):
    if entry is None:
        return f"Path '{name}' not found in index\n"
    return (f"Path: {entry.name}\n"
            f"  Steps: {entry.step_count}\n"
            f"  Total length: {entry.total_length} bp\n")


def format_position_entry(entry, path_name, position):
    if entry is None:
        return f"Position {position} not found in path '{path_name}'\n"
    return (f"Position {position} in path '{path_name}':\n"
            f"  Segment: {entry.segment_name}\n"
            f"  Segment range: {entry.start} - {entry.end}\n"
            f"  Step index: {entry.step_index}\n")


def format_name_list(title, names):
    lines = [f"Indexed {title} ({len(names)}):"]
    lines.extend(f"  {name}" for name in names)
    return "\n".join(lines) + "\n"
