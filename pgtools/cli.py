#!/usr/bin/env python3
"""
pgtools - PanGenome Tools

Command-line interface for reading, analyzing and indexing GFA files.
"""

import argparse
import sys
import logging

from pgtools import __version__
from pgtools.errors import PgToolsError
from pgtools.models.index import IndexType
from pgtools.parsers.gfa_parser import parse_gfa
from pgtools.analysis.graph_stats import compute_stats
from pgtools.analysis.validation import validate_graph
from pgtools.analysis.streaming_stats import (
    compute_basic_stats_from_path,
    compute_graph_stats_from_path,
)
from pgtools.index.builder import build_index
from pgtools.index.storage import save_index, load_index
from pgtools.index.reader import IndexedReader
from pgtools.tools.vg_paths import compute_paths_stats
from pgtools.reporting import text_report
from pgtools.reporting.json_report import to_json
from pgtools.utils.logging import setup_logging


def build_parser():
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(prog='pgtools',
                                     description='PanGenome Tools for reading and indexing GFA files')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    # Debug and logging options
    debug_group = parser.add_argument_group('Debug Options')
    debug_group.add_argument('--debug', action='store_true', help='Enable debug output')
    debug_group.add_argument('--verbose', action='store_true', help='Enable verbose output without full debug')
    debug_group.add_argument('--log-file', help='Write log to this file')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    stats_parser = subparsers.add_parser('stats', help='Display statistics about a GFA file')
    stats_parser.add_argument('--input', '-i', required=True, help='Path to the GFA file')
    stats_parser.add_argument('--format', '-f', choices=['text', 'json'], default='text',
                              help='Output format: text (default) or json')
    stats_parser.add_argument('--output', '-o', help='Output file (default: stdout)')

    index_parser = subparsers.add_parser('index', help='Build an index for a GFA file')
    index_parser.add_argument('--input', '-i', required=True, help='Path to the GFA file')
    index_parser.add_argument('--output', '-o', required=True, help='Output index file path')
    index_parser.add_argument('--index-type', '-t', default='full',
                              help='Type of index to build: segment, path, position, full (default: full)')

    query_parser = subparsers.add_parser('query', help='Query an indexed GFA file')
    query_parser.add_argument('--input', '-i', required=True, help='Path to the GFA file')
    query_parser.add_argument('--index', '-x', required=True, help='Path to the index file')
    query_subparsers = query_parser.add_subparsers(dest='query', help='Query to run')
    query_subparsers.required = True

    segment_parser = query_subparsers.add_parser('segment', help='Get segment information')
    segment_parser.add_argument('--name', '-n', required=True, help='Segment name')
    path_parser = query_subparsers.add_parser('path', help='Get path information')
    path_parser.add_argument('--name', '-n', required=True, help='Path name')
    position_parser = query_subparsers.add_parser('position', help='Query by position')
    position_parser.add_argument('--path', '-p', required=True, help='Path name')
    position_parser.add_argument('--pos', type=int, required=True, help='Position in the path')
    query_subparsers.add_parser('list-segments', help='List all segments')
    query_subparsers.add_parser('list-paths', help='List all paths')

    info_parser = subparsers.add_parser('index-info', help='Show information about an index file')
    info_parser.add_argument('--index', '-i', required=True, help='Path to the index file')

    validate_parser = subparsers.add_parser('validate', help='Validate a GFA file')
    validate_parser.add_argument('--input', '-i', required=True, help='Path to the GFA file')
    validate_parser.add_argument('--verbose', '-v', dest='show_all', action='store_true',
                                 help='Show all validation messages')

    basic_parser = subparsers.add_parser('stats-basic',
                                         help='Streaming record counts and base composition')
    basic_parser.add_argument('gfa_file', help='Input GFA or GFA.GZ file')
    basic_parser.add_argument('--json', action='store_true', help='Output JSON instead of text')

    graph_parser = subparsers.add_parser('stats-graph',
                                         help='Streaming N50, degree and branching statistics')
    graph_parser.add_argument('gfa_file', help='Input GFA or GFA.GZ file')
    graph_parser.add_argument('--json', action='store_true', help='Output JSON instead of text')

    paths_parser = subparsers.add_parser('stats-paths',
                                         help='Per-sample path counts from a vg XG index')
    paths_parser.add_argument('xg_file', help='Input XG file')
    paths_parser.add_argument('--vg', default='vg', help='vg executable (default: vg on PATH)')
    paths_parser.add_argument('--json', action='store_true', help='Output JSON instead of text')

    return parser


def cmd_stats(args):
    graph = parse_gfa(args.input)
    stats = compute_stats(graph)
    output = to_json(stats) + "\n" if args.format == 'json' else text_report.format_stats_summary(stats)

    if args.output:
        with open(args.output, 'w') as f:
            f.write(output)
        print(f"Statistics written to: {args.output}")
    else:
        sys.stdout.write(output)
    return 0


def cmd_index(args):
    index_type = IndexType.parse(args.index_type)
    graph = parse_gfa(args.input)
    index = build_index(graph, args.input, index_type)
    save_index(index, args.output)

    sys.stdout.write(text_report.format_index_summary(index))
    print(f"Index saved to: {args.output}")
    return 0


def cmd_query(args):
    reader = IndexedReader(args.input, args.index)

    if args.query == 'segment':
        output = text_report.format_segment_entry(reader.get_segment(args.name), args.name)
    elif args.query == 'path':
        output = text_report.format_path_entry(reader.get_path(args.name), args.name)
    elif args.query == 'position':
        entry = reader.query_position(args.path, args.pos)
        output = text_report.format_position_entry(entry, args.path, args.pos)
    elif args.query == 'list-segments':
        output = text_report.format_name_list('segments', reader.list_segments())
    else:
        output = text_report.format_name_list('paths', reader.list_paths())

    sys.stdout.write(output)
    return 0


def cmd_index_info(args):
    sys.stdout.write(text_report.format_index_summary(load_index(args.index)))
    return 0


def cmd_validate(args):
    report = validate_graph(parse_gfa(args.input))
    sys.stdout.write(text_report.format_validation_report(report, verbose=args.show_all))
    # Problems are reported, not treated as a failure of the command
    return 0


def cmd_stats_basic(args):
    stats = compute_basic_stats_from_path(args.gfa_file)
    if args.json:
        print(to_json(stats))
    else:
        sys.stdout.write(text_report.format_basic_stats(stats, args.gfa_file))
    return 0


def cmd_stats_graph(args):
    stats = compute_graph_stats_from_path(args.gfa_file)
    if args.json:
        print(to_json(stats))
    else:
        sys.stdout.write(text_report.format_graph_stats(stats, args.gfa_file))
    return 0


def cmd_stats_paths(args):
    stats = compute_paths_stats(args.xg_file, vg_binary=args.vg)
    if args.json:
        print(to_json(stats))
    else:
        sys.stdout.write(text_report.format_paths_stats(stats, args.xg_file))
    return 0


COMMANDS = {
    'stats': cmd_stats,
    'index': cmd_index,
    'query': cmd_query,
    'index-info': cmd_index_info,
    'validate': cmd_validate,
    'stats-basic': cmd_stats_basic,
    'stats-graph': cmd_stats_graph,
    'stats-paths': cmd_stats_paths,
}


def main(argv=None):
    """Main entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(debug=args.debug, log_file=args.log_file, verbose=args.verbose)

    try:
        return COMMANDS[args.command](args)
    except (PgToolsError, OSError) as e:
        logging.error(f"Error: {e}")
        if args.debug:
            import traceback
            logging.error(traceback.format_exc())
        return 1


if __name__ == "__main__":
    sys.exit(main())
