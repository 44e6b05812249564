"""
Parser for GFA (Graphical Fragment Assembly) files.
"""

import gzip
import logging
import os
import time
from typing import Iterable, Iterator, List, Tuple

from pgtools.errors import GfaParseError, InvalidInputError, InputFileNotFoundError
from pgtools.models.graph import (
    GfaGraph, GfaPath, Link, Orientation, PathStep, Segment,
)


def open_gfa(gfa_file):
    """Open a GFA file for reading as text, decompressing .gz files."""
    if not os.path.exists(gfa_file):
        raise InputFileNotFoundError(gfa_file)
    if str(gfa_file).endswith('.gz'):
        return gzip.open(gfa_file, 'rt', encoding='utf-8')
    return open(gfa_file, 'r', encoding='utf-8')


def numbered_lines(lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
    """
    Yield (line number, line) pairs, 1-based.

    Undecodable input is reported as a GfaParseError. Text streams decode
    ahead in blocks, so the reported line is the first one not yet read.
    """
    iterator = iter(lines)
    line_num = 0
    while True:
        try:
            line = next(iterator)
        except StopIteration:
            return
        except UnicodeDecodeError as e:
            raise GfaParseError(line_num + 1, f"Input is not valid UTF-8: {e.reason}") from e
        line_num += 1
        yield line_num, line


class GFAParser:
    """Single pass parser building a GfaGraph from GFA records."""

    def __init__(self):
        """Initialize the GFA parser."""
        self.graph = GfaGraph()

    def parse(self, gfa_file) -> GfaGraph:
        """
        Parse a GFA file.

        Args:
            gfa_file: Path to the GFA file, optionally gzip compressed

        Returns:
            The parsed GfaGraph

        Raises:
            InputFileNotFoundError: if the file does not exist
            GfaParseError: on the first malformed record
        """
        start_time = time.time()
        logging.info(f"Parsing GFA file: {gfa_file}")

        with open_gfa(gfa_file) as f:
            graph = self.parse_lines(f)

        elapsed = time.time() - start_time
        logging.info(f"Finished parsing GFA in {elapsed:.2f}s: {graph.segment_count()} segments, "
                     f"{graph.link_count()} links, {graph.path_count()} paths")
        return graph

    def parse_lines(self, lines: Iterable[str]) -> GfaGraph:
        """Parse GFA records from an iterable of text lines."""
        for line_num, line in numbered_lines(lines):
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            fields = line.split('\t')
            record_type = fields[0]

            if record_type == 'H':
                self._parse_header(fields, line_num)
            elif record_type == 'S':
                self._parse_segment(fields, line_num)
            elif record_type == 'L':
                self._parse_link(fields, line_num)
            elif record_type == 'P':
                self._parse_path(fields, line_num)
            elif record_type == 'W':
                self._parse_walk(fields, line_num)
            else:
                logging.debug(f"Line {line_num}: skipping record type {record_type}")

        return self.graph

    def _parse_header(self, fields: List[str], line_num: int) -> None:
        """Parse a header record."""
        header = self.graph.header
        for field in fields[1:]:
            if ':' not in field:
                continue
            key, value = field.split(':', 1)
            if key == 'VN':
                header.version = value
            else:
                header.tags[key] = value

    def _parse_segment(self, fields: List[str], line_num: int) -> None:
        """Parse a segment record."""
        if len(fields) < 3:
            raise GfaParseError(line_num, "Segment record requires at least 3 fields")

        name = fields[1]
        tags = {}
        for field in fields[3:]:
            if ':' in field:
                key, value = field.split(':', 1)
                tags[key] = value

        if name in self.graph.segments:
            logging.debug(f"Line {line_num}: segment {name} redefined")
        self.graph.segments[name] = Segment(name=name, sequence=fields[2], tags=tags)

    def _parse_link(self, fields: List[str], line_num: int) -> None:
        """Parse a link record."""
        if len(fields) < 6:
            raise GfaParseError(line_num, "Link record requires at least 6 fields")

        self.graph.links.append(Link(
            from_segment=fields[1],
            from_orient=self._orientation(fields[2], line_num),
            to_segment=fields[3],
            to_orient=self._orientation(fields[4], line_num),
            overlap=fields[5],
        ))

    def _parse_path(self, fields: List[str], line_num: int) -> None:
        """Parse a path record."""
        if len(fields) < 3:
            raise GfaParseError(line_num, "Path record requires at least 3 fields")

        steps = []
        for step in fields[2].split(','):
            step = step.strip()
            if not step:
                continue
            if step[-1] not in '+-':
                raise GfaParseError(line_num, f"Path step missing orientation: {step}")
            if len(step) < 2:
                raise GfaParseError(line_num, f"Path step missing segment name: {step}")
            steps.append(PathStep(step[:-1], self._orientation(step[-1], line_num)))

        overlaps = None
        if len(fields) > 3 and fields[3] and fields[3] != '*':
            overlaps = fields[3].split(',')

        self.graph.paths.append(GfaPath(name=fields[1], steps=steps, overlaps=overlaps))

    def _parse_walk(self, fields: List[str], line_num: int) -> None:
        """Parse a walk record: W sample haplotype seq_id seq_start seq_end walk."""
        if len(fields) < 7:
            raise GfaParseError(line_num, "Walk record requires at least 7 fields")

        name = f"{fields[1]}#{fields[2]}#{fields[3]}"
        steps = []
        current = []
        orientation = None

        for char in fields[6]:
            if char in '><':
                if orientation is not None and current:
                    steps.append(PathStep(''.join(current), orientation))
                current = []
                orientation = Orientation.FORWARD if char == '>' else Orientation.REVERSE
            elif orientation is not None:
                current.append(char)

        if orientation is not None and current:
            steps.append(PathStep(''.join(current), orientation))

        self.graph.paths.append(GfaPath(name=name, steps=steps))

    @staticmethod
    def _orientation(value: str, line_num: int) -> Orientation:
        try:
            return Orientation.from_char(value)
        except InvalidInputError as e:
            raise GfaParseError(line_num, str(e)) from e


def parse_gfa(gfa_file) -> GfaGraph:
    """Parse a GFA file into a GfaGraph."""
    return GFAParser().parse(gfa_file)


def parse_gfa_lines(lines: Iterable[str]) -> GfaGraph:
    """Parse GFA records from already opened text, e.g. a StringIO."""
    return GFAParser().parse_lines(lines)
