#!/usr/bin/env python3
"""
Tests for index building, persistence and queries.
"""

import io
import os
import struct
import tempfile
import unittest
from pgtools.errors import IndexFormatError, InputFileNotFoundError, InvalidInputError
from pgtools.index import storage
from pgtools.index.builder import build_index
from pgtools.index.reader import IndexedReader
from pgtools.models.index import IndexType
from pgtools.parsers.gfa_parser import parse_gfa_lines

TEST_GFA = (
    "H\tVN:Z:1.0\n"
    "S\ts1\tACGTACGT\n"
    "S\ts2\tGGGGGGGG\n"
    "S\ts3\tTTTTTTTT\n"
    "L\ts1\t+\ts2\t+\t0M\n"
    "L\ts2\t+\ts3\t+\t0M\n"
    "P\tpath1\ts1+,s2+,s3+\t*\n"
)


class IndexBuilderTests(unittest.TestCase):
    """Test cases for building indexes."""

    def setUp(self):
        self.graph = parse_gfa_lines(io.StringIO(TEST_GFA))

    def test_build_segment_index(self):
        index = build_index(self.graph, "test.gfa", IndexType.SEGMENT)
        self.assertIsNotNone(index.segment_index)
        self.assertIsNone(index.path_index)
        self.assertIsNone(index.position_index)
        self.assertEqual(len(index.segment_index.entries), 3)
        entry = index.get_segment_info('s2')
        self.assertEqual(entry.sequence_length, 8)
        self.assertEqual(entry.file_offset, 1)

    def test_build_path_index(self):
        index = build_index(self.graph, "test.gfa", IndexType.PATH)
        entry = index.get_path_info('path1')
        self.assertEqual(entry.step_count, 3)
        self.assertEqual(entry.total_length, 24)
        self.assertEqual(index.list_paths(), ['path1'])

    def test_build_position_index(self):
        index = build_index(self.graph, "test.gfa", IndexType.POSITION)
        entries = index.position_index.entries['path1']
        self.assertEqual([(e.start, e.end) for e in entries], [(0, 8), (8, 16), (16, 24)])
        self.assertEqual([e.step_index for e in entries], [0, 1, 2])

    def test_query_position(self):
        index = build_index(self.graph, "test.gfa", IndexType.FULL)
        self.assertEqual(index.query_position('path1', 5).segment_name, 's1')
        self.assertEqual(index.query_position('path1', 10).segment_name, 's2')
        self.assertEqual(index.query_position('path1', 20).segment_name, 's3')
        self.assertIsNone(index.query_position('path1', 24))
        self.assertIsNone(index.query_position('path1', -1))
        self.assertIsNone(index.query_position('nope', 0))

    def test_position_starts_cached_per_path(self):
        index = build_index(self.graph, "test.gfa", IndexType.POSITION)
        starts = index.position_index.starts('path1')
        self.assertEqual(starts, [0, 8, 16])
        index.query_position('path1', 9)
        self.assertIs(index.position_index.starts('path1'), starts)
        self.assertEqual(index.position_index.starts('nope'), [])

    def test_position_ranges_tile_path(self):
        graph = parse_gfa_lines(io.StringIO(
            "S\ta\tACG\nS\tb\tT\nS\tc\tGGGGG\nP\tp\ta+,b-,c+,a+\t*\n"))
        index = build_index(graph, "t.gfa", IndexType.FULL)
        total = index.get_path_info('p').total_length
        self.assertEqual(total, 12)
        hits = [index.query_position('p', pos) for pos in range(total)]
        self.assertTrue(all(hit is not None for hit in hits))
        for pos, hit in enumerate(hits):
            self.assertTrue(hit.start <= pos < hit.end)
        self.assertEqual(hits[3].segment_name, 'b')
        self.assertEqual(hits[11].step_index, 3)
        self.assertIsNone(index.query_position('p', total))

    def test_missing_segment_is_zero_length(self):
        graph = parse_gfa_lines(io.StringIO("S\ta\tACGT\nS\tb\tGG\nP\tp\ta+,ghost+,b+\t*\n"))
        index = build_index(graph, "t.gfa", IndexType.POSITION)
        entries = index.position_index.entries['p']
        self.assertEqual([(e.start, e.end) for e in entries], [(0, 4), (4, 4), (4, 6)])
        self.assertEqual(index.query_position('p', 4).segment_name, 'b')

    def test_duplicate_path_names(self):
        graph = parse_gfa_lines(io.StringIO(
            "S\ta\tACGT\nP\tp\ta+\t*\nP\tq\ta+\t*\nP\tp\ta+,a+\t*\n"))
        index = build_index(graph, "t.gfa", IndexType.FULL)
        self.assertEqual(index.list_paths(), ['p', 'q'])
        self.assertEqual(index.get_path_info('p').step_count, 2)
        self.assertEqual(len(index.position_index.entries['p']), 2)

    def test_absent_sub_index_lookups(self):
        index = build_index(self.graph, "test.gfa", IndexType.SEGMENT)
        self.assertIsNone(index.query_position('path1', 0))
        self.assertIsNone(index.get_path_info('path1'))
        self.assertEqual(index.list_paths(), [])
        self.assertEqual(sorted(index.list_segments()), ['s1', 's2', 's3'])

    def test_index_type_parsing(self):
        self.assertEqual(IndexType.parse('segment'), IndexType.SEGMENT)
        self.assertEqual(IndexType.parse('PATH'), IndexType.PATH)
        self.assertEqual(IndexType.parse('pos'), IndexType.POSITION)
        self.assertEqual(IndexType.parse('all'), IndexType.FULL)
        with self.assertRaises(InvalidInputError):
            IndexType.parse('bogus')


class IndexStorageTests(unittest.TestCase):
    """Test cases for saving and loading indexes."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.output_dir = self.temp_dir.name
        self.index_file = os.path.join(self.output_dir, "test.idx")
        self.graph = parse_gfa_lines(io.StringIO(TEST_GFA))

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_save_load_round_trip(self):
        for index_type in IndexType:
            index = build_index(self.graph, "test.gfa", index_type)
            storage.save_index(index, self.index_file)
            loaded = storage.load_index(self.index_file)
            self.assertEqual(loaded, index, msg=str(index_type))

    def test_header_layout(self):
        index = build_index(self.graph, "test.gfa", IndexType.FULL)
        storage.save_index(index, self.index_file)
        with open(self.index_file, 'rb') as f:
            data = f.read()
        self.assertEqual(data[:8], b"ISLOOTGP")
        magic, version, length = struct.unpack("<QIQ", data[:20])
        self.assertEqual(magic, storage.INDEX_MAGIC)
        self.assertEqual(version, 1)
        self.assertEqual(length, len(data) - 20)

    def write_raw(self, data):
        with open(self.index_file, 'wb') as f:
            f.write(data)

    def test_payload_length_beyond_file_size(self):
        for length in (2 ** 64 - 1, 2 ** 60, 2):
            self.write_raw(struct.pack("<QIQ", storage.INDEX_MAGIC, 1, length) + b"\x80")
            with self.assertRaises(IndexFormatError, msg=str(length)) as ctx:
                storage.load_index(self.index_file)
            self.assertIn("Truncated index payload", str(ctx.exception))

    def test_bad_magic(self):
        self.write_raw(struct.pack("<QIQ", 1234, 1, 0))
        with self.assertRaises(IndexFormatError):
            storage.load_index(self.index_file)

    def test_newer_version_rejected(self):
        self.write_raw(struct.pack("<QIQ", storage.INDEX_MAGIC, 2, 0))
        with self.assertRaises(IndexFormatError) as ctx:
            storage.load_index(self.index_file)
        self.assertIn("not supported", str(ctx.exception))

    def test_truncated_files(self):
        index = build_index(self.graph, "test.gfa", IndexType.FULL)
        storage.save_index(index, self.index_file)
        with open(self.index_file, 'rb') as f:
            data = f.read()
        for cut in (4, 19, len(data) - 1):
            self.write_raw(data[:cut])
            with self.assertRaises(IndexFormatError):
                storage.load_index(self.index_file)

    def test_corrupt_payload(self):
        payload = b"\xc1\xc1\xc1"
        self.write_raw(struct.pack("<QIQ", storage.INDEX_MAGIC, 1, len(payload)) + payload)
        with self.assertRaises(IndexFormatError):
            storage.load_index(self.index_file)

    def test_missing_index_file(self):
        with self.assertRaises(InputFileNotFoundError):
            storage.load_index(os.path.join(self.output_dir, "nope.idx"))


class IndexedReaderTests(unittest.TestCase):
    """Test cases for IndexedReader."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.output_dir = self.temp_dir.name
        self.gfa_file = os.path.join(self.output_dir, "test.gfa")
        self.index_file = os.path.join(self.output_dir, "test.idx")
        with open(self.gfa_file, 'w') as f:
            f.write("H\tVN:Z:1.0\nS\ts1\tACGT\nS\ts2\tGGGG\nL\ts1\t+\ts2\t+\t0M\nP\tpath1\ts1+,s2+\t*\n")
        with open(self.gfa_file) as f:
            graph = parse_gfa_lines(f)
        storage.save_index(build_index(graph, self.gfa_file, IndexType.FULL), self.index_file)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_queries(self):
        reader = IndexedReader(self.gfa_file, self.index_file)
        self.assertEqual(reader.get_segment('s1').sequence_length, 4)
        self.assertIsNone(reader.get_segment('s9'))
        self.assertEqual(reader.get_path('path1').total_length, 8)
        self.assertEqual(reader.query_position('path1', 3).segment_name, 's1')
        self.assertEqual(reader.query_position('path1', 5).segment_name, 's2')
        self.assertIsNone(reader.query_position('path1', 8))
        self.assertEqual(sorted(reader.list_segments()), ['s1', 's2'])
        self.assertEqual(reader.list_paths(), ['path1'])
        self.assertEqual(reader.index.source_file, self.gfa_file)

    def test_missing_gfa(self):
        os.remove(self.gfa_file)
        with self.assertRaises(InputFileNotFoundError):
            IndexedReader(self.gfa_file, self.index_file)

if __name__ == '__main__':
    unittest.main()
