"""
Read and write pgtools index files.

Layout, all integers little-endian:

    magic           u64   INDEX_MAGIC
    version         u32   format version
    payload length  u64   number of payload bytes that follow
    payload               msgpack encoded index
"""

import logging
import os
import struct

import msgpack

from pgtools.errors import IndexFormatError, InputFileNotFoundError
from pgtools.models.index import (
    INDEX_VERSION, GfaIndex, PathIndex, PathIndexEntry, PositionIndex,
    PositionIndexEntry, SegmentIndex, SegmentIndexEntry,
)

INDEX_MAGIC = 0x5047544F4F4C5349  # "PGTOOLSI"
HEADER_FORMAT = "<QIQ"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)


def _encode(index: GfaIndex) -> dict:
    payload = {
        'source_file': index.source_file,
        'version': index.version,
        'segment_index': None,
        'path_index': None,
        'position_index': None,
    }
    if index.segment_index is not None:
        payload['segment_index'] = [
            [e.name, e.sequence_length, e.file_offset]
            for e in index.segment_index.entries.values()
        ]
    if index.path_index is not None:
        payload['path_index'] = {
            'entries': [
                [e.name, e.step_count, e.total_length, e.file_offset]
                for e in index.path_index.entries.values()
            ],
            'path_names': list(index.path_index.path_names),
        }
    if index.position_index is not None:
        payload['position_index'] = {
            path_name: [[e.start, e.end, e.segment_name, e.step_index] for e in entries]
            for path_name, entries in index.position_index.entries.items()
        }
    return payload


def _decode(payload: dict) -> GfaIndex:
    index = GfaIndex(source_file=payload['source_file'], version=payload['version'])

    if payload['segment_index'] is not None:
        entries = {}
        for name, sequence_length, file_offset in payload['segment_index']:
            entries[name] = SegmentIndexEntry(name, sequence_length, file_offset)
        index.segment_index = SegmentIndex(entries=entries)

    if payload['path_index'] is not None:
        entries = {}
        for name, step_count, total_length, file_offset in payload['path_index']['entries']:
            entries[name] = PathIndexEntry(name, step_count, total_length, file_offset)
        index.path_index = PathIndex(entries=entries,
                                     path_names=list(payload['path_index']['path_names']))

    if payload['position_index'] is not None:
        entries = {}
        for path_name, rows in payload['position_index'].items():
            entries[path_name] = [
                PositionIndexEntry(path_name, start, end, segment_name, step_index)
                for start, end, segment_name, step_index in rows
            ]
        index.position_index = PositionIndex(entries=entries)

    return index


def save_index(index: GfaIndex, index_file) -> None:
    """Write an index to disk, replacing any existing file."""
    data = msgpack.packb(_encode(index), use_bin_type=True)
    with open(index_file, 'wb') as f:
        f.write(struct.pack(HEADER_FORMAT, INDEX_MAGIC, index.version, len(data)))
        f.write(data)
    logging.info(f"Index saved to {index_file} ({HEADER_SIZE + len(data)} bytes)")


def load_index(index_file) -> GfaIndex:
    """
    Load an index written by save_index.

    Raises:
        InputFileNotFoundError: if the file does not exist
        IndexFormatError: if the file is not a valid index of a supported version
    """
    if not os.path.exists(index_file):
        raise InputFileNotFoundError(index_file)

    with open(index_file, 'rb') as f:
        header = f.read(HEADER_SIZE)
        if len(header) != HEADER_SIZE:
            raise IndexFormatError("Invalid index file format: truncated header")

        magic, version, data_len = struct.unpack(HEADER_FORMAT, header)
        if magic != INDEX_MAGIC:
            raise IndexFormatError("Invalid index file format")
        if version > INDEX_VERSION:
            raise IndexFormatError(
                f"Index version {version} not supported (max: {INDEX_VERSION})")

        available = os.fstat(f.fileno()).st_size - HEADER_SIZE
        if data_len > available:
            raise IndexFormatError(
                f"Truncated index payload: expected {data_len} bytes, got {available}")

        data = f.read(data_len)
        if len(data) != data_len:
            raise IndexFormatError(
                f"Truncated index payload: expected {data_len} bytes, got {len(data)}")
        if f.read(1):
            raise IndexFormatError("Unexpected data after index payload")

    try:
        payload = msgpack.unpackb(data, raw=False)
    except (ValueError, TypeError) as e:
        raise IndexFormatError(f"Corrupt index payload: {e}") from e

    try:
        index = _decode(payload)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise IndexFormatError(f"Corrupt index payload: {e}") from e

    logging.info(f"Loaded index for {index.source_file} from {index_file}")
    return index
