#!/usr/bin/env python3
"""
Tests for the vg path population summary.
"""

import os
import subprocess
import tempfile
import unittest
from unittest.mock import patch
from pgtools.errors import ExternalToolError, InputFileNotFoundError
from pgtools.tools import vg_paths

class VgPathsTests(unittest.TestCase):
    """Test cases for per-sample path counting."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.xg_file = os.path.join(self.temp_dir.name, "graph.xg")
        with open(self.xg_file, 'wb') as f:
            f.write(b"\0")

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_summarize_path_names(self):
        names = ["HG002#1#chr1", "HG002#2#chr1", "", "CHM13#0#chr1", "GRCh38"]
        stats = vg_paths.summarize_path_names(names)
        self.assertEqual(stats.total_paths, 4)
        self.assertEqual([(s.sample, s.path_count) for s in stats.samples],
                         [("CHM13", 1), ("GRCh38", 1), ("HG002", 2)])

    @patch('pgtools.tools.vg_paths.subprocess.run')
    def test_compute_paths_stats(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=0, stdout="HG002#1#chr1\nHG002#2#chr1\n", stderr="")
        stats = vg_paths.compute_paths_stats(self.xg_file)
        self.assertEqual(stats.total_paths, 2)
        cmd = mock_run.call_args[0][0]
        self.assertEqual(cmd, ['vg', 'paths', '-L', '-x', self.xg_file])

    @patch('pgtools.tools.vg_paths.subprocess.run')
    def test_vg_failure(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=1, stdout="", stderr="bad index")
        with self.assertRaises(ExternalToolError) as ctx:
            vg_paths.compute_paths_stats(self.xg_file)
        self.assertIn("bad index", str(ctx.exception))

    @patch('pgtools.tools.vg_paths.subprocess.run', side_effect=FileNotFoundError("vg"))
    def test_vg_missing(self, mock_run):
        with self.assertRaises(ExternalToolError):
            vg_paths.compute_paths_stats(self.xg_file)

    def test_missing_xg(self):
        with self.assertRaises(InputFileNotFoundError):
            vg_paths.compute_paths_stats(os.path.join(self.temp_dir.name, "none.xg"))

if __name__ == '__main__':
    unittest.main()
