"""
Tests for the Diff Helpers.
"""

from lombocator.utils.node_diff import unified_source_diff


def test_unified_diff_headers_and_lines():
  diff = unified_source_diff("a = 1\nb = 2\n", "a = 1\n", "pkg/mod.py")
  assert "--- a/pkg/mod.py" in diff
  assert "+++ b/pkg/mod.py" in diff
  assert "-b = 2" in diff


def test_unified_diff_identical_is_empty():
  assert unified_source_diff("x = 1\n", "x = 1\n") == ""
