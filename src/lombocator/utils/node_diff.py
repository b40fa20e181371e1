"""
Diff Helpers.

Produces unified diffs between the original and the rewritten content of a
file.
"""

import difflib


def unified_source_diff(before: str, after: str, path: str = "source.py") -> str:
  """
  Builds a unified diff between two versions of a file.

  Args:
      before: Original file content.
      after: Rewritten file content.
      path: Label used in the diff headers.

  Returns:
      str: The diff text, empty if both versions are identical.
  """
  lines = difflib.unified_diff(
    before.splitlines(keepends=True),
    after.splitlines(keepends=True),
    fromfile=f"a/{path}",
    tofile=f"b/{path}",
  )
  return "".join(lines)
