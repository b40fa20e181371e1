"""
Enumerations for lombocator.

This module defines the marker kinds the rewriter can emit and the lifecycle
states a source file goes through while it is scanned.
"""

from enum import Enum


class AccessorKind(str, Enum):
  """
  Kind of trivial accessor, named after the marker that replaces it.

  The value doubles as the marker name imported into rewritten files.
  """

  GETTER = "Getter"
  SETTER = "Setter"

  def default_method(self, field: str) -> str:
    """Accessor name a bare marker stands for, e.g. ``get_name``."""
    prefix = "get" if self is AccessorKind.GETTER else "set"
    return f"{prefix}_{field}"


class FileState(str, Enum):
  """
  Lifecycle of a single source file during a run.

  ``LOADED -> SCANNED -> {UNCHANGED | MODIFIED}``
  """

  LOADED = "loaded"
  SCANNED = "scanned"
  UNCHANGED = "unchanged"
  MODIFIED = "modified"
