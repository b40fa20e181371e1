"""
Exception hierarchy for the rewrite engine.

Only `DiscoveryError` is fatal to a run; every other error is scoped to a
single file (or to the report) and is caught and logged by the engine.
"""


class LombocatorError(Exception):
  """Base class for all lombocator errors."""


class DiscoveryError(LombocatorError):
  """Raised when the source tree cannot be enumerated."""


class SourceParseError(LombocatorError):
  """Raised when a file cannot be read or is not valid Python."""


class BackupError(LombocatorError):
  """Raised when the backup copy of a file cannot be written."""


class PersistError(LombocatorError):
  """Raised when the rewritten file cannot be written after a successful backup."""


class ReportWriteError(LombocatorError):
  """Raised when the transformation report cannot be written."""
