"""
Data structures representing the outcome of a rewrite run.

`FileResult` describes what happened to one source file; `RunResult` bundles
the per-file results with the run's transformation ledger.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from lombocator.core.ledger import TransformationLedger
from lombocator.core.model import TransformationRecord
from lombocator.enums import FileState


class FileResult(BaseModel):
  """
  Outcome of processing a single file.
  """

  path: Path = Field(description="The source file.")
  state: FileState = Field(default=FileState.LOADED, description="Last lifecycle state reached.")
  records: List[TransformationRecord] = Field(default_factory=list, description="Rewrites applied to the file.")
  errors: List[str] = Field(default_factory=list, description="Errors that stopped processing of the file.")
  backup_path: Optional[Path] = Field(default=None, description="Backup written before overwriting.")
  diff: str = Field(default="", description="Unified diff of the rewrite (dry runs only).")

  @property
  def success(self) -> bool:
    """True if the file was processed without errors."""
    return not self.errors

  @property
  def modified(self) -> bool:
    return self.state is FileState.MODIFIED


class RunResult(BaseModel):
  """
  Outcome of a whole run over a source tree.
  """

  model_config = ConfigDict(arbitrary_types_allowed=True)

  ledger: TransformationLedger = Field(default_factory=TransformationLedger)
  files: List[FileResult] = Field(default_factory=list, description="Per-file results in processing order.")
  report_path: Optional[Path] = Field(default=None, description="Report written, if any.")
  report_error: Optional[str] = Field(default=None, description="Why the report could not be written.")

  @property
  def failures(self) -> List[FileResult]:
    return [f for f in self.files if not f.success]

  @property
  def modified(self) -> List[FileResult]:
    return [f for f in self.files if f.modified]
