"""
Orchestration Engine.

The `AccessorEngine` runs the whole rewrite over a source tree as an ordered
fold over the discovered files:

1.  **Discovery**: enumerate ``*.py`` files under the root, honouring the
    configured exclusion patterns. Failure here aborts the run.
2.  **Parse**: read the file bytes and parse them into a LibCST module.
3.  **Rewrite**: run the `RewriteCoordinator` over the module.
4.  **Persist**: for modified files only, back up the original and overwrite
    it through the `SafeWriter`.
5.  **Ledger**: merge the file's records into the run ledger.

After the fold the HTML report is written if at least one rewrite was applied.
Every per-file failure is logged, recorded on the file's `FileResult` and
skipped; only discovery errors propagate.
"""

from fnmatch import fnmatch
from pathlib import Path
from typing import List, Optional, Tuple

import libcst as cst
from rich.markup import escape

from lombocator.config import RuntimeConfig
from lombocator.core.conversion_result import FileResult, RunResult
from lombocator.core.coordinator import rewrite
from lombocator.core.errors import BackupError, DiscoveryError, PersistError, ReportWriteError, SourceParseError
from lombocator.core.ledger import TransformationLedger
from lombocator.core.model import SourceUnit, TransformationRecord
from lombocator.core.writer import SafeWriter
from lombocator.enums import FileState
from lombocator.utils.console import log_error, log_info, log_success
from lombocator.utils.node_diff import unified_source_diff
from lombocator.utils.report import write_report


class AccessorEngine:
  """
  Rewrites trivial accessors across a source tree.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None, ledger: Optional[TransformationLedger] = None) -> None:
    """
    Initializes the Engine.

    Args:
        config (RuntimeConfig, optional): Runtime settings. Defaults are used if None.
        ledger (TransformationLedger, optional): Ledger to append to. A new
            one is created if None.
    """
    self.config = config or RuntimeConfig()
    self.ledger = ledger if ledger is not None else TransformationLedger()
    self.writer = SafeWriter(self.config.backup_suffix)

  def parse(self, code: str) -> SourceUnit:
    """
    Parses source text into a unit.

    Raises:
        libcst.ParserSyntaxError: If the input code is invalid Python.
    """
    return SourceUnit.parse(code)

  def rewrite_code(self, code: str) -> Tuple[str, List[TransformationRecord]]:
    """
    Rewrites source text in memory. Nothing is written and the ledger is left alone.

    Args:
        code: Python source.

    Returns:
        Tuple[str, List[TransformationRecord]]: The rewritten source and the
        records of the applied rewrites.
    """
    unit = self.parse(code)
    records = rewrite(unit, self.config.marker_module)
    return unit.code, records

  def discover(self, root: Path) -> List[Path]:
    """
    Lists the Python files to process, in a stable order.

    Args:
        root: A directory to walk, or a single file.

    Returns:
        List[Path]: Files not matched by any exclusion pattern.

    Raises:
        DiscoveryError: If the root does not exist or cannot be listed.
    """
    if root.is_file():
      return [root]
    if not root.is_dir():
      raise DiscoveryError(f"Source directory not found: {root}")

    try:
      candidates = sorted(p for p in root.rglob("*.py") if p.is_file())
    except OSError as e:
      raise DiscoveryError(f"Cannot list {root}: {e}") from e

    return [p for p in candidates if not self._is_excluded(p.relative_to(root))]

  def _is_excluded(self, rel_path: Path) -> bool:
    rel = rel_path.as_posix()
    return any(fnmatch(rel, pattern) for pattern in self.config.exclude)

  def load(self, path: Path) -> SourceUnit:
    """
    Reads and parses one file.

    Raises:
        SourceParseError: If the file cannot be read or is not valid Python.
    """
    try:
      return SourceUnit.parse(path.read_bytes(), path=path)
    except OSError as e:
      raise SourceParseError(f"Cannot read {path}: {e}") from e
    except (cst.ParserSyntaxError, UnicodeDecodeError, LookupError) as e:
      raise SourceParseError(f"Cannot parse {path}: {e}") from e

  def process_file(self, path: Path) -> FileResult:
    """
    Parses, rewrites and (when modified) persists one file.

    The file's records are merged into the run ledger only once the rewrite
    reached disk, or immediately in dry-run mode.

    Args:
        path: The source file.

    Returns:
        FileResult: What happened to the file. Never raises for per-file errors.
    """
    result = FileResult(path=path)

    try:
      unit = self.load(path)
    except SourceParseError as e:
      log_error(f"Skipping {escape(str(path))}: {escape(str(e))}")
      result.errors.append(str(e))
      return result

    original = unit.code
    records = rewrite(unit, self.config.marker_module)
    result.state = unit.state
    result.records = records

    if unit.state is FileState.UNCHANGED:
      return result

    if self.config.dry_run:
      result.diff = unified_source_diff(original, unit.code, path.as_posix())
      self.ledger.extend(records)
      return result

    try:
      result.backup_path = self.writer.persist(unit, path)
    except BackupError as e:
      log_error(f"Backup failed, {escape(str(path))} left untouched: {escape(str(e))}")
      result.errors.append(str(e))
      return result
    except PersistError as e:
      log_error(escape(str(e)))
      result.errors.append(str(e))
      result.backup_path = self.writer.backup_path(path)
      return result

    self.ledger.extend(records)
    log_success(f"Rewrote {len(records)} accessor(s) in [path]{escape(str(path))}[/path]")
    return result

  def run(self, root: Optional[Path] = None) -> RunResult:
    """
    Processes every discovered file, then writes the report.

    Args:
        root: Source root; defaults to `config.source_dir`.

    Returns:
        RunResult: Ledger, per-file results and the report location.

    Raises:
        DiscoveryError: If the source tree cannot be enumerated.
    """
    source_root = root or self.config.source_dir
    files = self.discover(source_root)
    log_info(f"Scanning {len(files)} file(s) under [path]{escape(str(source_root))}[/path]")

    result = RunResult(ledger=self.ledger)
    recorded = len(self.ledger)
    for path in files:
      result.files.append(self.process_file(path))

    if len(self.ledger) == recorded:
      log_info("No trivial accessors found.")
      return result

    if self.config.dry_run:
      return result

    try:
      result.report_path = write_report(self.config.report_file, self.ledger)
      log_info(f"Report written to [path]{escape(str(result.report_path))}[/path]")
    except ReportWriteError as e:
      log_error(escape(str(e)))
      result.report_error = str(e)

    return result
