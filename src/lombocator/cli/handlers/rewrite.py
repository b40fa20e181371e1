"""
Rewrite Command Handler.

This module implements the logic for the `lombocator rewrite` command:
1. Configuration loading (pyproject.toml + CLI overrides).
2. Engine execution over the source tree.
3. Summary table output.
"""

from pathlib import Path
from typing import List, Optional

from rich.markup import escape
from rich.table import Table

from lombocator.config import RuntimeConfig
from lombocator.core.conversion_result import RunResult
from lombocator.core.engine import AccessorEngine
from lombocator.core.errors import DiscoveryError
from lombocator.utils.console import console, log_error, log_success


def handle_rewrite(
  path: Optional[Path],
  report_file: Optional[Path],
  backup_suffix: Optional[str],
  marker_module: Optional[str],
  exclude: Optional[List[str]],
) -> int:
  """
  Handles the 'rewrite' command execution.

  Args:
      path: Source directory or file. Falls back to `source_dir` from config.
      report_file: Override for the HTML report location.
      backup_suffix: Override for the backup suffix.
      marker_module: Override for the marker import module.
      exclude: Extra glob patterns to skip.

  Returns:
      int: Exit code (0 for success, 1 if the tree could not be enumerated).
  """
  search_path = None
  if path is not None:
    search_path = path if path.is_dir() else path.parent

  try:
    config = RuntimeConfig.load(
      source_dir=path,
      report_file=report_file,
      backup_suffix=backup_suffix,
      marker_module=marker_module,
      exclude=exclude,
      dry_run=False,
      search_path=search_path,
    )
  except ValueError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1

  engine = AccessorEngine(config)
  try:
    result = engine.run()
  except DiscoveryError as e:
    log_error(escape(str(e)))
    return 1

  _print_run_summary(result)
  return 0


def _print_run_summary(result: RunResult) -> None:
  """
  Renders the applied rewrites and any per-file failures.

  Args:
      result: Outcome of the run.
  """
  if result.ledger:
    table = Table(title="Collapsed Accessors")
    table.add_column("File", style="cyan")
    table.add_column("Class")
    table.add_column("Field")
    table.add_column("Marker", style="green")
    table.add_column("Removed Method", style="dim")

    for record in result.ledger:
      table.add_row(escape(record.path or "-"), record.type_name, record.field_name, record.kind.value, record.method_name)
    console.print(table)

  failures = result.failures
  if failures:
    fail_table = Table(title="Skipped Files")
    fail_table.add_column("File", style="cyan")
    fail_table.add_column("Issues", style="red")
    for res in failures:
      fail_table.add_row(escape(str(res.path)), escape("; ".join(res.errors)))
    console.print(fail_table)

  total = len(result.files)
  modified = len(result.modified)
  if not failures:
    log_success(f"Run Complete: {len(result.ledger)} accessor(s) collapsed in {modified}/{total} files.")
  else:
    console.print(
      f"\n[bold]Summary:[/bold] {len(result.ledger)} accessor(s) collapsed, "
      f"{modified} file(s) rewritten, {len(failures)} skipped."
    )
