"""
Scan Command Handler.

Reports the accessors `rewrite` would collapse without touching any file.
"""

from pathlib import Path
from typing import List, Optional

from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from lombocator.config import RuntimeConfig
from lombocator.core.engine import AccessorEngine
from lombocator.core.errors import DiscoveryError
from lombocator.utils.console import console, log_error, log_info


def handle_scan(path: Optional[Path], show_diff: bool = False, exclude: Optional[List[str]] = None) -> int:
  """
  Dry-runs the rewrite over a source tree.

  Args:
      path: Source directory or file. Falls back to `source_dir` from config.
      show_diff: If True, print the unified diff of every file that would change.
      exclude: Extra glob patterns to skip.

  Returns:
      int: Exit code (0 for success, 1 if the tree could not be enumerated).
  """
  search_path = None
  if path is not None:
    search_path = path if path.is_dir() else path.parent

  try:
    config = RuntimeConfig.load(source_dir=path, exclude=exclude, dry_run=True, search_path=search_path)
  except ValueError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1

  engine = AccessorEngine(config)
  try:
    result = engine.run()
  except DiscoveryError as e:
    log_error(escape(str(e)))
    return 1

  if not result.ledger:
    return 0

  table = Table(title="Accessor Candidates")
  table.add_column("File", style="cyan")
  table.add_column("Class")
  table.add_column("Method", style="magenta")
  table.add_column("Marker", style="green")
  table.add_column("Field")
  for record in result.ledger:
    table.add_row(escape(record.path or "-"), record.type_name, record.method_name, record.kind.value, record.field_name)
  console.print(table)

  if show_diff:
    for file_result in result.modified:
      console.print(Syntax(file_result.diff, "diff", theme="ansi_dark"))

  log_info(f"{len(result.ledger)} accessor(s) in {len(result.modified)} file(s) can be collapsed.")
  return 0
