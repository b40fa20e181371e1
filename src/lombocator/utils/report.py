"""
Transformation Report Renderer.

Turns the entries of a `TransformationLedger` into a small HTML document,
one list item per applied rewrite, in application order.
"""

import html
from pathlib import Path
from typing import Iterable

from lombocator.core.errors import ReportWriteError
from lombocator.core.ledger import TransformationLedger

REPORT_TITLE = "Lombocator Refactor Report"


def render_report(entries: Iterable[str], title: str = REPORT_TITLE) -> str:
  """
  Renders report entries as an HTML list.

  Args:
      entries: Lines such as ``"Getter -> field: Person.name"``.
      title: Page title and heading.

  Returns:
      str: The complete HTML document.
  """
  safe_title = html.escape(title)
  lines = [
    "<html>",
    f"<head><title>{safe_title}</title></head>",
    "<body>",
    f"<h1>{safe_title}</h1>",
    "<ul>",
  ]
  lines.extend(f"<li>{html.escape(entry)}</li>" for entry in entries)
  lines.extend(["</ul>", "</body>", "</html>", ""])
  return "\n".join(lines)


def write_report(path: Path, ledger: TransformationLedger) -> Path:
  """
  Writes the report for `ledger` to `path`, creating parent directories.

  Args:
      path: Destination file.
      ledger: Transformations applied during the run.

  Returns:
      Path: The written file.

  Raises:
      ReportWriteError: If the file cannot be written.
  """
  try:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(ledger.entries()), encoding="utf-8")
  except OSError as e:
    raise ReportWriteError(f"Failed to write report {path}: {e}") from e
  return path
