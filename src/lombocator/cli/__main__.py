"""
Main Entry Point for lombocator CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `lombocator.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from lombocator.cli import commands
from lombocator import __version__


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="lombocator: Collapse trivial accessors into field markers")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: REWRITE ---
  cmd_rw = subparsers.add_parser("rewrite", help="Rewrite trivial accessors in place (with backups)")
  cmd_rw.add_argument("path", type=Path, nargs="?", default=None, help="Source directory or file (default: from toml)")
  cmd_rw.add_argument("--report", type=Path, default=None, help="HTML report destination (default: from toml)")
  cmd_rw.add_argument("--backup-suffix", default=None, help="Suffix for backup copies (default: .bak)")
  cmd_rw.add_argument("--marker-module", default=None, help="Module to import Getter/Setter from")
  cmd_rw.add_argument("--exclude", action="append", default=None, help="Glob pattern relative to the root to skip (repeatable)")

  # --- Command: SCAN ---
  cmd_scan = subparsers.add_parser("scan", help="List collapsible accessors without writing anything")
  cmd_scan.add_argument("path", type=Path, nargs="?", default=None, help="Source directory or file (default: from toml)")
  cmd_scan.add_argument("--diff", action="store_true", help="Print the diff of every file that would change")
  cmd_scan.add_argument("--exclude", action="append", default=None, help="Glob pattern relative to the root to skip (repeatable)")

  args = parser.parse_args(argv)

  if args.command == "rewrite":
    return commands.handle_rewrite(args.path, args.report, args.backup_suffix, args.marker_module, args.exclude)

  elif args.command == "scan":
    return commands.handle_scan(args.path, args.diff, args.exclude)

  return 0


if __name__ == "__main__":
  sys.exit(main())
