"""
CLI Command Handlers Facade.

Re-exports handlers from `lombocator.cli.handlers` so the dispatcher (and
tests patching it) have a single import location.
"""

from lombocator.cli.handlers.rewrite import handle_rewrite, _print_run_summary
from lombocator.cli.handlers.scan import handle_scan

__all__ = [
  "_print_run_summary",
  "handle_rewrite",
  "handle_scan",
]
