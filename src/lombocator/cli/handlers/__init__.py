from .rewrite import handle_rewrite, _print_run_summary
from .scan import handle_scan

__all__ = [
  "_print_run_summary",
  "handle_rewrite",
  "handle_scan",
]
