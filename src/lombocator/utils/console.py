"""
Central Logging and Console Utilities.

All user-facing output of lombocator goes through the Python standard `logging`
library, rendered by `rich`.

The module provides:
1.  **Standard Logging Integration**: a `RichHandler` attached to the root logger and
    helper functions (`log_info`, `log_success`, `log_warning`, `log_error`).
2.  **Console Injection**: a proxy around the Rich Console so the output destination
    (stdout or an in-memory recording console) can be swapped via `set_console`.
    Tests use this to capture summaries and log lines.

Attributes:
    console (_ConsoleProxy): A global, stable reference to the active Rich Console.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Between INFO and WARNING
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
    "code": "bold magenta",
  }
)


class _ConsoleProxy:
  """
  A Proxy wrapper around `rich.console.Console`.

  All printing is forwarded to the backend console. Swapping the backend also
  re-targets the logging handler, so `logging.info(...)` follows the console.

  Attributes:
      _backend (Console): The active Rich Console instance.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME)
    self._configure_logging()

  def set_backend(self, new_console: Console) -> None:
    """
    Injects a new Console backend and updates logging handlers.

    Args:
        new_console (Console): The new Rich Console instance to use.
    """
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    """Resets the proxy to a fresh standard output console."""
    self._backend = Console(theme=_THEME)
    self._configure_logging()

  @property
  def backend(self) -> Console:
    """The currently active Console."""
    return self._backend

  def _configure_logging(self) -> None:
    # Drop stale RichHandlers so records are not duplicated or sent to an old console
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
      if isinstance(handler, RichHandler):
        root_logger.removeHandler(handler)

    rich_handler = RichHandler(
      console=self._backend,
      show_time=False,
      omit_repeated_times=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )

    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(rich_handler)

  def print(self, *args: Any, **kwargs: Any) -> None:
    """
    Forwards `print` calls to the active backend.

    Args:
        *args: Positional arguments for Rich print.
        **kwargs: Keyword arguments for Rich print.
    """
    self._backend.print(*args, **kwargs)

  def export_text(self, **kwargs: Any) -> str:
    """
    Forwards `export_text` (useful for log capturing).

    Args:
        **kwargs: Options passed to console.export_text.

    Returns:
        str: The captured text output.
    """
    return self._backend.export_text(**kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


# Modules import this object; the implementation behind it changes via `set_console`.
console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Global helper to inject a specific console instance.

  Args:
      new_console (Console): The configured Rich console to use globally.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Global helper to reset logging and console to standard output."""
  console.reset()


def log_info(msg: str) -> None:
  """
  Logs an informational message via standard logging.

  Args:
      msg (str): The message content. Can include rich markup like [bold].
  """
  logging.info(f"ℹ️  {msg}", extra={"markup": True})


def log_success(msg: str) -> None:
  """
  Logs a success message via standard logging.

  Args:
      msg (str): The message content.
  """
  logging.log(SUCCESS_LEVEL_NUM, f"✅ {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  """
  Logs a warning message via standard logging.

  Args:
      msg (str): The message content.
  """
  logging.warning(f"⚠️  {msg}", extra={"markup": True})


def log_error(msg: str) -> None:
  """
  Logs an error message via standard logging.

  Args:
      msg (str): The message content.
  """
  logging.error(f"❌ {msg}", extra={"markup": True})
