"""
Runtime Configuration Store.

Settings come from the ``[tool.lombocator]`` table of the nearest
``pyproject.toml`` and are overridden by command line arguments.
"""

import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

_DOTTED_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the rewrite engine.
  """

  source_dir: Path = Field(Path("src"), description="Root of the source tree to rewrite.")
  report_file: Path = Field(Path("build/lombocator-report.html"), description="Where the HTML report is written.")
  backup_suffix: str = Field(".bak", description="Suffix appended to a file name to form its backup path.")
  marker_module: str = Field("lombocator.markers", description="Module the Getter/Setter markers are imported from.")
  exclude: List[str] = Field(default_factory=list, description="Glob patterns (relative to the root) to skip.")
  dry_run: bool = Field(False, description="If True, rewrite in memory only; nothing is written to disk.")

  @field_validator("backup_suffix")
  @classmethod
  def validate_backup_suffix(cls, v: str) -> str:
    """
    Ensures the backup lands next to the original under a distinct name.

    Raises:
        ValueError: If the suffix is empty, does not start with '.', or
            contains a path separator.
    """
    if len(v) < 2 or not v.startswith("."):
      raise ValueError(f"Backup suffix must start with '.' and not be empty, got '{v}'")
    if "/" in v or "\\" in v:
      raise ValueError(f"Backup suffix cannot contain path separators: '{v}'")
    return v

  @field_validator("marker_module")
  @classmethod
  def validate_marker_module(cls, v: str) -> str:
    """
    Ensures the marker module is an importable dotted path.

    Raises:
        ValueError: If the value is not a dotted identifier.
    """
    v_clean = v.strip()
    if not _DOTTED_IDENTIFIER.match(v_clean):
      raise ValueError(f"Invalid marker module: '{v}'")
    return v_clean

  @classmethod
  def load(
    cls,
    source_dir: Optional[Path] = None,
    report_file: Optional[Path] = None,
    backup_suffix: Optional[str] = None,
    marker_module: Optional[str] = None,
    exclude: Optional[List[str]] = None,
    dry_run: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Relative paths found in the TOML file are resolved against the directory
    holding that file; CLI paths are used as given.

    Args:
        source_dir (Optional[Path]): Override for the source root.
        report_file (Optional[Path]): Override for the report location.
        backup_suffix (Optional[str]): Override for the backup suffix.
        marker_module (Optional[str]): Override for the marker import module.
        exclude (Optional[List[str]]): Extra exclusion patterns (added to TOML ones).
        dry_run (Optional[bool]): Override for dry-run mode.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)

    def _toml_path(key: str) -> Optional[Path]:
      if key not in toml_config:
        return None
      raw = Path(toml_config[key])
      return (toml_dir / raw) if toml_dir and not raw.is_absolute() else raw

    values: Dict[str, Any] = {}

    final_source = source_dir or _toml_path("source_dir")
    if final_source is not None:
      values["source_dir"] = final_source

    final_report = report_file or _toml_path("report_file")
    if final_report is not None:
      values["report_file"] = final_report

    final_suffix = backup_suffix or toml_config.get("backup_suffix")
    if final_suffix is not None:
      values["backup_suffix"] = final_suffix

    final_module = marker_module or toml_config.get("marker_module")
    if final_module is not None:
      values["marker_module"] = final_module

    values["exclude"] = [*toml_config.get("exclude", []), *(exclude or [])]

    if dry_run is not None:
      values["dry_run"] = dry_run
    elif "dry_run" in toml_config:
      values["dry_run"] = toml_config["dry_run"]

    return cls(**values)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches `start_path` and its parents for 'pyproject.toml' and extracts config.

  The search stops at the first pyproject.toml found, even if it has no
  ``[tool.lombocator]`` table. An unreadable or malformed file yields no config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None
      return data.get("tool", {}).get("lombocator", {}), parent

  return {}, None
