"""
Safe Writer.

Persists a rewritten source unit over its original file. The original bytes
are first copied to a sibling backup file; only once that copy exists is the
original overwritten. A failed overwrite leaves the backup as the recovery
path. There is no automatic rollback.
"""

import shutil
from pathlib import Path

from lombocator.core.errors import BackupError, PersistError
from lombocator.core.model import SourceUnit

DEFAULT_BACKUP_SUFFIX = ".bak"


class SafeWriter:
  """
  Backup-then-overwrite file writer.

  Attributes:
      backup_suffix (str): Appended to the file name to form the backup path
          (``Person.py`` -> ``Person.py.bak``).
  """

  def __init__(self, backup_suffix: str = DEFAULT_BACKUP_SUFFIX) -> None:
    self.backup_suffix = backup_suffix

  def backup_path(self, path: Path) -> Path:
    return path.with_name(path.name + self.backup_suffix)

  def backup(self, path: Path) -> Path:
    """
    Copies the file to its backup path, replacing any older backup.

    Raises:
        BackupError: If the copy cannot be made.
    """
    target = self.backup_path(path)
    try:
      shutil.copyfile(path, target)
    except OSError as e:
      raise BackupError(f"Cannot back up {path} to {target}: {e}") from e
    return target

  def persist(self, unit: SourceUnit, path: Path) -> Path:
    """
    Writes the rewritten unit over `path` after backing the file up.

    Args:
        unit: The rewritten source unit.
        path: The original file.

    Returns:
        Path: Location of the backup copy.

    Raises:
        BackupError: The backup failed; the original was not touched.
        PersistError: The overwrite failed; the backup holds the original.
    """
    backup = self.backup(path)
    try:
      # Bytes, so the original newline style is not translated
      path.write_bytes(unit.module.bytes)
    except OSError as e:
      raise PersistError(f"Cannot write {path} (original kept in {backup}): {e}") from e
    return backup
