"""
Transformation Ledger.

Append-only, ordered log of the rewrites applied during one run. It is the
source of the final report. Appends are serialized with a lock so per-file
results produced by parallel workers can be merged into one ledger.
"""

import threading
from typing import Iterable, Iterator, List

from lombocator.core.model import TransformationRecord


class TransformationLedger:
  """
  Ordered collection of `TransformationRecord` objects that only grows.
  """

  def __init__(self) -> None:
    self._records: List[TransformationRecord] = []
    self._lock = threading.Lock()

  def append(self, record: TransformationRecord) -> None:
    with self._lock:
      self._records.append(record)

  def extend(self, records: Iterable[TransformationRecord]) -> None:
    """Appends a batch (typically one file's records) atomically."""
    batch = list(records)
    with self._lock:
      self._records.extend(batch)

  @property
  def records(self) -> List[TransformationRecord]:
    """A copy of the records in application order."""
    with self._lock:
      return list(self._records)

  def entries(self) -> List[str]:
    """
    Report lines in application order.

    Returns:
        List[str]: e.g. ``["Getter -> field: Person.name"]``.
    """
    return [r.entry for r in self.records]

  def __iter__(self) -> Iterator[TransformationRecord]:
    return iter(self.records)

  def __len__(self) -> int:
    with self._lock:
      return len(self._records)

  def __bool__(self) -> bool:
    return len(self) > 0
