"""
Tests for the Transformation Ledger.
"""

import threading

import pytest
from pydantic import ValidationError

from lombocator.core.ledger import TransformationLedger
from lombocator.core.model import TransformationRecord
from lombocator.enums import AccessorKind


def record(field: str, kind: AccessorKind = AccessorKind.GETTER) -> TransformationRecord:
  return TransformationRecord(kind=kind, type_name="Person", field_name=field)


def test_entries_keep_application_order():
  ledger = TransformationLedger()
  ledger.append(record("name"))
  ledger.extend([record("age", AccessorKind.SETTER), record("email")])

  assert ledger.entries() == [
    "Getter -> field: Person.name",
    "Setter -> field: Person.age",
    "Getter -> field: Person.email",
  ]
  assert len(ledger) == 3


def test_empty_ledger_is_falsy():
  assert not TransformationLedger()


def test_records_returns_copy():
  ledger = TransformationLedger()
  ledger.append(record("name"))
  ledger.records.clear()
  assert len(ledger) == 1


def test_concurrent_batches_are_not_interleaved():
  ledger = TransformationLedger()

  def worker(prefix: str):
    ledger.extend(record(f"{prefix}{i}") for i in range(50))

  threads = [threading.Thread(target=worker, args=(p,)) for p in "abcd"]
  for t in threads:
    t.start()
  for t in threads:
    t.join()

  names = [r.field_name for r in ledger]
  assert len(names) == 200
  for start in range(0, 200, 50):
    batch = names[start : start + 50]
    assert len({n[0] for n in batch}) == 1


def test_records_are_immutable():
  rec = record("name")
  with pytest.raises(ValidationError):
    rec.field_name = "other"
