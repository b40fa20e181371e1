"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Source tree builders for engine and CLI tests.
- Console isolation so log output does not leak between tests.
"""

import sys
import textwrap
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console

# Add src to path so we can import 'lombocator' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from lombocator.utils.console import reset_console, set_console  # noqa: E402

PERSON_SOURCE = textwrap.dedent(
  '''\
  """People."""
  import os


  class Person:
      name: str
      age: int = 0

      def get_name(self):
          return self.name

      def set_age(self, age):
          self.age = age

      def describe(self):
          return f"{self.name} ({self.age})"
  '''
)

PLAIN_SOURCE = textwrap.dedent(
  """\
  class Point:
      x: int
      y: int

      def get_full(self):
          return self.x + self.y
  """
)


@pytest.fixture
def person_source() -> str:
  return PERSON_SOURCE


@pytest.fixture
def plain_source() -> str:
  return PLAIN_SOURCE


@pytest.fixture
def source_tree(tmp_path: Path) -> Callable[..., Path]:
  """
  Factory writing files under ``tmp_path / "src"``.

  Usage: ``root = source_tree({"pkg/person.py": code})``.
  """

  def _build(files: dict) -> Path:
    root = tmp_path / "src"
    for rel, content in files.items():
      target = root / rel
      target.parent.mkdir(parents=True, exist_ok=True)
      target.write_text(content, encoding="utf-8")
    root.mkdir(parents=True, exist_ok=True)
    return root

  return _build


@pytest.fixture(autouse=True)
def captured_console():
  """Routes console and logging output into a recording console."""
  recorder = Console(record=True, width=200)
  set_console(recorder)
  yield recorder
  reset_console()
