"""
Tests for the public API and the marker vocabulary.

Rewritten code must import and run: the markers are discoverable on the
resulting classes, and `@accessors` gives callers back the methods that were
collapsed.
"""

import sys
import textwrap
import types

import pytest
import libcst as cst

import lombocator
from lombocator.markers import Getter, Setter, accessors, marked_fields


@pytest.fixture
def load(monkeypatch):
  """Executes code as an importable module named ``rewritten``."""

  def _load(code: str) -> dict:
    module = types.ModuleType("rewritten")
    monkeypatch.setitem(sys.modules, "rewritten", module)
    exec(compile(code, "<rewritten>", "exec"), module.__dict__)
    return module.__dict__

  return _load


def test_rewrite_source(person_source):
  code = lombocator.rewrite_source(person_source)

  assert "def get_name" not in code
  assert "def set_age" not in code
  assert "def describe" in code


def test_rewritten_code_runs_and_exposes_markers(person_source, load):
  namespace = load(lombocator.rewrite_source(person_source))
  person_cls = namespace["Person"]

  assert marked_fields(person_cls, Getter) == ["name"]
  assert marked_fields(person_cls, Setter) == ["age"]

  person = person_cls()
  person.name = "Ada"
  assert person.describe() == "Ada (0)"


def test_callers_of_collapsed_accessors_keep_working(person_source, load):
  namespace = load(lombocator.rewrite_source(person_source))
  person = namespace["Person"]()
  person.name = "Ada"

  person.set_age(3)

  assert person.get_name() == "Ada"
  assert person.age == 3
  assert namespace["Person"].get_name.__qualname__ == "Person.get_name"


def test_non_default_names_and_dataclasses_keep_working(load):
  source = textwrap.dedent(
    """\
    from dataclasses import dataclass


    @dataclass
    class Flag:
        active: bool
        label: str = ""

        def is_active(self):
            return self.active

        def getLabel(self):
            return self.label

        def setLabel(self, label):
            self.label = label
    """
  )
  code = lombocator.rewrite_source(source)
  assert "def " not in code
  flag_cls = load(code)["Flag"]
  flag = flag_cls(active=True)

  flag.setLabel("on")

  assert flag.is_active() is True
  assert flag.getLabel() == "on"
  assert flag == flag_cls(active=True, label="on")


def test_string_annotations_are_read(load):
  source = textwrap.dedent(
    """\
    from __future__ import annotations

    from typing import TYPE_CHECKING

    if TYPE_CHECKING:
        from acme.models import Owner


    class Pet:
        owner: Owner | None = None
        name: str = ""

        def get_owner(self):
            return self.owner

        def get_name(self):
            return self.name
    """
  )
  pet_cls = load(lombocator.rewrite_source(source))["Pet"]
  pet = pet_cls()
  pet.name = "Rex"

  assert pet.get_owner() is None
  assert pet.get_name() == "Rex"


def test_accessors_keeps_methods_defined_in_class():
  from typing import Annotated

  @accessors
  class Person:
    name: Annotated[str, Getter]

    def get_name(self):
      return "custom"

  person = Person()
  person.name = "Ada"
  assert person.get_name() == "custom"


def test_accessors_ignores_plain_annotations():
  from typing import Annotated

  @accessors
  class Person:
    name: Annotated[str, "doc"]
    age: int

  assert not hasattr(Person, "get_name")
  assert not hasattr(Person, "get_age")


def test_rewrite_source_no_match_returns_input(plain_source):
  assert lombocator.rewrite_source(plain_source) == plain_source


def test_rewrite_source_invalid_code():
  with pytest.raises(cst.ParserSyntaxError):
    lombocator.rewrite_source("def broken(:\n")


def test_marker_repr_and_equality():
  assert repr(Getter) == "Getter"
  assert repr(Setter) == "Setter"
  assert repr(Getter("is_active")) == "Getter('is_active')"
  assert Getter("is_active") == Getter("is_active")
  assert Getter("is_active") != Setter("is_active")
  assert Getter("is_active").method_for("active") == "is_active"
  assert Setter.method_for("age") == "set_age"
