"""
Tests for the Name and Annotation Helpers.

Covers marker metadata extraction, type qualifier detection and the
module-scope binding scan used to avoid clobbering existing names.
"""

import textwrap

import libcst as cst
import pytest

from lombocator.core.imports import build_import, header_length
from lombocator.core.model import SupportingDeclaration
from lombocator.core.scanners import annotated_markers, foreign_bindings, type_qualifier

EXPECTED = {
  "Getter": ("lombocator.markers",),
  "accessors": ("lombocator.markers",),
  "Annotated": ("typing", "typing_extensions"),
}


def conflicts(code: str):
  return foreign_bindings(cst.parse_module(textwrap.dedent(code)), EXPECTED)


def test_annotated_markers_bare_and_called():
  node = cst.parse_expression("Annotated[str, Getter, Setter('setLabel'), Getter(x), 'doc']")
  assert annotated_markers(node) == [("Getter", None), ("Setter", "setLabel"), ("Getter", "")]


@pytest.mark.parametrize(
  "annotation, qualifier",
  [
    ("ClassVar[int]", "ClassVar"),
    ("typing.Final", "typing.Final"),
    ("dataclasses.InitVar[str]", "dataclasses.InitVar"),
    ("'ClassVar[int]'", "ClassVar"),
    ("Annotated[Final[int], Getter]", "Final"),
    ("int", ""),
    ("Optional[ClassVar]", ""),
    ("'not valid ['", ""),
  ],
)
def test_type_qualifier(annotation, qualifier):
  assert type_qualifier(cst.parse_expression(annotation)) == qualifier


def test_expected_imports_are_not_conflicts():
  assert (
    conflicts(
      """\
      from typing_extensions import Annotated
      from lombocator.markers import Getter, accessors
      """
    )
    == []
  )


@pytest.mark.parametrize(
  "code, name",
  [
    ("from acme.orm import Getter\n", "Getter"),
    ("from lombocator.markers import Setter as Getter\n", "Getter"),
    ("import acme.Getter as Getter\n", "Getter"),
    ("Getter = property\n", "Getter"),
    ("Getter: type = property\n", "Getter"),
    ("class Annotated:\n    pass\n", "Annotated"),
    ("def accessors(cls):\n    return cls\n", "accessors"),
    ("for Getter in ():\n    pass\n", "Getter"),
    ("if True:\n    from acme import accessors\n", "accessors"),
    ("with open('x') as Getter:\n    pass\n", "Getter"),
  ],
)
def test_foreign_bindings(code, name):
  assert conflicts(code) == [name]


def test_nested_scopes_do_not_bind_at_module_level():
  code = """\
  def helper():
      Getter = 1

  class Box:
      accessors = []

  values = [Getter for Getter in range(3)]
  """
  assert conflicts(code) == []


def test_header_length_skips_docstring_and_future_imports():
  module = cst.parse_module('"""Doc."""\nfrom __future__ import annotations\nimport os\n')
  assert header_length(module.body) == 2
  assert header_length(cst.parse_module("import os\n").body) == 0


def test_build_import_dotted_module():
  line = build_import(SupportingDeclaration("acme.codegen.markers", "Getter"))
  assert cst.Module(body=[line]).code == "from acme.codegen.markers import Getter\n"
