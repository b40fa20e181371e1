"""
Tests for the Rewrite Coordinator.

Verifies full-module rewrites: exact output for the canonical example,
preservation of untouched code, import injection and the file state machine.
"""

import textwrap

from lombocator.core.coordinator import rewrite
from lombocator.core.model import SourceUnit
from lombocator.enums import AccessorKind, FileState


def run(code: str, **kwargs):
  unit = SourceUnit.parse(textwrap.dedent(code))
  records = rewrite(unit, **kwargs)
  return unit, records


def test_person_example_exact_output():
  source = "class Person:\n    name: str\n\n    def get_name(self):\n        return self.name\n"
  unit, records = run(source)

  assert unit.code == (
    "from typing import Annotated\n"
    "from lombocator.markers import Getter\n"
    "from lombocator.markers import accessors\n"
    "@accessors\n"
    "class Person:\n"
    "    name: Annotated[str, Getter]\n"
  )
  assert unit.state is FileState.MODIFIED
  assert [r.entry for r in records] == ["Getter -> field: Person.name"]


def test_full_name_expression_left_alone():
  source = textwrap.dedent(
    """\
    class Person:
        first: str
        last: str
        full_name: str

        def get_full_name(self):
            return self.first + " " + self.last
    """
  )
  unit, records = run(source)

  assert records == []
  assert unit.state is FileState.UNCHANGED
  assert unit.code == source


def test_person_fixture_rewrite(person_source):
  unit, records = run(person_source)

  assert unit.code == (
    '"""People."""\n'
    "from typing import Annotated\n"
    "from lombocator.markers import Getter\n"
    "from lombocator.markers import Setter\n"
    "from lombocator.markers import accessors\n"
    "import os\n"
    "\n"
    "\n"
    "@accessors\n"
    "class Person:\n"
    "    name: Annotated[str, Getter]\n"
    "    age: Annotated[int, Setter] = 0\n"
    "\n"
    "    def describe(self):\n"
    '        return f"{self.name} ({self.age})"\n'
  )
  assert [(r.kind, r.field_name) for r in records] == [
    (AccessorKind.GETTER, "name"),
    (AccessorKind.SETTER, "age"),
  ]


def test_consecutive_accessors_all_removed():
  unit, records = run(
    """
    class Box:
        a: int
        b: int
        c: int

        def get_a(self):
            return self.a

        def get_b(self):
            return self.b

        def get_c(self):
            return self.c
    """
  )
  assert [r.field_name for r in records] == ["a", "b", "c"]
  assert "def " not in unit.code
  assert unit.code.count("from lombocator.markers import Getter") == 1


def test_getter_and_setter_on_same_field():
  unit, records = run(
    """
    class Account:
        balance: int = 0

        def get_balance(self):
            return self.balance

        def set_balance(self, balance):
            self.balance = balance
    """
  )
  assert "balance: Annotated[int, Getter, Setter] = 0" in unit.code
  assert unit.code.count("from lombocator.markers import Getter\n") == 1
  assert unit.code.count("from lombocator.markers import Setter\n") == 1
  assert unit.code.count("from typing import Annotated\n") == 1
  assert "def " not in unit.code
  assert len(records) == 2


def test_nested_classes_are_scoped():
  unit, records = run(
    """
    class Outer:
        label: str

        class Inner:
            value: int

            def get_value(self):
                return self.value

            def get_label(self):
                return self.label

        def get_label(self):
            return self.label
    """
  )
  assert [r.entry for r in records] == ["Getter -> field: Inner.value", "Getter -> field: Outer.label"]
  # Inner cannot see Outer.label, so its get_label stays
  assert unit.code.count("def get_label(self):") == 1
  assert "value: Annotated[int, Getter]" in unit.code
  assert "label: Annotated[str, Getter]" in unit.code
  assert "    @accessors\n    class Inner:" in unit.code
  assert "@accessors\nclass Outer:" in unit.code
  assert unit.code.count("from lombocator.markers import accessors\n") == 1


def test_imports_placed_after_docstring_and_future():
  unit, _ = run(
    '''\
    """Module doc."""
    from __future__ import annotations

    import os


    class Person:
        name: str

        def get_name(self):
            return self.name
    '''
  )
  lines = unit.code.splitlines()
  assert lines[:4] == [
    '"""Module doc."""',
    "from __future__ import annotations",
    "from typing import Annotated",
    "from lombocator.markers import Getter",
  ]


def test_existing_imports_not_duplicated():
  unit, _ = run(
    """\
    from typing import Annotated
    from lombocator.markers import Getter


    class Person:
        name: str

        def get_name(self):
            return self.name
    """
  )
  assert unit.code.count("from typing import Annotated") == 1
  assert unit.code.count("import Getter") == 1


def test_typing_extensions_annotated_reused():
  unit, _ = run(
    """\
    from typing_extensions import Annotated


    class Person:
        name: str

        def get_name(self):
            return self.name
    """
  )
  assert "from typing import Annotated" not in unit.code
  assert "name: Annotated[str, Getter]" in unit.code


def test_custom_marker_module():
  unit, _ = run(
    """
    class Person:
        name: str

        def get_name(self):
            return self.name
    """,
    marker_module="acme.codegen.markers",
  )
  assert "from acme.codegen.markers import Getter" in unit.code
  assert "lombocator" not in unit.code


def test_comments_and_formatting_of_other_members_preserved():
  source = textwrap.dedent(
    """\
    class Person:
        # the display name
        name: str  # required

        def   compute( self ,x ):   # odd spacing
            return   x*2

        def get_name(self):
            return self.name
    """
  )
  unit, _ = run(source)
  assert "    # the display name\n    name: Annotated[str, Getter]  # required\n" in unit.code
  assert "    def   compute( self ,x ):   # odd spacing\n        return   x*2\n" in unit.code


def test_idempotent_second_pass(person_source):
  first, _ = run(person_source)
  second = SourceUnit.parse(first.code)

  records = rewrite(second)

  assert records == []
  assert second.state is FileState.UNCHANGED
  assert second.code == first.code


def test_readded_getter_on_marked_field():
  unit, records = run(
    """\
    from typing import Annotated
    from lombocator.markers import Getter


    class Person:
        name: Annotated[str, Getter]

        def get_name(self):
            return self.name
    """
  )
  assert len(records) == 1
  assert "name: Annotated[str, Getter]\n" in unit.code
  assert "Getter, Getter" not in unit.code
  assert "def get_name" not in unit.code


def test_functions_outside_classes_ignored():
  source = "name: str = ''\n\ndef get_name():\n    return name\n"
  unit, records = run(source)
  assert records == []
  assert unit.code == source


def test_non_default_method_names_recorded_in_marker():
  unit, records = run(
    """\
    class Flag:
        active: bool
        label: str

        def is_active(self):
            return self.active

        def getLabel(self):
            return self.label
    """
  )
  assert [r.method_name for r in records] == ["is_active", "getLabel"]
  assert "active: Annotated[bool, Getter('is_active')]\n" in unit.code
  assert "label: Annotated[str, Getter('getLabel')]\n" in unit.code


def test_accessors_runs_before_other_decorators():
  unit, _ = run(
    """\
    from dataclasses import dataclass


    @dataclass
    class Person:
        name: str

        def get_name(self):
            return self.name
    """
  )
  assert "@dataclass\n@accessors\nclass Person:\n" in unit.code


def test_existing_accessors_decorator_not_repeated():
  unit, records = run(
    """\
    from typing import Annotated
    from lombocator.markers import Getter, accessors


    @accessors
    class Person:
        name: Annotated[str, Getter]
        age: int

        def get_age(self):
            return self.age
    """
  )
  assert len(records) == 1
  assert unit.code.count("@accessors") == 1
  assert unit.code.count("import accessors") == 0


def test_marker_naming_other_method_keeps_accessor():
  source = textwrap.dedent(
    """\
    from typing import Annotated
    from lombocator.markers import Getter, accessors


    @accessors
    class Person:
        name: Annotated[str, Getter]

        def getName(self):
            return self.name
    """
  )
  unit, records = run(source)
  assert records == []
  assert unit.code == source


def test_foreign_marker_binding_keeps_that_kind(person_source, captured_console):
  source = person_source.replace("import os\n", "import os\nfrom acme.orm import Getter\n")
  unit, records = run(source)

  assert [r.method_name for r in records] == ["set_age"]
  assert "def get_name(self):" in unit.code
  assert "from lombocator.markers import Getter" not in unit.code
  assert "age: Annotated[int, Setter] = 0" in unit.code
  assert "Kept Person.get_name" in captured_console.export_text()


def test_module_level_assignment_conflicts():
  source = textwrap.dedent(
    """\
    Setter = object()


    class Person:
        age: int

        def set_age(self, age):
            self.age = age
    """
  )
  unit, records = run(source)
  assert records == []
  assert unit.code == source


def test_shadowed_annotated_or_decorator_blocks_file():
  for prelude in ("class Annotated:\n    pass\n", "def accessors(cls):\n    return cls\n"):
    source = prelude + "\n\nclass Person:\n    name: str\n\n    def get_name(self):\n        return self.name\n"
    unit, records = run(source)
    assert records == []
    assert unit.code == source


def test_class_body_binding_conflicts():
  source = textwrap.dedent(
    """\
    class Person:
        name: str
        Getter = None

        def get_name(self):
            return self.name
    """
  )
  unit, records = run(source)
  assert records == []
  assert unit.code == source


def test_conditional_import_counts_as_binding():
  source = textwrap.dedent(
    """\
    try:
        from acme.orm import Getter
    except ImportError:
        Getter = None


    class Person:
        name: str

        def get_name(self):
            return self.name
    """
  )
  _, records = run(source)
  assert records == []


def test_dataclass_classvar_untouched():
  source = textwrap.dedent(
    """\
    from dataclasses import dataclass
    from typing import ClassVar


    @dataclass
    class Counter:
        total: ClassVar[int] = 0

        def get_total(self):
            return self.total
    """
  )
  unit, records = run(source)
  assert records == []
  assert unit.code == source
