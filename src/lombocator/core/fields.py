"""
Field Resolver.

Maps accessor method names to field names and looks fields up in the body of
the enclosing class. Lookup is by exact name on the class's own declarations;
base classes are never consulted.
"""

from typing import List, Optional, Sequence, Tuple

import libcst as cst

from lombocator.core.model import FieldMember, TypeDeclaration
from lombocator.enums import AccessorKind

# Checked in order; the first matching prefix wins.
ACCESSOR_PREFIXES: Tuple[Tuple[str, AccessorKind], ...] = (
  ("get", AccessorKind.GETTER),
  ("is", AccessorKind.GETTER),
  ("set", AccessorKind.SETTER),
)


def split_accessor_name(method_name: str) -> Optional[Tuple[AccessorKind, str]]:
  """
  Splits an accessor name into its kind and the field it refers to.

  Both naming styles are understood: ``get_name`` and ``getName`` refer to
  ``name``; ``is_active`` and ``isActive`` refer to ``active``.

  Args:
      method_name: Name of the method.

  Returns:
      Optional[Tuple[AccessorKind, str]]: Kind implied by the prefix and the
      derived field name, or None if the name has no accessor prefix or
      nothing remains after it.
  """
  for prefix, kind in ACCESSOR_PREFIXES:
    if not method_name.startswith(prefix):
      continue
    rest = method_name[len(prefix) :]
    if rest.startswith("_"):
      rest = rest[1:]
    if not rest:
      return None
    return kind, rest[0].lower() + rest[1:]
  return None


def derive_field_name(method_name: str) -> Optional[str]:
  """
  Derives the candidate field name from an accessor method name.

  >>> derive_field_name("getName")
  'name'
  >>> derive_field_name("set_age")
  'age'
  >>> derive_field_name("get") is None
  True
  """
  split = split_accessor_name(method_name)
  return split[1] if split else None


def _target_names(target: cst.BaseExpression) -> Optional[List[str]]:
  if isinstance(target, cst.Name):
    return [target.value]
  if isinstance(target, (cst.Tuple, cst.List)):
    names = []
    for element in target.elements:
      sub = _target_names(element.value)
      if sub is None:
        return None
      names.extend(sub)
    return names
  return None


def collect_fields(members: Sequence[cst.BaseStatement]) -> List[FieldMember]:
  """
  Collects field declarations from class-body statements, in source order.

  A declaration counts as single-variable only when its line holds one
  statement naming one variable: ``name: str``, ``name: str = ""`` or
  ``name = ""``. Chained (``a = b = 0``) and unpacking (``a, b = 0, 1``)
  assignments, and several declarations joined with ``;``, produce
  multi-variable fields.

  Args:
      members: The statements of a class body.

  Returns:
      List[FieldMember]: One entry per declared variable.
  """
  found: List[FieldMember] = []
  for stmt in members:
    if not isinstance(stmt, cst.SimpleStatementLine):
      continue
    shared_line = len(stmt.body) > 1
    for small in stmt.body:
      if isinstance(small, cst.AnnAssign):
        if isinstance(small.target, cst.Name):
          found.append(
            FieldMember(
              name=small.target.value,
              annotation=small.annotation.annotation,
              statement=stmt,
              single_variable=not shared_line,
            )
          )
      elif isinstance(small, cst.Assign):
        names: List[str] = []
        for assign_target in small.targets:
          target_names = _target_names(assign_target.target)
          if target_names:
            names.extend(target_names)
        single = not shared_line and len(names) == 1
        for name in names:
          found.append(FieldMember(name=name, annotation=None, statement=stmt, single_variable=single))
  return found


def declared_fields(type_decl: TypeDeclaration) -> List[FieldMember]:
  """Fields currently declared by the class, in source order."""
  return collect_fields(type_decl.members)


def resolve_field(type_decl: TypeDeclaration, name: str) -> Optional[FieldMember]:
  """
  Looks up a field by exact name on the class's own declarations.

  The first declaration wins if a name is declared more than once.

  Args:
      type_decl: The enclosing class.
      name: Field name derived from the accessor.

  Returns:
      Optional[FieldMember]: The field, or None if the class does not declare it.
  """
  for candidate in declared_fields(type_decl):
    if candidate.name == name:
      return candidate
  return None
