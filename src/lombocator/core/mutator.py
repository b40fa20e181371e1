"""
Tree Mutator.

Applies a matched accessor to the class it was found in: the field gains the
marker in its declared type, the module gains the supporting import, and the
method statement is removed. Every other member keeps its node identity and
therefore its exact formatting.

Markers are expressed with `typing.Annotated`::

    name: str                      ->  name: Annotated[str, Getter]
    name: Annotated[str, Getter]   ->  name: Annotated[str, Getter, Setter]
    active: bool                   ->  active: Annotated[bool, Getter("is_active")]

A bare marker stands for ``get_<field>``/``set_<field>``; any other method
name is passed to the marker. Classes that lost an accessor are decorated
with ``@accessors``, which restores the methods when the class is created.
"""

from typing import Optional, Tuple

import libcst as cst

from lombocator.core.model import AccessorCandidate, SourceUnit, TransformationRecord, TypeDeclaration
from lombocator.core.scanners import annotated_metadata, as_annotated, get_full_name
from lombocator.enums import AccessorKind

DEFAULT_MARKER_MODULE = "lombocator.markers"
ACCESSORS_DECORATOR = "accessors"


def has_marker(annotation: cst.BaseExpression, kind: AccessorKind) -> bool:
  """Exact-name check of the `Annotated` metadata for `kind`, bare or called."""
  return kind.value in annotated_metadata(annotation)


def build_marker(kind: AccessorKind, method_name: Optional[str] = None) -> cst.BaseExpression:
  """``Getter`` or, for a non-default method name, ``Getter("is_active")``."""
  if method_name is None:
    return cst.Name(kind.value)
  return cst.Call(func=cst.Name(kind.value), args=[cst.Arg(value=cst.SimpleString(repr(method_name)))])


def attach_marker(
  annotation: cst.BaseExpression,
  kind: AccessorKind,
  method_name: Optional[str] = None,
) -> Tuple[cst.BaseExpression, bool]:
  """
  Adds `kind` to the metadata of a declared type.

  Args:
      annotation: The declared type expression of the field.
      kind: Marker to attach.
      method_name: Accessor name to record when it is not the default one.

  Returns:
      Tuple[cst.BaseExpression, bool]: The new annotation and whether it was
      newly wrapped in ``Annotated[...]`` (which requires the import).
  """
  marker = cst.SubscriptElement(slice=cst.Index(value=build_marker(kind, method_name)))
  existing = as_annotated(annotation)
  if existing is not None:
    return existing.with_changes(slice=[*existing.slice, marker]), False

  wrapped = cst.Subscript(
    value=cst.Name("Annotated"),
    slice=[cst.SubscriptElement(slice=cst.Index(value=annotation)), marker],
  )
  return wrapped, True


def has_decorator(node: cst.ClassDef, name: str = ACCESSORS_DECORATOR) -> bool:
  return any(get_full_name(d.decorator) == name for d in node.decorators)


def attach_decorator(node: cst.ClassDef, name: str = ACCESSORS_DECORATOR) -> cst.ClassDef:
  """
  Adds ``@<name>`` as the innermost decorator of a class, unless present.

  Innermost means it runs before any other decorator, e.g. ``@dataclass``.
  """
  if has_decorator(node, name):
    return node
  return node.with_changes(decorators=[*node.decorators, cst.Decorator(decorator=cst.Name(name))])


def _apply(
  candidate: AccessorCandidate,
  type_decl: TypeDeclaration,
  unit: SourceUnit,
  marker_module: str,
) -> TransformationRecord:
  kind = candidate.kind
  field = candidate.field
  method_name = candidate.method.name

  declaration = field.declaration
  if declaration is not None and not has_marker(declaration.annotation.annotation, kind):
    explicit = None if method_name == kind.default_method(field.name) else method_name
    new_annotation, wrapped = attach_marker(declaration.annotation.annotation, kind, explicit)
    new_declaration = declaration.with_changes(annotation=declaration.annotation.with_changes(annotation=new_annotation))
    new_statement = field.statement.with_changes(body=[new_declaration])
    type_decl.replace_member(field.statement, new_statement)
    if wrapped:
      unit.require("typing", "Annotated")

  # Requested even when the marker was already present, so a file whose marker
  # import was deleted by hand gets it back.
  unit.require(marker_module, kind.value)

  type_decl.remove_member(candidate.method.node)

  record = TransformationRecord(
    kind=kind,
    type_name=type_decl.name,
    field_name=field.name,
    method_name=method_name,
    path=str(unit.path) if unit.path else None,
  )
  unit.records.append(record)
  return record


def apply_getter(
  candidate: AccessorCandidate,
  type_decl: TypeDeclaration,
  unit: SourceUnit,
  marker_module: str = DEFAULT_MARKER_MODULE,
) -> TransformationRecord:
  """
  Replaces a trivial getter with a `Getter` marker on its field.

  Args:
      candidate: Classified getter and its field.
      type_decl: The class the getter belongs to; edited in place.
      unit: The file being rewritten; receives the import and the record.
      marker_module: Module the marker names are imported from.

  Returns:
      TransformationRecord: The record appended to `unit.records`.
  """
  return _apply(candidate, type_decl, unit, marker_module)


def apply_setter(
  candidate: AccessorCandidate,
  type_decl: TypeDeclaration,
  unit: SourceUnit,
  marker_module: str = DEFAULT_MARKER_MODULE,
) -> TransformationRecord:
  """
  Replaces a trivial setter with a `Setter` marker on its field.

  See :func:`apply_getter` for the arguments.
  """
  return _apply(candidate, type_decl, unit, marker_module)
