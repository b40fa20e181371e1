"""
Rewrite Coordinator.

Drives classification and mutation over every class of a parsed file.

The coordinator is a LibCST transformer. When a class has been visited (its
nested classes are already rewritten) the class body is wrapped in a
`TypeDeclaration` and its methods are processed one by one from a snapshot
taken before any removal, so deleting a method never skips or repeats the
next one. Each method is classified against the current state of the class
and a match is applied immediately. A class that lost an accessor is
decorated with ``@accessors``.

Names the rewrite introduces (``Annotated``, the marker kinds and
``accessors``) must not already mean something else. If the module or the
class body binds one of them otherwise, the affected accessors are kept and a
warning is logged.

After the module is left, the supporting imports collected by the mutator are
injected and the unit is marked ``MODIFIED`` if anything was rewritten, or
``UNCHANGED`` otherwise.
"""

from typing import List, Set

import libcst as cst
from rich.markup import escape

from lombocator.core.classifier import classify
from lombocator.core.fields import declared_fields
from lombocator.core.imports import ANNOTATED_SOURCES, inject_declarations
from lombocator.core.model import MethodMember, SourceUnit, TransformationRecord, TypeDeclaration
from lombocator.core.mutator import (
  ACCESSORS_DECORATOR,
  DEFAULT_MARKER_MODULE,
  apply_getter,
  apply_setter,
  attach_decorator,
)
from lombocator.core.scanners import foreign_bindings
from lombocator.enums import AccessorKind, FileState
from lombocator.utils.console import log_warning


class RewriteCoordinator(cst.CSTTransformer):
  """
  Transformer replacing trivial accessors of one source unit.

  Attributes:
      unit (SourceUnit): The file being rewritten; collects imports and records.
      marker_module (str): Module the marker names are imported from.
      module_conflicts (Set[str]): Introduced names already bound at module scope.
  """

  def __init__(self, unit: SourceUnit, marker_module: str = DEFAULT_MARKER_MODULE) -> None:
    super().__init__()
    self.unit = unit
    self.marker_module = marker_module
    self.module_conflicts: Set[str] = set()

  def visit_Module(self, node: cst.Module) -> bool:
    expected = {kind.value: (self.marker_module,) for kind in AccessorKind}
    expected[ACCESSORS_DECORATOR] = (self.marker_module,)
    expected["Annotated"] = ANNOTATED_SOURCES
    self.module_conflicts = set(foreign_bindings(node, expected))
    return True

  def _blocked_names(self, kind: AccessorKind, class_names: Set[str]) -> List[str]:
    blocked = []
    for name in ("Annotated", kind.value, ACCESSORS_DECORATOR):
      if name in self.module_conflicts or (name != ACCESSORS_DECORATOR and name in class_names):
        blocked.append(name)
    return blocked

  def _warn_blocked(self, type_decl: TypeDeclaration, method: MethodMember, names: List[str]) -> None:
    where = f" in [path]{escape(str(self.unit.path))}[/path]" if self.unit.path else ""
    log_warning(
      f"Kept {escape(type_decl.name)}.{escape(method.name)}{where}: "
      f"{escape(', '.join(names))} already bound to something else"
    )

  def leave_ClassDef(self, original_node: cst.ClassDef, updated_node: cst.ClassDef) -> cst.ClassDef:
    """
    Rewrites the accessors declared directly in this class.

    Args:
        original_node: The class before its children were transformed.
        updated_node: The class with nested classes already rewritten.

    Returns:
        cst.ClassDef: The class, with a new body and the ``@accessors``
        decorator if any accessor was replaced.
    """
    if not isinstance(updated_node.body, cst.IndentedBlock):
      return updated_node

    type_decl = TypeDeclaration.from_class(updated_node)
    class_names = type_decl.bound_names() | {f.name for f in declared_fields(type_decl)}
    applied = 0

    for method in type_decl.methods():
      candidate = classify(method, type_decl)
      if candidate is None:
        continue
      blocked = self._blocked_names(candidate.kind, class_names)
      if blocked:
        self._warn_blocked(type_decl, method, blocked)
        continue
      if candidate.kind is AccessorKind.GETTER:
        apply_getter(candidate, type_decl, self.unit, self.marker_module)
      else:
        apply_setter(candidate, type_decl, self.unit, self.marker_module)
      applied += 1

    if not applied:
      return updated_node
    self.unit.require(self.marker_module, ACCESSORS_DECORATOR)
    rewritten = updated_node.with_changes(body=updated_node.body.with_changes(body=type_decl.members))
    return attach_decorator(rewritten)

  def leave_Module(self, original_node: cst.Module, updated_node: cst.Module) -> cst.Module:
    if not self.unit.records:
      return updated_node
    return inject_declarations(updated_node, self.unit.iter_requirements())


def rewrite(unit: SourceUnit, marker_module: str = DEFAULT_MARKER_MODULE) -> List[TransformationRecord]:
  """
  Rewrites every trivial accessor of a source unit in place.

  Args:
      unit: A freshly parsed unit (state ``LOADED``).
      marker_module: Module the marker names are imported from.

  Returns:
      List[TransformationRecord]: Records for this file, in application order.
  """
  before = len(unit.records)
  unit.module = unit.module.visit(RewriteCoordinator(unit, marker_module))
  unit.state = FileState.SCANNED

  applied = unit.records[before:]
  unit.state = FileState.MODIFIED if applied else FileState.UNCHANGED
  return applied
