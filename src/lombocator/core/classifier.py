"""
Shape Classifier.

Decides, purely from the structure of a method, whether it is a trivial
accessor for one field of its enclosing class:

* Getter: ``def get_x(self): return self.x``
* Setter: ``def set_x(self, value): self.x = value``

Matching is deliberately conservative. Anything beyond the bare read or
write (decorators, defaults, docstrings, extra statements, conversions,
parentheses, chained or augmented assignment) classifies the method as not
an accessor, and the method is left untouched. So do fields declared as
``ClassVar``, ``Final`` or ``InitVar``, and fields whose existing marker
already names a different method.
"""

from typing import Optional

import libcst as cst

from lombocator.core.fields import resolve_field, split_accessor_name
from lombocator.core.model import AccessorCandidate, FieldMember, MethodMember, TypeDeclaration
from lombocator.enums import AccessorKind


def _is_plain_name(node: cst.BaseExpression, name: str) -> bool:
  return isinstance(node, cst.Name) and node.value == name and not node.lpar


def _is_field_access(node: cst.BaseExpression, receiver: str, field_name: str) -> bool:
  """True for ``<receiver>.<field_name>`` with no parentheses anywhere."""
  return (
    isinstance(node, cst.Attribute)
    and not node.lpar
    and _is_plain_name(node.value, receiver)
    and node.attr.value == field_name
  )


def _is_plain_param(param: cst.Param) -> bool:
  return param.default is None and param.star in ("", cst.MaybeSentinel.DEFAULT)


def _has_plain_signature(method: MethodMember) -> bool:
  """
  Ordinary instance method: not async, undecorated, only plain positional
  parameters without defaults, and a receiver.
  """
  node = method.node
  if node.asynchronous is not None or node.decorators:
    return False
  params = node.params
  if params.posonly_params or params.kwonly_params or params.star_kwarg is not None:
    return False
  if isinstance(params.star_arg, (cst.Param, cst.ParamStar)):
    return False
  if method.receiver is None:
    return False
  return all(_is_plain_param(p) for p in params.params)


def _is_markable(field: Optional[FieldMember]) -> bool:
  # Multi-variable lines are ambiguous and unannotated fields have no type to wrap.
  # ClassVar/Final/InitVar declarations are not instance fields.
  return field is not None and field.single_variable and field.annotation is not None and not field.qualifier


def _keeps_marker_consistent(method: MethodMember, field: FieldMember, kind: AccessorKind) -> bool:
  """A marker of `kind` already on the field must stand for this very method."""
  declared = field.marked_method(kind)
  return declared is None or declared == method.name



def is_trivial_getter(method: MethodMember, field: FieldMember) -> bool:
  """
  Checks the getter shape: no parameters, body ``return self.<field>``.

  Args:
      method: The candidate method.
      field: The field resolved from the method name.

  Returns:
      bool: True if the method does nothing but return the field.
  """
  if not _has_plain_signature(method) or method.parameters:
    return False
  statements = method.statements
  if statements is None or len(statements) != 1:
    return False
  stmt = statements[0]
  if not isinstance(stmt, cst.Return) or stmt.value is None:
    return False
  return _is_field_access(stmt.value, method.receiver.name.value, field.name)


def is_trivial_setter(method: MethodMember, field: FieldMember) -> bool:
  """
  Checks the setter shape: one parameter, body ``self.<field> = <parameter>``.

  Args:
      method: The candidate method.
      field: The field resolved from the method name.

  Returns:
      bool: True if the method does nothing but store its argument in the field.
  """
  if not _has_plain_signature(method) or len(method.parameters) != 1:
    return False
  statements = method.statements
  if statements is None or len(statements) != 1:
    return False
  stmt = statements[0]
  if not isinstance(stmt, cst.Assign) or len(stmt.targets) != 1:
    return False
  receiver = method.receiver.name.value
  value_name = method.parameters[0].name.value
  return _is_field_access(stmt.targets[0].target, receiver, field.name) and _is_plain_name(stmt.value, value_name)


def classify(method: MethodMember, type_decl: TypeDeclaration) -> Optional[AccessorCandidate]:
  """
  Classifies a method of `type_decl`.

  Args:
      method: A method currently declared in the class body.
      type_decl: The immediately enclosing class.

  Returns:
      Optional[AccessorCandidate]: The matched accessor, or None when the
      method is not a trivial accessor.
  """
  split = split_accessor_name(method.name)
  if split is None:
    return None
  kind, field_name = split

  field = resolve_field(type_decl, field_name)
  if not _is_markable(field) or not _keeps_marker_consistent(method, field, kind):
    return None

  if kind is AccessorKind.GETTER and is_trivial_getter(method, field):
    return AccessorCandidate(method=method, field=field, kind=kind)
  if kind is AccessorKind.SETTER and is_trivial_setter(method, field):
    return AccessorCandidate(method=method, field=field, kind=kind)
  return None
