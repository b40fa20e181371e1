"""
Name and Annotation Helpers.

Small LibCST inspection utilities shared by the field resolver, the shape
classifier, the tree mutator and the import injector.
"""

from typing import Dict, List, Optional, Tuple, Union

import libcst as cst

# Spellings under which `typing.Annotated` is recognised in existing annotations.
ANNOTATED_NAMES = {"Annotated", "typing.Annotated", "typing_extensions.Annotated"}

# Type qualifiers that make a class-body annotation something other than an
# instance field.
QUALIFIER_NAMES = {
  "ClassVar",
  "typing.ClassVar",
  "typing_extensions.ClassVar",
  "Final",
  "typing.Final",
  "typing_extensions.Final",
  "InitVar",
  "dataclasses.InitVar",
}


def get_full_name(node: Union[cst.Name, cst.Attribute, cst.BaseExpression]) -> str:
  """
  Recursively resolves a CST Name or Attribute chain to a dot-separated string.

  Args:
    node: The CST node representing the identifier.

  Returns:
    str: The dotted representation (e.g., "typing.Annotated"), or an empty
    string if the node is not a Name/Attribute chain.

  Example:
    >>> get_full_name(cst.Attribute(value=cst.Name("typing"), attr=cst.Name("Annotated")))
    'typing.Annotated'
  """
  if isinstance(node, cst.Name):
    return node.value
  elif isinstance(node, cst.Attribute):
    base = get_full_name(node.value)
    return f"{base}.{node.attr.value}" if base else ""
  return ""


def as_annotated(node: cst.BaseExpression) -> Optional[cst.Subscript]:
  """
  Returns the node if it is an ``Annotated[T, ...]`` subscript, else None.
  """
  if isinstance(node, cst.Subscript) and get_full_name(node.value) in ANNOTATED_NAMES:
    return node
  return None


def _marker_argument(call: cst.Call) -> str:
  """The method name passed as ``Getter("name")``; empty if it is not a plain string."""
  if len(call.args) != 1 or call.args[0].keyword is not None or call.args[0].star:
    return ""
  value = call.args[0].value
  if not isinstance(value, cst.SimpleString):
    return ""
  evaluated = value.evaluated_value
  return evaluated if isinstance(evaluated, str) else ""


def annotated_markers(node: cst.BaseExpression) -> List[Tuple[str, Optional[str]]]:
  """
  Lists the metadata entries of an ``Annotated[T, m1, m2(...)]`` annotation.

  Each entry is reported by its spelled name together with the method name
  given as call argument: ``Getter`` yields ``("Getter", None)`` and
  ``Getter("is_active")`` yields ``("Getter", "is_active")``. A call whose
  argument is not a single string literal yields an empty method name.
  Any other annotation yields an empty list.
  """
  subscript = as_annotated(node)
  if subscript is None:
    return []
  entries: List[Tuple[str, Optional[str]]] = []
  for element in subscript.slice[1:]:
    if not isinstance(element.slice, cst.Index):
      continue
    value = element.slice.value
    if isinstance(value, cst.Call):
      name = get_full_name(value.func)
      if name:
        entries.append((name, _marker_argument(value)))
      continue
    name = get_full_name(value)
    if name:
      entries.append((name, None))
  return entries


def annotated_metadata(node: cst.BaseExpression) -> List[str]:
  """Spelled names of the ``Annotated`` metadata entries of `node`."""
  return [name for name, _ in annotated_markers(node)]


def _unquote(node: cst.BaseExpression) -> Optional[cst.BaseExpression]:
  if not isinstance(node, cst.SimpleString):
    return node
  evaluated = node.evaluated_value
  if not isinstance(evaluated, str):
    return None
  try:
    return cst.parse_expression(evaluated.strip())
  except cst.ParserSyntaxError:
    return None


def type_qualifier(node: cst.BaseExpression) -> str:
  """
  Returns the qualifier wrapping a declared type, if any.

  ``ClassVar[int]``, ``Final``, ``"dataclasses.InitVar[str]"`` and
  ``Annotated[ClassVar[int], x]`` report their qualifier's spelled name.
  Plain types report an empty string.
  """
  node = _unquote(node)
  if node is None:
    return ""
  subscript = as_annotated(node)
  if subscript is not None:
    first = subscript.slice[0].slice
    return type_qualifier(first.value) if isinstance(first, cst.Index) else ""
  if isinstance(node, cst.Subscript):
    node = node.value
  name = get_full_name(node)
  return name if name in QUALIFIER_NAMES else ""


def module_imports_name(module: cst.Module, source: str, name: str) -> bool:
  """
  Checks whether `from <source> import <name>` exists at module scope.

  Args:
    module: Parsed module.
    source: Dotted module path, e.g. "typing".
    name: Imported symbol (unaliased), e.g. "Annotated".
  """
  for stmt in module.body:
    if not isinstance(stmt, cst.SimpleStatementLine):
      continue
    for small in stmt.body:
      if not isinstance(small, cst.ImportFrom) or small.relative or small.module is None:
        continue
      if get_full_name(small.module) != source:
        continue
      if isinstance(small.names, cst.ImportStar):
        return True
      for alias in small.names:
        if alias.asname is None and get_full_name(alias.name) == name:
          return True
  return False


class ModuleBindingScanner(cst.CSTVisitor):
  """
  Records every name bound in module scope.

  Function, class, lambda and comprehension bodies open their own scope and
  are not entered. Statements nested in ``if``/``try``/``with``/``for``
  blocks at module level are.

  Attributes:
      bindings (Dict[str, List[cst.CSTNode]]): Binding statements per name.
  """

  def __init__(self) -> None:
    self.bindings: Dict[str, List[cst.CSTNode]] = {}

  def _bind(self, name: str, node: cst.CSTNode) -> None:
    self.bindings.setdefault(name, []).append(node)

  def _bind_target(self, target: cst.BaseExpression, node: cst.CSTNode) -> None:
    if isinstance(target, cst.Name):
      self._bind(target.value, node)
    elif isinstance(target, (cst.Tuple, cst.List)):
      for element in target.elements:
        self._bind_target(element.value, node)

  def visit_ClassDef(self, node: cst.ClassDef) -> bool:
    self._bind(node.name.value, node)
    return False

  def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
    self._bind(node.name.value, node)
    return False

  def visit_Lambda(self, node: cst.Lambda) -> bool:
    return False

  def visit_ListComp(self, node: cst.ListComp) -> bool:
    return False

  def visit_SetComp(self, node: cst.SetComp) -> bool:
    return False

  def visit_DictComp(self, node: cst.DictComp) -> bool:
    return False

  def visit_GeneratorExp(self, node: cst.GeneratorExp) -> bool:
    return False

  def visit_Import(self, node: cst.Import) -> None:
    for alias in node.names:
      if alias.asname is not None:
        self._bind_target(alias.asname.name, node)
      else:
        self._bind(get_full_name(alias.name).split(".")[0], node)

  def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
    if isinstance(node.names, cst.ImportStar):
      return
    for alias in node.names:
      bound = alias.asname.name if alias.asname is not None else alias.name
      self._bind_target(bound, node)

  def visit_AssignTarget(self, node: cst.AssignTarget) -> None:
    self._bind_target(node.target, node)

  def visit_AnnAssign(self, node: cst.AnnAssign) -> None:
    self._bind_target(node.target, node)

  def visit_AugAssign(self, node: cst.AugAssign) -> None:
    self._bind_target(node.target, node)

  def visit_For(self, node: cst.For) -> None:
    self._bind_target(node.target, node)

  def visit_WithItem(self, node: cst.WithItem) -> None:
    if node.asname is not None:
      self._bind_target(node.asname.name, node)

  def visit_ExceptHandler(self, node: cst.ExceptHandler) -> None:
    if node.name is not None:
      self._bind_target(node.name.name, node)

  def visit_NamedExpr(self, node: cst.NamedExpr) -> None:
    self._bind_target(node.target, node)


def _imports_from(node: cst.CSTNode, sources: Tuple[str, ...], name: str) -> bool:
  """True if `node` is ``from <one of sources> import <name>`` binding it unaliased."""
  if not isinstance(node, cst.ImportFrom) or node.relative or node.module is None:
    return False
  if get_full_name(node.module) not in sources or isinstance(node.names, cst.ImportStar):
    return False
  return any(alias.asname is None and get_full_name(alias.name) == name for alias in node.names)


def foreign_bindings(module: cst.Module, expected: Dict[str, Tuple[str, ...]]) -> List[str]:
  """
  Finds names the module binds to something other than the expected import.

  Args:
    module: Parsed module.
    expected: For each name, the modules it may be imported from.

  Returns:
    List[str]: Names of `expected` that are also bound by a class, function,
    assignment, aliased import or import from another module.
  """
  scanner = ModuleBindingScanner()
  module.visit(scanner)
  conflicts = []
  for name, sources in expected.items():
    for node in scanner.bindings.get(name, []):
      if not _imports_from(node, sources, name):
        conflicts.append(name)
        break
  return conflicts
