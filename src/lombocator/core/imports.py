"""
Supporting Declaration Injection.

Adds the module-scope imports required by attached markers. Each required
symbol yields at most one line, and symbols the module already imports are
skipped. New lines go after the module docstring and any ``__future__``
imports.
"""

from typing import Iterable, List, Sequence

import libcst as cst
from libcst import matchers as m

from lombocator.core.model import SupportingDeclaration
from lombocator.core.scanners import module_imports_name

# `Annotated` is accepted from either module; new imports use the first.
ANNOTATED_SOURCES = ("typing", "typing_extensions")

_DOCSTRING = m.SimpleStatementLine(body=[m.Expr(value=m.SimpleString() | m.ConcatenatedString())])
_FUTURE_IMPORT = m.SimpleStatementLine(body=[m.ZeroOrMore(), m.ImportFrom(module=m.Name("__future__")), m.ZeroOrMore()])


def header_length(body: Sequence[cst.BaseStatement]) -> int:
  """Number of leading statements that must stay above new imports."""
  idx = 0
  if body and m.matches(body[0], _DOCSTRING):
    idx = 1
  while idx < len(body) and m.matches(body[idx], _FUTURE_IMPORT):
    idx += 1
  return idx


def build_import(declaration: SupportingDeclaration) -> cst.SimpleStatementLine:
  """Builds ``from <module> import <name>``."""
  module = cst.parse_expression(declaration.module)
  return cst.SimpleStatementLine(body=[cst.ImportFrom(module=module, names=[cst.ImportAlias(name=cst.Name(declaration.name))])])


def is_satisfied(module: cst.Module, declaration: SupportingDeclaration) -> bool:
  if declaration.name == "Annotated" and declaration.module in ANNOTATED_SOURCES:
    return any(module_imports_name(module, source, "Annotated") for source in ANNOTATED_SOURCES)
  return module_imports_name(module, declaration.module, declaration.name)


def inject_declarations(module: cst.Module, declarations: Iterable[SupportingDeclaration]) -> cst.Module:
  """
  Inserts the missing supporting imports into a module.

  Args:
      module: The module to update.
      declarations: Required imports, in the order they should appear.

  Returns:
      cst.Module: The module with the missing imports added, or the same
      module object if nothing was missing.
  """
  injections: List[cst.SimpleStatementLine] = []
  seen = set()
  for declaration in declarations:
    if declaration in seen or is_satisfied(module, declaration):
      continue
    seen.add(declaration)
    injections.append(build_import(declaration))

  if not injections:
    return module

  body = list(module.body)
  insert_idx = header_length(body)
  return module.with_changes(body=body[:insert_idx] + injections + body[insert_idx:])
