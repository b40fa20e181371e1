"""
Data Model for the Rewrite Engine.

Lightweight views over LibCST nodes. LibCST trees are immutable, so the
mutable state of a rewrite lives here: a `TypeDeclaration` owns the ordered
list of class-body statements that is edited in place, and a `SourceUnit`
owns the parsed module together with the supporting imports and the
transformation records collected while it was scanned.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence, Set, Union

import libcst as cst
from pydantic import BaseModel, ConfigDict, Field

from lombocator.core.scanners import annotated_markers, annotated_metadata, type_qualifier
from lombocator.enums import AccessorKind, FileState


@dataclass
class FieldMember:
  """
  A field declared in a class body.

  Attributes:
      name: Declared variable name.
      annotation: Declared type expression, None for unannotated assignments.
      statement: The class-body line holding the declaration.
      single_variable: False if the statement declares more than one variable.
  """

  name: str
  annotation: Optional[cst.BaseExpression]
  statement: cst.SimpleStatementLine
  single_variable: bool = True

  @property
  def markers(self) -> List[str]:
    """Names of the markers already carried by the declared type."""
    if self.annotation is None:
      return []
    return annotated_metadata(self.annotation)

  @property
  def qualifier(self) -> str:
    """``ClassVar``/``Final``/``InitVar`` wrapping the declared type, or empty."""
    if self.annotation is None:
      return ""
    return type_qualifier(self.annotation)

  def marked_method(self, kind: AccessorKind) -> Optional[str]:
    """
    Name of the accessor the field's `kind` marker stands for.

    Returns:
        Optional[str]: None if the field carries no such marker; an empty
        string if the marker's argument is not a string literal.
    """
    if self.annotation is None:
      return None
    for name, method in annotated_markers(self.annotation):
      if name == kind.value:
        return kind.default_method(self.name) if method is None else method
    return None

  @property
  def declaration(self) -> Optional[cst.AnnAssign]:
    """The annotated assignment node, if this is a single annotated field."""
    if self.single_variable and isinstance(self.statement.body[0], cst.AnnAssign):
      return self.statement.body[0]
    return None


@dataclass
class MethodMember:
  """
  A `def` statement found directly in a class body.
  """

  node: cst.FunctionDef

  @property
  def name(self) -> str:
    return self.node.name.value

  @property
  def receiver(self) -> Optional[cst.Param]:
    """The first positional parameter (conventionally `self`)."""
    params = self.node.params.params
    return params[0] if params else None

  @property
  def parameters(self) -> Sequence[cst.Param]:
    """Positional parameters following the receiver."""
    return self.node.params.params[1:]

  @property
  def statements(self) -> Optional[Sequence[cst.BaseSmallStatement]]:
    """
    Small statements of the body when it consists of a single simple line.

    Returns None for compound bodies (`if`, `for`, `with`, nested `def`, ...)
    and for bodies spread over several lines, which are never trivial.
    """
    body = self.node.body
    if isinstance(body, cst.SimpleStatementSuite):
      return body.body
    if len(body.body) != 1:
      return None
    line = body.body[0]
    if not isinstance(line, cst.SimpleStatementLine):
      return None
    return line.body


class TypeDeclaration:
  """
  Mutable view over the body of a single class.

  Members are kept in source order. Only the immediate body is considered;
  nested classes are separate declarations.
  """

  def __init__(self, name: str, members: Sequence[cst.BaseStatement]) -> None:
    self.name = name
    self.members: List[cst.BaseStatement] = list(members)

  @classmethod
  def from_class(cls, node: cst.ClassDef) -> "TypeDeclaration":
    body = node.body
    members = body.body if isinstance(body, cst.IndentedBlock) else []
    return cls(node.name.value, members)

  def methods(self) -> List[MethodMember]:
    return [MethodMember(m) for m in self.members if isinstance(m, cst.FunctionDef)]

  def bound_names(self) -> Set[str]:
    """Names of the methods and nested classes declared in the body."""
    return {m.name.value for m in self.members if isinstance(m, (cst.FunctionDef, cst.ClassDef))}

  def index_of(self, node: cst.CSTNode) -> int:
    """
    Finds a member by identity.

    Raises:
        ValueError: If the node is not a member of this declaration.
    """
    for idx, member in enumerate(self.members):
      if member is node:
        return idx
    raise ValueError(f"Node is not a member of class '{self.name}'")

  def replace_member(self, old: cst.BaseStatement, new: cst.BaseStatement) -> None:
    self.members[self.index_of(old)] = new

  def remove_member(self, node: cst.BaseStatement) -> None:
    del self.members[self.index_of(node)]


@dataclass(frozen=True)
class AccessorCandidate:
  """A method proven to be a trivial accessor of `field`."""

  method: MethodMember
  field: FieldMember
  kind: AccessorKind


class SupportingDeclaration(NamedTuple):
  """A `from <module> import <name>` line required at module scope."""

  module: str
  name: str


class TransformationRecord(BaseModel):
  """
  One applied rewrite: a trivial accessor replaced by a field marker.
  """

  model_config = ConfigDict(frozen=True)

  kind: AccessorKind = Field(description="Marker kind that replaced the method.")
  type_name: str = Field(description="Name of the enclosing class.")
  field_name: str = Field(description="Name of the field that received the marker.")
  method_name: str = Field(default="", description="Name of the removed method.")
  path: Optional[str] = Field(default=None, description="Source file the rewrite happened in.")

  @property
  def entry(self) -> str:
    """
    Report line for this record.

    Returns:
        str: e.g. ``"Getter -> field: Person.name"``.
    """
    return f"{self.kind.value} -> field: {self.type_name}.{self.field_name}"


@dataclass
class SourceUnit:
  """
  One parsed source file and the state accumulated while rewriting it.
  """

  module: cst.Module
  path: Optional[Path] = None
  state: FileState = FileState.LOADED
  requirements: Dict[SupportingDeclaration, None] = field(default_factory=dict)
  records: List[TransformationRecord] = field(default_factory=list)

  @classmethod
  def parse(cls, code: Union[str, bytes], path: Optional[Path] = None) -> "SourceUnit":
    """
    Parses source text. Bytes are decoded using the file's declared
    encoding and serialised back with it.

    Raises:
        libcst.ParserSyntaxError: If the code is not valid Python.
    """
    return cls(module=cst.parse_module(code), path=path)

  @property
  def code(self) -> str:
    return self.module.code

  def require(self, module: str, name: str) -> None:
    """Records a supporting import; repeated requests collapse into one."""
    self.requirements.setdefault(SupportingDeclaration(module, name), None)

  def iter_requirements(self) -> Iterator[SupportingDeclaration]:
    return iter(self.requirements)
