"""
Field Markers.

The vocabulary imported by rewritten files::

    from typing import Annotated
    from lombocator.markers import Getter, accessors

    @accessors
    class Person:
        name: Annotated[str, Getter]
        active: Annotated[bool, Getter('is_active')]

A marker records which accessor of the field was collapsed. Bare ``Getter``
and ``Setter`` stand for ``get_<field>`` and ``set_<field>``; any other method
name is carried as ``Getter('<name>')``. The `accessors` class decorator reads
the markers when the class is created and puts the collapsed methods back, so
callers of ``person.get_name()`` keep working after the rewrite.
"""

import builtins
import inspect
import sys
import typing
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from lombocator.enums import AccessorKind


class AccessorMarker:
  """
  A marker placed in ``Annotated`` metadata.

  Calling a marker with a method name returns a marker of the same kind that
  regenerates the accessor under that name.
  """

  __slots__ = ("kind", "method")

  def __init__(self, kind: AccessorKind, method: Optional[str] = None) -> None:
    self.kind = kind
    self.method = method

  def __call__(self, method: str) -> "AccessorMarker":
    return AccessorMarker(self.kind, method)

  def method_for(self, field: str) -> str:
    """Name of the accessor method this marker stands for on `field`."""
    return self.method or self.kind.default_method(field)

  def __eq__(self, other: object) -> bool:
    if not isinstance(other, AccessorMarker):
      return NotImplemented
    return self.kind is other.kind and self.method == other.method

  def __hash__(self) -> int:
    return hash((self.kind, self.method))

  def __repr__(self) -> str:
    if self.method is None:
      return self.kind.value
    return f"{self.kind.value}({self.method!r})"


Getter = AccessorMarker(AccessorKind.GETTER)
Setter = AccessorMarker(AccessorKind.SETTER)


class _Unresolved:
  """Stands in for names a string annotation uses but the module never binds."""

  def __getattr__(self, name: str) -> "_Unresolved":
    return self

  def __getitem__(self, item: Any) -> "_Unresolved":
    return self

  def __call__(self, *args: Any, **kwargs: Any) -> "_Unresolved":
    return self

  def __or__(self, other: Any) -> "_Unresolved":
    return self

  __ror__ = __or__


class _LenientNamespace(dict):
  """
  Evaluation namespace for string annotations.

  Names bound neither by the class nor by its module, such as imports guarded
  by ``TYPE_CHECKING``, resolve to a placeholder so that the ``Annotated``
  metadata can still be read.
  """

  def __missing__(self, key: str) -> Any:
    return getattr(builtins, key, _Unresolved())


def _own_annotations(cls: type) -> Dict[str, Any]:
  try:
    return inspect.get_annotations(cls)
  except NameError:
    # Deferred annotations (3.14+) may name classes defined later in the module
    import annotationlib

    return annotationlib.get_annotations(cls, format=annotationlib.Format.FORWARDREF)


def _evaluate(cls: type, hint: str) -> Any:
  # Module globals take precedence over class attributes, as in `typing.get_type_hints`
  module = sys.modules.get(cls.__module__)
  namespace = _LenientNamespace(vars(cls))
  namespace.setdefault(cls.__name__, cls)
  if module is not None:
    namespace.update(vars(module))
  return eval(hint, {"__builtins__": builtins}, namespace)


def _declared_markers(cls: type) -> Iterator[Tuple[str, AccessorMarker]]:
  for name, hint in _own_annotations(cls).items():
    if isinstance(hint, str):
      hint = _evaluate(cls, hint)
    if typing.get_origin(hint) is not typing.Annotated:
      continue
    for meta in hint.__metadata__:
      if isinstance(meta, AccessorMarker):
        yield name, meta


def _make_getter(field: str) -> Callable[[Any], Any]:
  def getter(self):
    return getattr(self, field)

  return getter


def _make_setter(field: str) -> Callable[[Any, Any], None]:
  def setter(self, value):
    setattr(self, field, value)

  return setter


def accessors(cls: type) -> type:
  """
  Class decorator restoring the accessor methods named by field markers.

  Methods the class body already defines are left alone.

  Args:
      cls: The decorated class.

  Returns:
      type: The same class, with one method added per marker.
  """
  for field, marker in _declared_markers(cls):
    method_name = marker.method_for(field)
    if method_name in vars(cls):
      continue
    if marker.kind is AccessorKind.GETTER:
      method = _make_getter(field)
    else:
      method = _make_setter(field)
    method.__name__ = method_name
    method.__qualname__ = f"{cls.__qualname__}.{method_name}"
    method.__module__ = cls.__module__
    setattr(cls, method_name, method)
  return cls


def marked_fields(cls: type, marker: AccessorMarker) -> List[str]:
  """
  Lists the fields of `cls` whose annotation carries a marker of the same
  kind as `marker`.

  Args:
      cls: A class, typically loaded from a rewritten module.
      marker: `Getter` or `Setter`.

  Returns:
      List[str]: Field names in declaration order (base classes first).
  """
  hints = typing.get_type_hints(cls, include_extras=True)
  found = []
  for name, hint in hints.items():
    if typing.get_origin(hint) is not typing.Annotated:
      continue
    if any(isinstance(meta, AccessorMarker) and meta.kind is marker.kind for meta in hint.__metadata__):
      found.append(name)
  return found
