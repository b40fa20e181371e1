"""
lombocator Package.

Collapses boilerplate accessor methods into field markers. A method that does
nothing but return a field (``get_name``) or store its argument in a field
(``set_name``) is removed and the field's declared type gains a ``Getter`` or
``Setter`` marker through ``typing.Annotated``. The class is decorated with
``@accessors``, which restores the collapsed methods at import time.

Usage
-----

Simple String Rewrite
^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import lombocator
    code = '''
    class Person:
        name: str

        def get_name(self):
            return self.name
    '''
    print(lombocator.rewrite_source(code))
    # from typing import Annotated
    # from lombocator.markers import Getter
    # from lombocator.markers import accessors
    #
    # @accessors
    # class Person:
    #     name: Annotated[str, Getter]

Source Tree Rewrite
^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from pathlib import Path
    from lombocator import AccessorEngine, RuntimeConfig

    engine = AccessorEngine(RuntimeConfig(source_dir=Path("src")))
    result = engine.run()
    print(result.ledger.entries())
"""

from lombocator.config import RuntimeConfig
from lombocator.core.engine import AccessorEngine
from lombocator.core.mutator import DEFAULT_MARKER_MODULE

__version__ = "0.0.1"


def rewrite_source(code: str, marker_module: str = DEFAULT_MARKER_MODULE) -> str:
  """
  Rewrites the trivial accessors of a string of Python code.

  Args:
      code (str): The source code to rewrite.
      marker_module (str): Module the markers are imported from.

  Returns:
      str: The rewritten source code (identical to `code` if nothing matched).

  Raises:
      libcst.ParserSyntaxError: If `code` is not valid Python.
  """
  engine = AccessorEngine(RuntimeConfig(marker_module=marker_module))
  new_code, _ = engine.rewrite_code(code)
  return new_code


__all__ = [
  "AccessorEngine",
  "RuntimeConfig",
  "rewrite_source",
  "__version__",
]
