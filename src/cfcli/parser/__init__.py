"""OpenAPI document loading and untyped-document access.

This sub-package is the first half of the compile pipeline: turning a raw
OpenAPI document (JSON or YAML, local file, remote URL or stdin) into a plain
Python value, and giving the compiler total accessors over that value.

Typical usage::

    from cfcli.parser import load_spec
    from cfcli.generator import compile_tree

    document = load_spec("schemas/openapi.yaml")
    tree = compile_tree(document)

Sub-modules:

* :mod:`~cfcli.parser.loader` -- Reading (URL, file, stdin), format
  detection and a top-level shape check.
* :mod:`~cfcli.parser.document` -- Accessors that read fields of a generic
  document value without ever raising on a type mismatch.
"""

from cfcli.parser.loader import load_spec

__all__ = ["load_spec"]
