"""Command-tree compiler -- turn an OpenAPI document into a CommandTree.

This sub-package is the second half of the compile pipeline: taking the
plain document produced by :func:`~cfcli.parser.load_spec` and building the
:class:`~cfcli.models.CommandTree` artifact that the CLI renders into
commands.

Typical usage::

    from cfcli.generator import compile_tree, write_tree

    tree = compile_tree(document)
    write_tree(tree, Path("schemas/command_tree.json"))

Sub-modules:

* :mod:`~cfcli.generator.naming` -- Slug normalisation and unique-name
  assignment.
* :mod:`~cfcli.generator.params` -- Parameter extraction, schema type
  inference and path/operation merging.
* :mod:`~cfcli.generator.compiler` -- Metadata extraction, traversal and
  grouping of operations into resources.
* :mod:`~cfcli.generator.artifact` -- Serialising, writing and loading the
  tree.
"""

from cfcli.generator.artifact import dump_tree, load_tree, write_tree
from cfcli.generator.compiler import compile_tree

__all__ = ["compile_tree", "dump_tree", "load_tree", "write_tree"]
