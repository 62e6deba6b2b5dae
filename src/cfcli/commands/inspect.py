"""Inspect commands -- examine the compiled command tree.

Provides the read-only ``list``, ``describe`` and ``tree`` commands. All of
them load the tree from the resolved tree path (``--tree``, ``CFCLI_TREE``,
config, or the data directory) and print plain text, or JSON with
``--json``.
"""

from __future__ import annotations

import typer

from cfcli.commands.dynamic import get_tree
from cfcli.exceptions import NotFoundError
from cfcli.models import CommandTree
from cfcli.output import print_data, print_json


def _print_listing(tree: CommandTree) -> None:
    for resource in tree.resources:
        print_data(f"{resource.name} ({resource.display_name})")
        for op in resource.ops:
            print_data(f"  {op.name} ({op.display_name})")


def list_command(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Emit JSON."),
) -> None:
    """List resources and their operations.

    Example::

        cfcli list
        cfcli list --json
    """
    tree = get_tree(ctx)
    if as_json:
        print_json(
            [
                {
                    "resource": resource.name,
                    "display": resource.display_name,
                    "ops": [op.name for op in resource.ops],
                }
                for resource in tree.resources
            ],
            pretty=True,
        )
        return
    _print_listing(tree)


def describe_command(
    ctx: typer.Context,
    resource: str = typer.Argument(help="Resource name, e.g. 'zones'."),
    op: str = typer.Argument(help="Operation name, e.g. 'zones-get'."),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON."),
) -> None:
    """Show the method, path and parameters of one operation.

    Args:
        ctx: Typer invocation context.
        resource: Resource name as shown by ``cfcli list``.
        op: Operation name within that resource.
        as_json: Dump the operation as JSON instead of text.

    Raises:
        NotFoundError: If no such resource/operation pair exists.

    Example::

        cfcli describe dns-records dns-records-for-a-zone-list-dns-records
    """
    found = get_tree(ctx).find_op(resource, op)
    if found is None:
        raise NotFoundError(f"unknown command {resource} {op}")

    if as_json:
        print_json(found.model_dump(mode="json"), pretty=True)
        return

    print_data(f"{found.method} {found.path}")
    print_data(f"name: {found.display_name}")
    if found.summary is not None:
        print_data(f"summary: {found.summary}")
    if found.description is not None:
        print_data(f"description: {found.description}")
    if found.parameters:
        print_data("params:")
        for param in found.parameters:
            required = "true" if param.required else "false"
            print_data(f"  --{param.flag} ({param.location}, required: {required})")


def tree_command(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Dump the full tree as JSON."),
) -> None:
    """Show the command tree.

    Example::

        cfcli tree --json > tree.json
    """
    tree = get_tree(ctx)
    if as_json:
        print_json(tree.model_dump(mode="json"), pretty=True)
        return
    _print_listing(tree)
