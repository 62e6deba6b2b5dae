"""``cfcli gen`` -- compile an OpenAPI document into the command-tree artifact."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import typer

from cfcli.commands.dynamic import get_settings
from cfcli.generator import compile_tree, write_tree
from cfcli.output import debug, info, print_data, success
from cfcli.parser import load_spec

DEFAULT_OPENAPI_URL = "https://raw.githubusercontent.com/cloudflare/api-schemas/main/openapi.yaml"
ENV_OPENAPI_URL = "OPENAPI_URL"


def gen_command(
    ctx: typer.Context,
    openapi: Optional[str] = typer.Option(
        None,
        "--openapi",
        help="OpenAPI document: URL, file path, or '-' for stdin. "
        "Defaults to $OPENAPI_URL or the public Cloudflare schema.",
    ),
    out: Optional[Path] = typer.Option(
        None, "--out", help="Where to write the tree. Defaults to the resolved tree path."
    ),
) -> None:
    """Generate the command tree from an OpenAPI document.

    Loads the document, compiles it, and writes the tree atomically. A
    summary goes to stderr and the written path to stdout.

    Args:
        ctx: Typer invocation context.
        openapi: Source of the OpenAPI document.
        out: Destination of the tree artifact.

    Raises:
        SpecParseError: If the document cannot be loaded or has no ``paths``.

    Example::

        cfcli gen
        cfcli gen --openapi ./openapi.yaml --out ./command_tree.json
    """
    source = openapi or os.environ.get(ENV_OPENAPI_URL) or DEFAULT_OPENAPI_URL
    target = out or Path(get_settings(ctx).tree_path)

    info(f"Loading OpenAPI document from {source}")
    document = load_spec(source)
    tree = compile_tree(document)

    op_count = sum(len(resource.ops) for resource in tree.resources)
    debug(f"Endpoint {tree.endpoint}, version {tree.version}")
    write_tree(tree, target)

    success(f"Compiled {len(tree.resources)} resources, {op_count} operations.")
    print_data(str(target))
