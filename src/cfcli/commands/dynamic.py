"""Render the command tree into invocable commands.

Each :class:`~cfcli.models.Resource` becomes a :class:`~typer.core.TyperGroup`
and each of its :class:`~cfcli.models.Operation` entries an
:class:`OperationCommand` whose options mirror the operation's parameters::

    cfcli dns-records list-dns-records --zone-id 023e105f --per-page 50

The commands are assembled from Typer's core classes instead of decorated
functions because their signatures are only known at runtime. Using Typer's
classes keeps parsing, ``--help`` and usage errors on the same click that
drives the root application.

This module also owns the per-invocation state shared by every API command
(resolved settings, the loaded tree, the request pipeline), kept on the
root :class:`typer.Context`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import typer
from typer.core import TyperCommand, TyperGroup, TyperOption

from cfcli.client.request import PreparedRequest, build_request, load_body, param_key
from cfcli.client.response import render_response
from cfcli.client.sync_client import ApiClient, raise_for_status
from cfcli.config import resolve_credential, resolve_settings
from cfcli.exceptions import TreeLoadError
from cfcli.generator.artifact import load_tree
from cfcli.generator.compiler import DEFAULT_ENDPOINT
from cfcli.models import CommandTree, Operation, ParamDef, Resource, Settings

logger = logging.getLogger(__name__)

_SETTINGS_KEY = "cfcli.settings"
_TREE_KEY = "cfcli.tree"

_BODY_OPTIONS = ("body", "body-file")


# ---------------------------------------------------------------------------
# Invocation state
# ---------------------------------------------------------------------------


def get_settings(ctx: typer.Context) -> Settings:
    """Resolve (once per invocation) the effective settings.

    Reads ``--endpoint`` and ``--tree`` from the root context's parsed
    parameters, so it also works before the root callback has run.
    """
    root = ctx.find_root()
    settings = root.meta.get(_SETTINGS_KEY)
    if settings is None:
        settings = resolve_settings(
            cli_endpoint=root.params.get("endpoint"),
            cli_tree=root.params.get("tree"),
        )
        root.meta[_SETTINGS_KEY] = settings
    return settings


def get_tree(ctx: typer.Context) -> CommandTree:
    """Load (once per invocation) the command tree from the resolved path.

    Raises:
        TreeLoadError: If the artifact is missing or invalid.
    """
    root = ctx.find_root()
    tree = root.meta.get(_TREE_KEY)
    if tree is None:
        tree = load_tree(Path(get_settings(ctx).tree_path))
        root.meta[_TREE_KEY] = tree
    return tree


def get_options(ctx: typer.Context) -> dict[str, Any]:
    """Return the global options stored by the root callback."""
    obj = ctx.find_root().obj
    return obj if isinstance(obj, dict) else {}


def resolve_endpoint(ctx: typer.Context) -> str:
    """Endpoint precedence: flag / env / config, then the tree, then the default.

    The tree is loaded on demand so that ``cfcli api`` honours the endpoint
    recorded by ``cfcli gen``; a missing or invalid tree is not an error
    here.
    """
    settings = get_settings(ctx)
    if settings.endpoint:
        return settings.endpoint
    try:
        return get_tree(ctx).endpoint
    except TreeLoadError as exc:
        logger.debug("No tree endpoint (%s), using %s", exc, DEFAULT_ENDPOINT)
        return DEFAULT_ENDPOINT


def run_request(ctx: typer.Context, request: PreparedRequest) -> None:
    """Send *request*, print the response and map HTTP errors to exceptions.

    Global ``--header`` values are appended to the request headers; the
    response is printed before any error is raised so that the API's error
    payload is always visible.

    Raises:
        ConfigError: If the API token cannot be resolved.
        AuthError, NotFoundError, ServerError: On HTTP error statuses.
        ConnectionError_: On network failures after all retries.
    """
    settings = get_settings(ctx)
    options = get_options(ctx)
    token = resolve_credential(settings.token_source)

    with ApiClient(
        base_url=resolve_endpoint(ctx),
        token=token,
        request_config=settings.request,
        dry_run=options.get("dry_run", False),
    ) as client:
        response = client.execute(
            request.method,
            request.path,
            query=request.query,
            headers=[*request.headers, *options.get("headers", [])],
            body=request.body,
        )

    render_response(
        response,
        raw=options.get("raw", False),
        pretty=options.get("pretty", False) or settings.pretty,
    )
    raise_for_status(response)


# ---------------------------------------------------------------------------
# Command construction
# ---------------------------------------------------------------------------


class OperationCommand(TyperCommand):
    """Command bound to one :class:`~cfcli.models.Operation`.

    ``bindings`` maps each option's destination name to the parameter it
    carries. Invoking the command builds the request from the parsed
    values and sends it.
    """

    def __init__(
        self,
        op: Operation,
        bindings: dict[str, ParamDef],
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.operation = op
        self.bindings = bindings

    def invoke(self, ctx: typer.Context) -> None:
        values = {}
        for dest, param in self.bindings.items():
            raw = ctx.params.get(dest)
            # an unused repeatable option parses as an empty tuple
            values[param_key(param)] = raw if raw else None

        body = None
        if self.operation.has_body:
            body = load_body(ctx.params.get("body"), ctx.params.get("body_file"))

        settings = get_settings(ctx)
        request = build_request(
            self.operation,
            values,
            account_id=settings.account_id,
            zone_id=settings.zone_id,
            body=body,
        )
        run_request(ctx, request)


def build_resource_group(resource: Resource) -> TyperGroup:
    """Build the command group for *resource*.

    Operations whose name normalised to an empty string are not rendered
    since they cannot be typed on a command line.
    """
    group = TyperGroup(
        name=resource.name,
        help=resource.display_name,
        no_args_is_help=True,
        rich_markup_mode=None,
    )
    for op in resource.ops:
        if not op.name:
            logger.debug("Skipping unnamed operation %s in %s", op.display_name, resource.name)
            continue
        group.add_command(build_operation_command(op))
    return group


def build_operation_command(op: Operation) -> OperationCommand:
    """Build the command that invokes *op*.

    One ``--flag`` option per parameter (repeatable for list parameters),
    plus ``--body`` / ``--body-file`` when the operation takes a body.
    Help is rendered as plain text: descriptions come straight from the
    OpenAPI document and must not be read as Rich markup.
    """
    taken: set[str] = {"help"}
    params: list[TyperOption] = []
    bindings: dict[str, ParamDef] = {}

    if op.has_body:
        taken.update(_BODY_OPTIONS)
        params.append(
            TyperOption(
                param_decls=["--body", "body"],
                default=None,
                help="JSON request body, or @path to read it from a file.",
            )
        )
        params.append(
            TyperOption(
                param_decls=["--body-file", "body_file"],
                default=None,
                help="Path to a file holding the JSON request body.",
            )
        )

    for index, param in enumerate(op.parameters):
        option_name = option_name_for(param, taken)
        if option_name is None:
            logger.debug("Skipping parameter %r of %s: no usable flag", param.name, op.name)
            continue
        taken.add(option_name)
        dest = f"param_{index}"
        bindings[dest] = param
        params.append(
            TyperOption(
                param_decls=[f"--{option_name}", dest],
                multiple=param.list,
                default=None,
                help=_param_help(param),
            )
        )

    help_text = op.display_name
    if op.summary:
        help_text = f"{help_text}\n\n{op.summary}"

    return OperationCommand(
        op,
        bindings,
        name=op.name,
        params=params,
        help=help_text,
        short_help=op.summary or op.display_name,
        rich_markup_mode=None,
    )


def option_name_for(param: ParamDef, taken: set[str]) -> Optional[str]:
    """Pick the option name for *param* given the names already *taken*.

    The flag itself is preferred; on a collision it is qualified with the
    location (``--query-name``), then numbered (``--query-name-2``).
    Returns ``None`` when the flag is empty.
    """
    if not param.flag:
        return None
    if param.flag not in taken:
        return param.flag
    candidate = f"{param.location}-{param.flag}"
    idx = 2
    qualified = candidate
    while qualified in taken:
        qualified = f"{candidate}-{idx}"
        idx += 1
    return qualified


def _param_help(param: ParamDef) -> str:
    parts = [param.location]
    if param.required:
        parts.append("required")
    if param.list:
        parts.append("repeatable, comma-separated")
    label = f"({', '.join(parts)})"
    if param.description:
        return f"{param.description} {label}"
    return label
