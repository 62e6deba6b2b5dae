"""Canonical Pydantic models shared across all cfcli modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Command-tree models** -- the artifact produced by the compiler in
:mod:`cfcli.generator` and consumed by the CLI at start-up:
    :class:`HTTPMethod`, :class:`ParamDef`, :class:`Operation`,
    :class:`Resource`, and :class:`CommandTree`. They are frozen: once a tree
    has been compiled (or loaded from disk) it is read-only.

**Configuration models** -- serialised as JSON in the user's config
directory:
    :class:`RequestConfig`, :class:`OutputConfig`, :class:`GlobalConfig`,
    plus the resolved :class:`Settings` used by a single invocation.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Command tree ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods the compiler looks for on every path item.

    Definition order is the traversal order used by
    :func:`~cfcli.generator.compiler.compile_tree`, which keeps the
    generated operation order reproducible.
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"


class ParamDef(BaseModel):
    """A single request parameter of an :class:`Operation`.

    ``name`` is the identifier from the OpenAPI document and is what goes on
    the wire; ``flag`` is the CLI-safe slug used for ``--flag`` options.
    Only ``path``, ``query`` and ``header`` locations are acted upon when a
    request is built; other locations are carried through untouched.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    flag: str
    location: str
    required: bool = False
    list: bool = Field(default=False, description="Accepts multiple values")
    schema_type: Optional[str] = Field(
        default=None,
        description="Primitive type name, or the element type when list is true",
    )
    description: Optional[str] = None


class Operation(BaseModel):
    """One (method, path, tag) combination, rendered as one CLI command."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    method: str
    path: str
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: list[ParamDef] = Field(default_factory=list)
    has_body: bool = False


class Resource(BaseModel):
    """A tag-derived group of operations, rendered as one command group.

    ``name`` is the slug of the tag and ``display_name`` the raw tag text of
    its first occurrence. Operation names are unique within a resource.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    ops: list[Operation] = Field(default_factory=list)

    def find_op(self, name: str) -> Optional[Operation]:
        """Return the operation called *name*, or ``None``."""
        for op in self.ops:
            if op.name == name:
                return op
        return None


class CommandTree(BaseModel):
    """Root of the compiled artifact.

    Written once by ``cfcli gen`` and loaded read-only by every later CLI
    invocation. Resource names are unique across the tree.

    See Also:
        :func:`~cfcli.generator.compiler.compile_tree`: Builds a tree.
        :func:`~cfcli.generator.artifact.load_tree`: Loads one from disk.
    """

    model_config = ConfigDict(frozen=True)

    version: int
    endpoint: str
    resources: list[Resource] = Field(default_factory=list)

    def find_resource(self, name: str) -> Optional[Resource]:
        """Return the resource called *name*, or ``None``."""
        for resource in self.resources:
            if resource.name == name:
                return resource
        return None

    def find_op(self, resource: str, op: str) -> Optional[Operation]:
        """Look up an operation by resource name and operation name."""
        found = self.find_resource(resource)
        if found is None:
            return None
        return found.find_op(op)


# --- Configuration ---


class RequestConfig(BaseModel):
    """Default HTTP request settings applied to every API call."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    max_retries: int = Field(default=2, description="Max retry attempts")


class OutputConfig(BaseModel):
    """Default output preferences stored in :class:`GlobalConfig`."""

    pretty: bool = Field(default=False, description="Pretty-print JSON output")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/cfcli/config.json``.

    Loaded and saved by :func:`~cfcli.config.load_global_config` and
    :func:`~cfcli.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by environment variables or CLI
    flags. See :func:`~cfcli.config.resolve_settings` for the full chain.
    """

    tree_path: Optional[str] = Field(
        default=None, description="Location of the compiled command tree"
    )
    endpoint: Optional[str] = Field(
        default=None, description="Override the API base URL from the tree"
    )
    token_source: str = Field(
        default="env:CLOUDFLARE_API_TOKEN",
        description="Credential source for the API token: env:VAR, file:/path, prompt",
    )
    account_id: Optional[str] = Field(
        default=None, description="Default for account_id path parameters"
    )
    zone_id: Optional[str] = Field(
        default=None, description="Default for zone_id path parameters"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


class Settings(BaseModel):
    """Effective settings for one invocation, after precedence resolution.

    Produced by :func:`~cfcli.config.resolve_settings`. ``endpoint`` is
    ``None`` when neither a flag, the environment nor the config file sets
    one; the caller then falls back to the endpoint recorded in the tree.
    """

    tree_path: str
    endpoint: Optional[str] = None
    token_source: str
    account_id: Optional[str] = None
    zone_id: Optional[str] = None
    request: RequestConfig = Field(default_factory=RequestConfig)
    pretty: bool = False
