"""cfcli -- a Cloudflare API client whose commands come from the OpenAPI description.

The package has two halves. The *compiler* turns an OpenAPI document into a
command tree -- resources grouped by tag, operations with flag-ready
parameter metadata -- and persists it as a JSON artifact. The *CLI* loads
that artifact at start-up, renders every resource and operation into a
command, and turns invocations into HTTP requests against the API.

Typical workflow::

    cfcli gen --openapi openapi.yaml      # compile the command tree
    cfcli dns list-dns-records --zone-id 023e105f4ecef8ad9ca31a8372d0c353

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models for the command tree and configuration.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
