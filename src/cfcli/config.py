"""Where cfcli keeps its files, and how one invocation's settings are chosen.

* **Directories** -- ``config.json`` lives in the config directory, the
  compiled ``command_tree.json`` and crash logs in the data directory
  (XDG locations on Linux/BSD, ``~/.cfcli/`` elsewhere).
* **Global config** -- one :class:`~cfcli.models.GlobalConfig` holding the
  user's defaults: tree path, endpoint, token source, account/zone ids
  and request settings.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables and the global config into the effective
  :class:`~cfcli.models.Settings` of one invocation.
* **Credential resolution** -- :func:`resolve_credential` reads the API
  token from an env var, a file, or an interactive prompt.

Both the config file and the command tree are written with
:func:`atomic_write`, so a reader never sees a half-written file.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from cfcli.exceptions import ConfigError
from cfcli.models import GlobalConfig, Settings

_APP_NAME = "cfcli"
_CONFIG_FILENAME = "config.json"
_TREE_FILENAME = "command_tree.json"

ENV_API_URL = "CLOUDFLARE_API_URL"
ENV_ACCOUNT_ID = "CLOUDFLARE_ACCOUNT_ID"
ENV_ZONE_ID = "CLOUDFLARE_ZONE_ID"
ENV_TREE = "CFCLI_TREE"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Linux and the BSDs use XDG base directories."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, or ``~/<default_segments>``."""
    value = os.environ.get(env_var)
    if value:
        return Path(value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/cfcli/`` (default ``~/.config/cfcli/``).
    On macOS/Windows: ``~/.cfcli/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (command tree, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/cfcli/`` (default ``~/.local/share/cfcli/``).
    On macOS/Windows: ``~/.cfcli/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def default_tree_path() -> Path:
    """Where ``cfcli gen`` writes the command tree when not told otherwise."""
    return get_data_dir() / _TREE_FILENAME


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* in one rename.

    The temp file sits next to *path* (same filesystem); on failure it is
    removed and *path* keeps its previous content.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~cfcli.models.GlobalConfig`. If the file
        does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Write *config* to ``config.json``."""
    data = config.model_dump(mode="json")
    atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_settings(
    cli_endpoint: Optional[str] = None,
    cli_tree: Optional[str] = None,
) -> Settings:
    """Resolve the effective settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_endpoint``, ``cli_tree``)
        2. Environment variables (``CLOUDFLARE_API_URL``, ``CFCLI_TREE``,
           ``CLOUDFLARE_ACCOUNT_ID``, ``CLOUDFLARE_ZONE_ID``)
        3. User config (``~/.config/cfcli/config.json``)
        4. Defaults

    The endpoint stays ``None`` when no layer sets it; callers then use the
    endpoint recorded in the command tree.
    """
    global_cfg = load_global_config()

    tree_path = (
        cli_tree
        or os.environ.get(ENV_TREE)
        or global_cfg.tree_path
        or str(default_tree_path())
    )
    endpoint = cli_endpoint or os.environ.get(ENV_API_URL) or global_cfg.endpoint

    return Settings(
        tree_path=tree_path,
        endpoint=endpoint,
        token_source=global_cfg.token_source,
        account_id=os.environ.get(ENV_ACCOUNT_ID) or global_cfg.account_id,
        zone_id=os.environ.get(ENV_ZONE_ID) or global_cfg.zone_id,
        request=global_cfg.request,
        pretty=global_cfg.output.pretty,
    )


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Return the API token named by *source*.

    *source* is ``env:VAR`` (non-empty environment variable), ``file:PATH``
    (file content, whitespace stripped) or ``prompt`` (hidden input, TTY
    only).

    Raises:
        ConfigError: If the token cannot be obtained from *source*.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if not value:
            raise ConfigError(f"{var_name} missing (source: {source})")
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Cloudflare API token: ")

    raise ConfigError(f"Unknown credential source format: {source}")
