"""Persist and load the compiled command tree.

The tree is written once by ``cfcli gen`` and read at the start of every
later invocation. It is stored as indented JSON whose field names and
nesting mirror :class:`~cfcli.models.CommandTree`; identical trees always
serialise to byte-identical text so the artifact diffs cleanly.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from cfcli.config import atomic_write
from cfcli.exceptions import TreeLoadError
from cfcli.models import CommandTree


def dump_tree(tree: CommandTree) -> str:
    """Serialise *tree* to JSON text with a trailing newline."""
    data = tree.model_dump(mode="json")
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_tree(tree: CommandTree, path: Path) -> None:
    """Atomically write *tree* to *path*, creating parent directories."""
    atomic_write(path, dump_tree(tree))


def load_tree(path: Path) -> CommandTree:
    """Load and validate a command tree from *path*.

    Raises:
        TreeLoadError: If the file is missing, is not JSON, or does not
            match the :class:`~cfcli.models.CommandTree` shape.
    """
    if not path.is_file():
        raise TreeLoadError(f"Command tree not found at {path}")
    try:
        text = path.read_text(encoding="utf-8")
        return CommandTree.model_validate(json.loads(text))
    except OSError as exc:
        raise TreeLoadError(f"Cannot read command tree {path}: {exc}") from exc
    except (json.JSONDecodeError, ValidationError) as exc:
        raise TreeLoadError(f"Invalid command tree at {path}: {exc}") from exc
