"""Built-in sub-commands and the renderer for tree-derived API commands."""
