"""Interactive column alignment for line-oriented text buffers."""

__all__ = [
    "actions",
    "adapters",
    "align",
    "buffer",
    "keymaps",
    "modes",
    "runtime",
]

__version__ = "0.1.0"
