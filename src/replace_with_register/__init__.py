"""Replace text with a register in a UI-agnostic Vim editing engine."""

__all__ = [
    "actions",
    "buffer",
    "host",
    "keymaps",
    "modes",
    "repeat",
    "replace",
    "runtime",
]

__version__ = "0.1.0"
