"""Evaluator helper modules for the Ergolas runtime."""

__all__ = [
    "blocks",
    "chains",
    "expr",
    "helpers",
]
