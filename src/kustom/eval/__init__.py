"""Evaluator helper modules for the Kustom runtime."""

__all__ = [
    "blocks",
    "bind",
    "chains",
    "common",
    "expr",
    "fn",
    "helpers",
    "let",
    "loops",
    "objects",
]
