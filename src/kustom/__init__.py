"""Kustom: a small tree-walking interpreter for an Indonesian-keyword scripting language."""

__version__ = "0.1.0"
