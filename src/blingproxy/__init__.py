"""Bling product lookup proxy."""

__version__ = "0.1.0"
