"""Dimensioned quantities: storage types, units, systems, conversion and formatting."""

__version__ = "0.1.0"

__all__ = ["storage", "units", "dimension", "quantity", "formatting"]