"""Sanakota: Finnish dictionary API and batch tools."""

__version__ = "0.1.0"
