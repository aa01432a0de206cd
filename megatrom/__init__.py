"""Simulated disk storage: sector files grouped into blocks, loaded from CSV relations."""

__version__ = "0.1.0"