# src/kedit/__init__.py
"""kedit: a minimal screen-oriented terminal text editor."""

__version__ = "0.1.0"
