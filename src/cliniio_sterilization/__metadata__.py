"""Project Metadata based on it's``pyproject.toml``."""

from __future__ import annotations

import importlib.metadata

__all__ = ("__project__", "__version__")

__version__ = importlib.metadata.version("cliniio-sterilization")
"""Version of the project."""
__project__ = importlib.metadata.metadata("cliniio-sterilization")["Name"]
"""Name of the project."""
