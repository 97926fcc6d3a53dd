"""Single source of truth for the der-cli version string."""

from __future__ import annotations

__version__: str = "1.0.0"

PACKAGE_NAME: str = "der-cli"
"""Distribution name queried on the package registry."""
