"""docker-wine - Run Wine inside a Docker container over X11 or RDP."""

from __future__ import annotations

__version__ = "1.0.0"
