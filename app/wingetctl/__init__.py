"""wingetctl - winget-based patch management agent for Windows endpoints."""

__version__ = "0.1.0"
